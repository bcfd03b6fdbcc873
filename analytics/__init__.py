from analytics.annual_summary import annual_summary_frame, build_annual_summary
from analytics.categorizer import classify_txn_type
from analytics.lot_queue import build_buy_queue, build_sale_queue
from analytics.reporting import allocations_frame, export_allocations_csv, uncovered_frame
from analytics.trade_matcher import match_all, match_asset
