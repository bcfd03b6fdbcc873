from parsers.base import TransactionParseError, parse_quantity, parse_timestamp
from parsers.parser_csv import import_transactions, read_ledger, remap_headers
