"""Statement parsers for PDF layouts and CSV exports."""
from .base_parser import (
    BaseStatementParser,
    TransactionIdGenerator,
    StatementParseError,
    UnrecognizedStatementError,
    NoTransactionsFoundError,
    MissingColumnsError
)
from .amex_parser import AmexParser
from .apple_card_parser import AppleCardParser
from .us_bank_parser import USBankParser
from .asb_parser import ASBParser, determine_amount_and_type
from .csv_parser import CSVStatementParser
from .registry import ParserRegistry, get_default_registry
from .statement_parser import StatementParser

__all__ = [
    'BaseStatementParser',
    'TransactionIdGenerator',
    'StatementParseError',
    'UnrecognizedStatementError',
    'NoTransactionsFoundError',
    'MissingColumnsError',
    'AmexParser',
    'AppleCardParser',
    'USBankParser',
    'ASBParser',
    'determine_amount_and_type',
    'CSVStatementParser',
    'ParserRegistry',
    'get_default_registry',
    'StatementParser',
]
