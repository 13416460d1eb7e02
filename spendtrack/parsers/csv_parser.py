"""CSV statement export parser.

Card issuers export CSVs with different headers for the same three fields.
Columns are located by case-insensitive header synonyms, so any export with
a recognisable date, amount and description column can be imported even
when the issuer itself is unknown.
"""

import logging
from io import StringIO
from typing import Dict, List, Optional

import pandas as pd

from .base_parser import MissingColumnsError, StatementParseError, TransactionIdGenerator
from ..cleaning import (
    categorize_transaction,
    clean_merchant_name,
    is_transfer_or_payment,
    merchant_or_unknown
)
from ..config import BankConfig, BankConfigLoader, CategoryConfig, get_bank_config_loader, get_region_config
from ..config.settings import DEFAULT_CATEGORY, UNKNOWN_SOURCE
from ..models import Direction, ParseResult, Transaction
from ..utils import ParseStats, is_negative_amount, parse_amount, parse_date

logger = logging.getLogger(__name__)

DATE_COLUMNS = ['date', 'timestamp', 'time', 'transaction date', 'trans date', 'posted date']
AMOUNT_COLUMNS = ['amount', 'value', 'total', 'price', 'cost', 'debit', 'transaction amount']
TITLE_COLUMNS = ['title', 'description', 'name', 'merchant', 'vendor', 'payee', 'transaction description']


def find_column(normalized_fields: Dict[str, str], synonyms: List[str]) -> Optional[str]:
    """
    Find the first header matching a synonym list.

    Args:
        normalized_fields: Lower-cased, trimmed header -> original header
        synonyms: Accepted names in preference order

    Returns:
        Original header name, or None
    """
    for key in synonyms:
        if key in normalized_fields:
            return normalized_fields[key]
    return None


class CSVStatementParser:
    """
    Parse CSV statement exports.

    Usage:
        parser = CSVStatementParser()
        result = parser.parse_text(text, filename="chase_jan.csv")
    """

    def __init__(
        self,
        bank_loader: Optional[BankConfigLoader] = None,
        category_config: Optional[CategoryConfig] = None
    ):
        self.bank_loader = bank_loader or get_bank_config_loader()
        self.category_config = category_config

    def read_frame(self, text: str) -> pd.DataFrame:
        """
        Read CSV text into a DataFrame of strings.

        Raises:
            StatementParseError: If the file is empty or not valid CSV
        """
        if not text or not text.strip():
            raise StatementParseError("Empty CSV file")

        try:
            df = pd.read_csv(
                StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                skipinitialspace=True
            )
        except pd.errors.EmptyDataError as e:
            raise StatementParseError("Empty CSV file") from e
        except pd.errors.ParserError as e:
            raise StatementParseError(f"Could not read CSV: {e}") from e

        if df.empty:
            raise StatementParseError("Empty CSV file")

        return df

    def parse_text(self, text: str, filename: str = '') -> ParseResult:
        """
        Parse CSV text into transactions.

        Args:
            text: Full CSV text including the header row
            filename: Original file name (used for issuer detection)

        Returns:
            ParseResult (may hold zero transactions)

        Raises:
            StatementParseError: If the file is empty or unreadable
            MissingColumnsError: If a date, amount or title column is missing
        """
        df = self.read_frame(text)

        fields = [str(column) for column in df.columns]
        normalized_fields: Dict[str, str] = {}
        for field in fields:
            normalized_fields.setdefault(field.lower().strip(), field)

        date_col = find_column(normalized_fields, DATE_COLUMNS)
        amount_col = find_column(normalized_fields, AMOUNT_COLUMNS)
        title_col = find_column(normalized_fields, TITLE_COLUMNS)

        if not date_col or not amount_col or not title_col:
            raise MissingColumnsError(
                f"Could not identify required columns. Found: {', '.join(fields)}. "
                f"Need date, amount, and title/description columns."
            )

        content = ' '.join(' '.join(row) for row in df.itertuples(index=False, name=None))
        # A content match (e.g. a card payment row in a checking export) names
        # the source but says nothing about how that file signs its amounts.
        filename_config = self.bank_loader.detect_bank_by_filename(filename)
        bank_config = filename_config or self.bank_loader.detect_bank_by_content(content)
        sign_convention = filename_config.csv_sign_convention if filename_config else 'ignore'
        source = bank_config.display_name if bank_config else UNKNOWN_SOURCE

        stats = ParseStats()
        transactions = self._parse_rows(df, date_col, amount_col, title_col, bank_config, sign_convention, stats)

        logger.info(f"Parsed {len(transactions)} CSV transactions (source: {source})")
        return ParseResult(
            transactions=transactions,
            source=source,
            region=bank_config.region if bank_config else None,
            currency=bank_config.currency if bank_config else None,
            filename=filename or None,
            stats=stats,
        )

    def _parse_rows(
        self,
        df: pd.DataFrame,
        date_col: str,
        amount_col: str,
        title_col: str,
        bank_config: Optional[BankConfig],
        sign_convention: str,
        stats: ParseStats
    ) -> List[Transaction]:
        ids = TransactionIdGenerator()
        dayfirst = self._dayfirst(bank_config)
        defer = bank_config.defer_categorization if bank_config else False
        source = bank_config.display_name if bank_config else UNKNOWN_SOURCE

        transactions = []
        for row in df.to_dict(orient='records'):
            raw_title = (row.get(title_col) or '').strip()
            raw_amount = row.get(amount_col) or ''

            if not raw_title or is_transfer_or_payment(raw_title):
                continue

            amount = parse_amount(raw_amount, stats)
            if amount <= 0:
                continue

            timestamp = parse_date(row.get(date_col) or '', stats, dayfirst=dayfirst)
            title = merchant_or_unknown(clean_merchant_name(raw_title, self.category_config))
            direction = self._direction(raw_amount, sign_convention)
            category = DEFAULT_CATEGORY if defer else categorize_transaction(title, self.category_config)

            transactions.append(Transaction(
                id=ids.next_id(timestamp, amount, title, direction),
                timestamp=timestamp,
                amount=amount,
                title=title,
                category=category,
                source=source,
                direction=direction,
                region=bank_config.region if bank_config else None,
                currency=bank_config.currency if bank_config else None,
            ))

        return transactions

    @staticmethod
    def _direction(raw_amount: str, sign_convention: str) -> Direction:
        """Classify a row from the sign of its amount."""
        negative = is_negative_amount(raw_amount)
        if sign_convention == 'charges_positive' and negative:
            return Direction.CREDIT
        if sign_convention == 'charges_negative' and not negative:
            return Direction.CREDIT
        return Direction.SPEND

    @staticmethod
    def _dayfirst(bank_config: Optional[BankConfig]) -> bool:
        if not bank_config or not bank_config.region:
            return False
        try:
            return get_region_config(bank_config.region).dayfirst
        except KeyError:
            return False
