"""ASB Bank (New Zealand) statement parser.

ASB Streamline statements print day and month only, followed by up to three
amount columns (debit, deposit, balance):

    Opening date   18 Nov 25          Closing date   17 Dec 25
    19 Nov   Card 1234 Christchurch Countdown Riccarton   45.60   1,234.56
    02 Dec   Acme Ltd 01-Dec-2025 Salary/Wagespay Ended   0.00   2,500.00   3,734.56

Dates are day-first and amounts are NZD. Rows are left uncategorized for
a later categorization pass.
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

from .base_parser import BaseStatementParser
from ..cleaning import clean_regional_merchant_name
from ..config import RegionConfig, get_region_config
from ..models import Direction, Transaction
from ..utils import build_date, month_number, parse_amount, resolve_year

logger = logging.getLogger(__name__)

OPENING_DATE_PATTERN = re.compile(r'Opening date\s+(\d{1,2})\s+(\w+)\s+(\d{2})')
CLOSING_DATE_PATTERN = re.compile(r'Closing date\s+(\d{1,2})\s+(\w+)\s+(\d{2})')

_AMOUNT = r'(\d{1,3}(?:,\d{3})*\.\d{2})'
ROW_PATTERN = re.compile(
    r'(\d{1,2})\s+(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+(.*?)\s+'
    + _AMOUNT + r'(?:[ \t]+' + _AMOUNT + r')?(?:[ \t]+' + _AMOUNT + r')?[ \t]*$',
    re.MULTILINE
)

# Table header fragments the row pattern can pick up
HEADER_MARKERS = ('Transaction', 'Debit/Withdrawal')

# Without a closing date, a row month before a start month in Aug-Dec is
# taken to be in the following year
LATE_START_MONTH = 8


def determine_amount_and_type(amounts: List[float]) -> Tuple[float, Direction]:
    """
    Pick the transaction amount and direction from a row's amount columns.

    With two amounts the first is the transaction and the second the
    balance; the column it came from cannot be told apart in extracted
    text, so the row is treated as a debit. With three amounts the columns
    are debit, deposit, balance.

    Args:
        amounts: Parsed amounts in column order

    Returns:
        Tuple of (amount, direction); amount 0 rejects the row
    """
    if len(amounts) == 2:
        return abs(amounts[0]), Direction.SPEND

    if len(amounts) == 3:
        debit, deposit = amounts[0], amounts[1]
        if deposit > 0 and debit == 0:
            return deposit, Direction.CREDIT
        return debit, Direction.SPEND

    return 0.0, Direction.SPEND


class ASBParser(BaseStatementParser):
    """Parser for ASB Bank PDF statements."""

    bank_key = 'asb'

    def __init__(self, bank_config, category_config=None, region_config: Optional[RegionConfig] = None):
        super().__init__(bank_config, category_config)
        self.region_config = region_config or get_region_config(bank_config.region or 'NZ')

    def parse(self, pages: List[str]) -> List[Transaction]:
        """
        Parse ASB rows page by page.

        Args:
            pages: Page texts in document order

        Returns:
            Transactions in statement order
        """
        full_text = '\n'.join(pages)
        opening = self._find_header_date(full_text, OPENING_DATE_PATTERN)
        closing = self._find_header_date(full_text, CLOSING_DATE_PATTERN)

        if opening is None:
            logger.warning("Opening date not found - assuming current year")

        transactions = []
        for page_num, page_text in enumerate(pages, start=1):
            page_transactions = self._parse_page(page_text, opening, closing)
            logger.debug(f"Page {page_num}: found {len(page_transactions)} transactions")
            transactions.extend(page_transactions)

        logger.info(f"Parsed {len(transactions)} ASB transactions")
        return transactions

    def _parse_page(self, page_text: str, opening: Optional[date], closing: Optional[date]) -> List[Transaction]:
        transactions = []

        for match in ROW_PATTERN.finditer(page_text):
            day_str, month_str, description, *amount_strs = match.groups()
            description = description.strip()

            if not description or any(marker in description for marker in HEADER_MARKERS):
                continue
            if self.should_skip(description):
                continue

            amounts = [parse_amount(a, self.stats) for a in amount_strs if a]
            amount, direction = determine_amount_and_type(amounts)
            if amount <= 0:
                continue

            month = month_number(month_str)
            year = self._resolve_row_year(month, opening, closing)
            timestamp = build_date(year, month, int(day_str), self.stats)

            title = clean_regional_merchant_name(description, self.region_config)
            transactions.append(self.emit(timestamp, amount, title, direction))

        return transactions

    @staticmethod
    def _resolve_row_year(month: int, opening: Optional[date], closing: Optional[date]) -> int:
        if opening is None:
            return datetime.now(timezone.utc).year
        if closing is not None:
            return resolve_year(month, opening, closing)
        if month < opening.month and opening.month >= LATE_START_MONTH:
            return opening.year + 1
        return opening.year

    @staticmethod
    def _find_header_date(text: str, pattern: re.Pattern) -> Optional[date]:
        """Read a 'DD Mon YY' header date."""
        match = pattern.search(text)
        if not match:
            return None

        month = month_number(match.group(2))
        if month is None:
            return None
        try:
            return date(2000 + int(match.group(3)), month, int(match.group(1)))
        except ValueError:
            logger.warning(f"Invalid header date: {match.group(0)!r}")
            return None
