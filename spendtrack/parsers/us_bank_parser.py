"""U.S. Bank credit card statement parser.

Rows carry a posting date, a transaction date, a reference and the
description, with no year:

    10 / 22   10 / 21   2443   STARBUCKS STORE 12345 SEATTLE WA   $5.75

The year comes from the statement period printed in the header, where the
extracted text often splits the year in two ("09 / 26 / 20 25").
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import List, Tuple

from .base_parser import BaseStatementParser
from ..cleaning import clean_merchant_name, is_transfer_or_payment
from ..models import Direction, Transaction
from ..utils import build_date, parse_amount, resolve_year

logger = logging.getLogger(__name__)

PERIOD_PATTERN = re.compile(
    r'(\d{2})\s*/\s*(\d{2})\s*/\s*(\d{2})\s*(\d{2})\s*-\s*'
    r'(\d{2})\s*/\s*(\d{2})\s*/\s*(\d{2})\s*(\d{2})'
)

ROW_PATTERN = re.compile(
    r'(\d{1,2}\s*/\s*\d{1,2})\s+(\d{1,2}\s*/\s*\d{1,2})\s+([A-Z0-9]+)\s+([\s\S]+?)\s+'
    r'\$(\d{1,3}(?:,\d{3})*\.\d{2})'
)

MIN_DESCRIPTION_LENGTH = 3


class USBankParser(BaseStatementParser):
    """Parser for U.S. Bank PDF statements. Every admitted row is a purchase."""

    bank_key = 'us_bank'

    def parse(self, pages: List[str]) -> List[Transaction]:
        """
        Parse U.S. Bank purchases.

        Args:
            pages: Page texts in document order

        Returns:
            Purchases in statement order
        """
        full_text = ' '.join(pages)
        period_start, period_end = self.extract_statement_period(full_text)
        transactions = []

        for match in ROW_PATTERN.finditer(full_text):
            _, trans_date, _, raw_description, amount_str = match.groups()
            description = ' '.join(raw_description.split())

            if self.should_skip(description) or len(description) < MIN_DESCRIPTION_LENGTH:
                continue

            # Card payments are not spending
            if 'PAYMENT' in description.upper() or is_transfer_or_payment(description):
                continue

            title = clean_merchant_name(description, self.category_config)
            if is_transfer_or_payment(title):
                continue

            amount = parse_amount(amount_str, self.stats)
            if amount <= 0 or len(title) < 2:
                continue

            month, day = (int(part) for part in re.sub(r'\s+', '', trans_date).split('/'))
            year = resolve_year(month, period_start, period_end)
            timestamp = build_date(year, month, day, self.stats)

            transactions.append(self.emit(timestamp, amount, title, Direction.SPEND))

        logger.info(f"Parsed {len(transactions)} US Bank transactions")
        return transactions

    @staticmethod
    def extract_statement_period(text: str) -> Tuple[date, date]:
        """
        Find the statement period in the header.

        Falls back to January-December of the current year when no period
        is printed.

        Returns:
            Tuple of (period_start, period_end)
        """
        match = PERIOD_PATTERN.search(text)
        if not match:
            logger.warning("Statement period not found - assuming current calendar year")
            year = datetime.now(timezone.utc).year
            return date(year, 1, 1), date(year, 12, 31)

        start_month, start_day, sy1, sy2, end_month, end_day, ey1, ey2 = (
            int(group) for group in match.groups()
        )
        try:
            return (
                date(sy1 * 100 + sy2, start_month, start_day),
                date(ey1 * 100 + ey2, end_month, end_day),
            )
        except ValueError:
            logger.warning(f"Invalid statement period: {match.group(0)!r}")
            year = datetime.now(timezone.utc).year
            return date(year, 1, 1), date(year, 12, 31)
