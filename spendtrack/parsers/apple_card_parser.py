"""Apple Card statement parser.

Apple Card statements have a Transactions table with a Daily Cash column
between the description and the amount:

    Transactions
    Date Description Daily Cash Amount
    01/05/2025 WHOLE FOODS MARKET 123 MAIN ST SAN FRANCISCO 94105 CA USA 2% $0.90 $45.00

and a Payments table where ACH deposits carry a negative amount:

    Payments
    Date Description Amount
    01/20/2025 ACH Deposit MERCHANT REFUND -$20.00

Text extraction is inconsistent around the percentage column, so rows the
primary pattern misses get a second, looser pass.
"""

import logging
import re
from typing import List, Set

from .base_parser import BaseStatementParser
from ..cleaning import clean_apple_card_description, is_transfer_or_payment
from ..models import Direction, Transaction
from ..utils import parse_amount, parse_date

logger = logging.getLogger(__name__)

TRANSACTIONS_SECTION_PATTERN = re.compile(
    r'Transactions[\s\S]*?Date[\s\S]*?Description[\s\S]*?Daily Cash[\s\S]*?Amount([\s\S]*?)'
    r'(?=Payments|Daily Cash Summary|Total Daily Cash|$)',
    re.IGNORECASE
)
PAYMENTS_SECTION_PATTERN = re.compile(
    r'Payments[\s\S]*?Date[\s\S]*?Description[\s\S]*?Amount([\s\S]*?)'
    r'(?=Daily Cash Summary|Interest Charged|Total|Transactions|$)',
    re.IGNORECASE
)

# date, description, daily cash %, daily cash $, amount
PRIMARY_ROW_PATTERN = re.compile(
    r'(\d{2}/\d{2}/\d{4})\s+([\s\S]+?)\s+(\d+%)\s*\$\d+\.\d{2}\s+\$(\d{1,3}(?:,\d{3})*\.\d{2})'
)
FALLBACK_ROW_PATTERN = re.compile(
    r'(\d{2}/\d{2}/\d{4})\s+([\s\S]+?)\s+(\d+%)\s*\$[\d,]+\.\d{2}\s+\$(\d{1,3}(?:,\d{3})*\.\d{2})'
)
PAYMENT_ROW_PATTERN = re.compile(
    r'(\d{2}/\d{2}/\d{4})\s+ACH Deposit\s+([^-$]+?)\s+-\$(\d{1,3}(?:,\d{3})*\.\d{2})'
)

MIN_DESCRIPTION_LENGTH = 3


class AppleCardParser(BaseStatementParser):
    """Parser for Apple Card PDF statements."""

    bank_key = 'apple_card'

    def parse(self, pages: List[str]) -> List[Transaction]:
        """
        Parse Apple Card purchases and payment-section credits.

        Args:
            pages: Page texts in document order

        Returns:
            Purchases in statement order, followed by credits
        """
        full_text = '\n'.join(pages)
        transactions = []

        transactions_text = self.find_section(full_text, TRANSACTIONS_SECTION_PATTERN)
        if transactions_text:
            transactions.extend(self._parse_purchases(self._normalize_whitespace(transactions_text)))
        else:
            logger.warning("No Transactions section found in Apple Card statement")

        payments_text = self.find_section(full_text, PAYMENTS_SECTION_PATTERN)
        if payments_text:
            transactions.extend(self._parse_payments(payments_text))

        logger.info(f"Parsed {len(transactions)} Apple Card transactions")
        return transactions

    @staticmethod
    def _normalize_whitespace(text: str) -> str:
        """Collapse runs of spaces/tabs while keeping line breaks."""
        text = re.sub(r'[ \t]+', ' ', text)
        text = re.sub(r' *\n *', '\n', text)
        return text.strip()

    def _parse_purchases(self, section_text: str) -> List[Transaction]:
        transactions = []
        matched: Set[str] = set()

        for match in PRIMARY_ROW_PATTERN.finditer(section_text):
            date_str, raw_description, _, amount_str = match.groups()
            matched.add(f"{date_str}-{amount_str}")
            transaction = self._build_purchase(date_str, raw_description, amount_str)
            if transaction:
                transactions.append(transaction)

        fallback_count = 0
        for match in FALLBACK_ROW_PATTERN.finditer(section_text):
            date_str, raw_description, _, amount_str = match.groups()
            if f"{date_str}-{amount_str}" in matched:
                continue
            transaction = self._build_purchase(date_str, raw_description, amount_str)
            if transaction:
                transactions.append(transaction)
                fallback_count += 1

        if fallback_count:
            logger.debug(f"Fallback pattern recovered {fallback_count} rows")

        return transactions

    def _build_purchase(self, date_str: str, raw_description: str, amount_str: str):
        if len(raw_description) < MIN_DESCRIPTION_LENGTH or self.should_skip(raw_description):
            return None

        # Transfer check runs on the raw text, before merchant mappings
        if is_transfer_or_payment(raw_description):
            return None

        title = clean_apple_card_description(raw_description, self.category_config)
        return self._build(date_str, title, amount_str, Direction.SPEND)

    def _parse_payments(self, section_text: str) -> List[Transaction]:
        transactions = []

        for match in PAYMENT_ROW_PATTERN.finditer(section_text):
            date_str, raw_description, amount_str = match.groups()

            if is_transfer_or_payment(raw_description):
                continue

            title = clean_apple_card_description(raw_description, self.category_config)
            if len(title) < MIN_DESCRIPTION_LENGTH:
                continue

            transaction = self._build(date_str, title, amount_str, Direction.CREDIT)
            if transaction:
                transactions.append(transaction)

        return transactions

    def _build(self, date_str: str, title: str, amount_str: str, direction: Direction):
        amount = parse_amount(amount_str, self.stats)
        if amount <= 0 or len(title) < 2:
            return None

        timestamp = parse_date(date_str, self.stats)
        return self.emit(timestamp, amount, title, direction)
