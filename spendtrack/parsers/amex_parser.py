"""American Express statement parser.

Amex statements list activity in two sections, each row ending in a
diamond marker:

    Credits Amount
    01/10/25* AMAZON MARKETPLACE REFUND -$25.00 ⧫
    New Charges Summary ... Detail ... Amount
    01/15/25 TST* JOE'S PIZZA 415-555-1234 $25.50 ⧫

A page break inside the charges table injects the account footer and the
continued-table header into the text stream:

    01/30/25 Account Ending 1-23456 ... Detail Continued ⧫ - Pay Over Time
    ... Amount 01/31/25 BLUE BOTTLE COFFEE $6.50 ⧫

The row pattern then sees the footer as the start of a description. The
real date is the one after the header; the footer text is discarded.
"""

import logging
import re
from typing import List

from .base_parser import BaseStatementParser
from ..cleaning import clean_merchant_name, is_transfer_or_payment
from ..models import Direction, Transaction
from ..utils import build_date, parse_amount

logger = logging.getLogger(__name__)

CREDITS_SECTION_PATTERN = re.compile(r'Credits\s+Amount([\s\S]*?)(?=New Charges|$)', re.IGNORECASE)
CHARGES_SECTION_PATTERN = re.compile(
    r'New Charges[\s\S]*?Detail[\s\S]*?Amount([\s\S]*?)'
    r'(?=Fees\s+Amount|Interest Charged|\d{4} Fees and Interest|$)',
    re.IGNORECASE
)

# MM/DD/YY (optional * marks the posting date) ... description ... $amount ⧫
ROW_PATTERN = re.compile(r'(\d{2}/\d{2}/\d{2})\*?\s+([\s\S]*?)(-?\$[\d,]+\.\d{2})\s*⧫')

PAGE_BREAK_PATTERN = re.compile(
    r'Account Ending.*?Detail Continued\s+⧫\s+-\s+Pay Over Time.*?Amount\s+(\d{2}/\d{2}/\d{2})\*?\s*'
)

MIN_DESCRIPTION_LENGTH = 3


class AmexParser(BaseStatementParser):
    """Parser for American Express PDF statements."""

    bank_key = 'american_express'

    def parse(self, pages: List[str]) -> List[Transaction]:
        """
        Parse Amex credits and new charges.

        Args:
            pages: Page texts in document order

        Returns:
            Credits first, then charges, each in statement order
        """
        full_text = ' '.join(' '.join(pages).split())
        transactions = []

        credits_text = self.find_section(full_text, CREDITS_SECTION_PATTERN)
        if credits_text:
            transactions.extend(self._parse_section(credits_text, Direction.CREDIT))

        charges_text = self.find_section(full_text, CHARGES_SECTION_PATTERN)
        if charges_text:
            transactions.extend(self._parse_section(charges_text, Direction.SPEND))

        if credits_text is None and charges_text is None:
            logger.warning("No Credits or New Charges section found in Amex statement")

        logger.info(f"Parsed {len(transactions)} Amex transactions")
        return transactions

    def _parse_section(self, section_text: str, direction: Direction) -> List[Transaction]:
        transactions = []

        for match in ROW_PATTERN.finditer(section_text):
            date_str, raw_description, amount_str = match.groups()

            # Credits listed under charges are reported in the Credits section
            if direction is Direction.SPEND and amount_str.startswith('-'):
                continue

            description = raw_description.strip()
            if len(description) < MIN_DESCRIPTION_LENGTH or self.should_skip(description):
                continue

            date_str, description = self._repair_page_break(date_str, description)

            if is_transfer_or_payment(description):
                continue

            title = clean_merchant_name(description, self.category_config)
            if is_transfer_or_payment(title):
                continue

            amount = parse_amount(amount_str, self.stats)
            if amount <= 0 or len(title) < MIN_DESCRIPTION_LENGTH:
                continue

            month, day, year = (int(part) for part in date_str.split('/'))
            timestamp = build_date(2000 + year, month, day, self.stats)

            transactions.append(self.emit(timestamp, amount, title, direction))

        return transactions

    @staticmethod
    def _repair_page_break(date_str: str, description: str):
        """
        Recover the true date and description of a row split by a page break.

        Returns:
            Tuple of (date_str, description)
        """
        match = PAGE_BREAK_PATTERN.search(description)
        if not match:
            return date_str, description

        logger.debug("Repaired Amex row split by a page break")
        repaired = (description[:match.start()] + ' ' + description[match.end():]).strip()
        return match.group(1), repaired
