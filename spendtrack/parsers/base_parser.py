"""Base statement parser with shared utilities for all issuer parsers.

This module provides the abstract base class that every issuer-specific PDF
parser inherits from, plus the error hierarchy shared by all parsers.

A parser receives the extracted text of each page and returns Transaction
objects. The base class owns everything that is the same across layouts:

- Detection against the issuer's configured filename and content markers
- Section slicing (most layouts mix several tables in one text blob)
- Skip checks for header/footer labels swallowed by a row pattern
- Transaction emission: categorization, issuer labels and IDs

Common Parsing Patterns:
-----------------------

1. Section isolation:
   PDF text extraction discards table structure, so "Credits" and
   "New Charges" (Amex) or "Transactions" and "Payments" (Apple Card) end
   up in one stream. Slice the section first with find_section() and run
   the row pattern only inside that slice.

2. Transfer check before cleaning:
   Call is_transfer_or_payment() on the RAW description. Merchant mappings
   can rewrite a description into something that no longer looks like a
   transfer.

3. Occurrence-counted IDs:
   Two coffees at the same cafe on the same day are two real transactions.
   IDs are a content key plus a per-key counter, so repeats stay distinct
   and the ledger can still recognise a re-imported statement.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Pattern

from ..cleaning import categorize_transaction
from ..config import BankConfig, CategoryConfig
from ..config.settings import DEFAULT_CATEGORY
from ..models import Direction, Transaction
from ..utils import ParseStats, to_iso

logger = logging.getLogger(__name__)


class StatementParseError(Exception):
    """Base exception for statement parsing errors."""
    pass


class UnrecognizedStatementError(StatementParseError):
    """Raised when no parser recognises a document."""
    pass


class NoTransactionsFoundError(StatementParseError):
    """Raised when a recognised document yields zero transactions."""
    pass


class MissingColumnsError(StatementParseError):
    """Raised when a CSV lacks a required column."""
    pass


class TransactionIdGenerator:
    """
    Build occurrence-counted transaction IDs for one parse.

    The base key is the direction flag, timestamp, amount and title with
    every non-alphanumeric character removed. The n-th row sharing a base
    key gets ``<base>-<n>``, so IDs depend on order of first appearance.
    """

    CREDIT_FLAG = 'CR'
    SPEND_FLAG = 'CH'

    def __init__(self):
        self._counts: Dict[str, int] = {}

    def next_id(
        self,
        timestamp: datetime,
        amount: float,
        title: str,
        direction: Direction = Direction.SPEND
    ) -> str:
        flag = self.CREDIT_FLAG if direction is Direction.CREDIT else self.SPEND_FLAG
        base_key = re.sub(r'[^a-zA-Z0-9]', '', f"{flag}-{to_iso(timestamp)}-{amount:.2f}-{title}")

        occurrence = self._counts.get(base_key, 0) + 1
        self._counts[base_key] = occurrence
        return f"{base_key}-{occurrence}"


class BaseStatementParser(ABC):
    """
    Abstract base class for issuer-specific PDF statement parsers.

    Subclasses must implement:
    - parse(): Row extraction for their issuer's layout

    A parser instance holds per-parse state (ID counters and fallback
    stats), so a fresh instance is created for every document.
    """

    # Key of the issuer's YAML configuration (data/banks/<key>.yaml)
    bank_key: str = ''

    def __init__(self, bank_config: BankConfig, category_config: Optional[CategoryConfig] = None):
        """
        Initialize parser with issuer configuration.

        Args:
            bank_config: Issuer configuration (detection markers, skip labels)
            category_config: Category tables (default: global config)
        """
        self.config = bank_config
        self.category_config = category_config
        self.stats = ParseStats()
        self._ids = TransactionIdGenerator()
        self._skip_regexes = self._compile_skip_patterns()

    def _compile_skip_patterns(self) -> List[Pattern]:
        regexes = []
        for pattern in self.config.skip_patterns:
            try:
                regexes.append(re.compile(pattern, re.IGNORECASE))
            except re.error as e:
                logger.error(f"Invalid skip pattern for {self.config.bank_name}: {e}")
        return regexes

    @property
    def source(self) -> str:
        """Issuer label attached to every parsed transaction."""
        return self.config.display_name

    @property
    def region(self) -> Optional[str]:
        return self.config.region

    @property
    def currency(self) -> Optional[str]:
        return self.config.currency

    def detect_filename(self, filename: str) -> bool:
        """Check the file name against the issuer's filename markers."""
        return self.config.matches_filename(filename)

    def detect_content(self, text: str) -> bool:
        """Check document text against the issuer's content markers."""
        return self.config.matches_content(text)

    def detect(self, filename: str = '', content: str = '') -> bool:
        """Check whether this parser recognises a document."""
        return self.detect_filename(filename) or self.detect_content(content)

    @abstractmethod
    def parse(self, pages: List[str]) -> List[Transaction]:
        """
        Parse transactions from the extracted text of each page.

        Args:
            pages: Page texts in document order

        Returns:
            Parsed transactions in statement order (may be empty)
        """
        pass

    @staticmethod
    def find_section(text: str, pattern: Pattern) -> Optional[str]:
        """
        Slice a named section out of the document text.

        Args:
            text: Full document text
            pattern: Regex whose first group captures the section body

        Returns:
            Section body, or None if the section is absent
        """
        match = pattern.search(text)
        if match and match.group(1):
            return match.group(1)
        return None

    def should_skip(self, description: str) -> bool:
        """Check a raw description against the issuer's skip labels."""
        text = (description or '').strip()
        return any(regex.search(text) for regex in self._skip_regexes)

    def categorize(self, title: str) -> str:
        """Category for a cleaned title, honouring deferred categorization."""
        if self.config.defer_categorization:
            return DEFAULT_CATEGORY
        return categorize_transaction(title, self.category_config)

    def emit(
        self,
        timestamp: datetime,
        amount: float,
        title: str,
        direction: Direction = Direction.SPEND
    ) -> Transaction:
        """
        Build a Transaction for a row that passed every filter.

        Args:
            timestamp: Row date (UTC)
            amount: Positive amount
            title: Cleaned merchant title
            direction: Spend or credit

        Returns:
            Transaction with an occurrence-counted ID
        """
        return Transaction(
            id=self._ids.next_id(timestamp, amount, title, direction),
            timestamp=timestamp,
            amount=amount,
            title=title,
            category=self.categorize(title),
            source=self.source,
            direction=direction,
            region=self.region,
            currency=self.currency,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config.bank_name!r})"
