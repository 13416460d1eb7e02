"""In-memory deduplicating transaction ledger.

The ledger is the only shared state of a session. It is never written to
disk. Merges are not safe for concurrent use; callers serialize writes
(see StatementImporter).
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .config.settings import ALL_CATEGORIES_LABEL
from .models import ALL_CATEGORIES, Direction, Transaction
from .utils import coerce_day

logger = logging.getLogger(__name__)

DateBound = Union[str, date, datetime, None]
DedupKey = Tuple[datetime, float, str, Direction]


@dataclass
class InsertResult:
    """Outcome of a merge."""
    inserted_count: int = 0
    skipped_count: int = 0

    def to_dict(self) -> dict:
        return {'inserted_count': self.inserted_count, 'skipped_count': self.skipped_count}


@dataclass
class CategorySummary:
    """Total and row count for one category."""
    category: str
    total: float = 0.0
    count: int = 0


@dataclass
class LedgerSummary:
    """
    Aggregates over a date range.

    Attributes:
        categories: Per-category totals, largest first
        total_charges: Sum of spend rows
        total_credits: Sum of credit rows
        grand_total: Charges plus credits
        net_spending: Charges minus credits
    """
    categories: List[CategorySummary] = field(default_factory=list)
    total_charges: float = 0.0
    total_credits: float = 0.0

    @property
    def grand_total(self) -> float:
        return self.total_charges + self.total_credits

    @property
    def net_spending(self) -> float:
        return self.total_charges - self.total_credits

    def to_dict(self) -> dict:
        return {
            'categories': [
                {'category': c.category, 'total': round(c.total, 2), 'count': c.count}
                for c in self.categories
            ],
            'grand_total': round(self.grand_total, 2),
            'total_charges': round(self.total_charges, 2),
            'total_credits': round(self.total_credits, 2),
            'net_spending': round(self.net_spending, 2),
        }


def dedup_key(transaction: Transaction) -> DedupKey:
    """Content key used to recognise a transaction that is already stored."""
    return (
        transaction.timestamp,
        round(transaction.amount, 2),
        transaction.title,
        transaction.direction,
    )


class TransactionLedger:
    """
    Deduplicating store of transactions for one session.

    Merging is occurrence-aware: if the ledger already holds two rows with a
    given (timestamp, amount, title, direction) key and a batch brings three,
    only the third is inserted. Importing the same statement twice therefore
    adds nothing, while legitimate same-day repeats are all kept.

    Usage:
        ledger = TransactionLedger()
        result = ledger.add_transactions(parse_result.transactions)
        rows = ledger.get_filtered_transactions('2025-01-01', '2025-01-31')
    """

    def __init__(self):
        self._transactions: Dict[str, Transaction] = {}

    def add_transactions(self, batch: Iterable[Transaction]) -> InsertResult:
        """
        Merge a batch of parsed transactions.

        Admitted rows are stored under ``<parser id>-<occurrence>``, bumped
        further if that ID is already taken.

        Args:
            batch: Candidate transactions (possibly from several files)

        Returns:
            InsertResult with inserted and skipped counts
        """
        existing_counts = Counter(dedup_key(t) for t in self._transactions.values())
        processed_counts: Counter = Counter()
        result = InsertResult()

        for transaction in batch:
            key = dedup_key(transaction)
            processed_counts[key] += 1
            occurrence = processed_counts[key]

            if occurrence <= existing_counts[key]:
                result.skipped_count += 1
                continue

            new_id = self._unique_id(transaction.id, occurrence)
            self._transactions[new_id] = transaction.with_id(new_id)
            existing_counts[key] += 1
            result.inserted_count += 1

        logger.info(f"Ledger merge: {result.inserted_count} inserted, {result.skipped_count} skipped")
        return result

    def _unique_id(self, base_id: str, occurrence: int) -> str:
        candidate = f"{base_id}-{occurrence}"
        while candidate in self._transactions:
            occurrence += 1
            candidate = f"{base_id}-{occurrence}"
        return candidate

    def get_filtered_transactions(
        self,
        start_date: DateBound = None,
        end_date: DateBound = None,
        category: Optional[str] = ALL_CATEGORIES_LABEL
    ) -> List[Transaction]:
        """
        Transactions within a date range and category, newest first.

        Args:
            start_date: Inclusive first day (None for no bound)
            end_date: Inclusive last day (None for no bound)
            category: Category name, or 'All'/None for every category

        Returns:
            Matching transactions sorted by timestamp descending
        """
        rows = self._in_range(start_date, end_date)

        if category and category != ALL_CATEGORIES_LABEL:
            rows = [t for t in rows if t.category == category]

        return sorted(rows, key=lambda t: t.timestamp, reverse=True)

    def get_summary(self, start_date: DateBound = None, end_date: DateBound = None) -> LedgerSummary:
        """
        Per-category totals and spend/credit totals for a date range.

        Args:
            start_date: Inclusive first day (None for no bound)
            end_date: Inclusive last day (None for no bound)

        Returns:
            LedgerSummary with categories sorted by total descending
        """
        by_category: Dict[str, CategorySummary] = {}
        summary = LedgerSummary()

        for transaction in self._in_range(start_date, end_date):
            entry = by_category.setdefault(transaction.category, CategorySummary(transaction.category))
            entry.total += transaction.amount
            entry.count += 1

            if transaction.is_credit:
                summary.total_credits += transaction.amount
            else:
                summary.total_charges += transaction.amount

        summary.categories = sorted(by_category.values(), key=lambda c: c.total, reverse=True)
        return summary

    def get_categories(self) -> List[str]:
        """'All' followed by the distinct categories in use, sorted."""
        return [ALL_CATEGORIES_LABEL] + sorted({t.category for t in self._transactions.values()})

    def update_transaction_category(self, transaction_id: str, category: str) -> bool:
        """
        Re-categorize one transaction.

        Returns:
            False if the ID is unknown or the category is not a known category
        """
        transaction = self._transactions.get(transaction_id)
        if transaction is None or category not in ALL_CATEGORIES:
            return False

        transaction.category = category
        return True

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove one transaction; False if the ID is unknown."""
        return self._transactions.pop(transaction_id, None) is not None

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def clear_transactions(self) -> None:
        self._transactions.clear()

    def _in_range(self, start_date: DateBound, end_date: DateBound) -> List[Transaction]:
        start_day = coerce_day(start_date)
        end_day = coerce_day(end_date)

        rows = list(self._transactions.values())
        if start_day is not None:
            start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
            rows = [t for t in rows if t.timestamp >= start]
        if end_day is not None:
            # Through 23:59:59.999 of the end day
            end = datetime.combine(end_day, time(23, 59, 59, 999000), tzinfo=timezone.utc)
            rows = [t for t in rows if t.timestamp <= end]
        return rows

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._transactions.values()))
