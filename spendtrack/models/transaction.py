"""Transaction data model."""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional
from enum import Enum

from ..config.settings import DEFAULT_CATEGORY
from ..utils.date_parser import to_iso

ALL_CATEGORIES = (
    'Food & Dining',
    'Transportation',
    'Shopping',
    'Entertainment',
    'Subscriptions',
    'Bills & Utilities',
    'Health',
    'Travel',
    'Other',
)

CREDIT_PREFIX = '[CREDIT] '


class Direction(Enum):
    """Whether a row is money spent or money returned (refund/credit)."""
    SPEND = "spend"
    CREDIT = "credit"


@dataclass
class Transaction:
    """
    Represents a single categorized spending transaction.

    Attributes:
        id: Content-derived identity, made unique by the ledger on insert
        timestamp: Transaction instant (UTC)
        amount: Non-negative amount; direction is carried separately
        title: Cleaned merchant description
        category: One of ALL_CATEGORIES
        source: Issuer label (e.g. 'American Express')
        direction: Spend or credit
        region: Optional region code (e.g. 'NZ')
        currency: Optional currency code (e.g. 'NZD')
    """
    id: str
    timestamp: datetime
    amount: float
    title: str
    category: str = DEFAULT_CATEGORY
    source: str = 'Unknown'
    direction: Direction = Direction.SPEND
    region: Optional[str] = None
    currency: Optional[str] = None

    def __post_init__(self):
        """Validate transaction data."""
        if self.amount < 0:
            raise ValueError("amount cannot be negative")
        if not self.category:
            self.category = DEFAULT_CATEGORY

    @property
    def is_credit(self) -> bool:
        return self.direction is Direction.CREDIT

    @property
    def display_title(self) -> str:
        """Title as shown to a user; credits carry a '[CREDIT] ' prefix."""
        return f"{CREDIT_PREFIX}{self.title}" if self.is_credit else self.title

    def with_id(self, new_id: str) -> 'Transaction':
        """Copy of this transaction under another id."""
        return replace(self, id=new_id)

    def to_dict(self) -> dict:
        """Convert transaction to dictionary."""
        result = {
            'id': self.id,
            'timestamp': to_iso(self.timestamp),
            'amount': round(self.amount, 2),
            'title': self.title,
            'display_title': self.display_title,
            'category': self.category,
            'source': self.source,
            'direction': self.direction.value,
        }
        if self.region:
            result['region'] = self.region
        if self.currency:
            result['currency'] = self.currency
        return result
