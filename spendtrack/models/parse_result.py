"""Statement parse result model."""
from dataclasses import dataclass, field
from typing import List, Optional

from .transaction import Transaction
from ..utils.parse_stats import ParseStats


@dataclass
class ParseResult:
    """
    Transactions extracted from one statement file.

    Produced once per parse and consumed once by the ledger merge.

    Attributes:
        transactions: Parsed transactions in statement order
        source: Issuer label
        region: Optional region code
        currency: Optional currency code
        filename: Name of the parsed file
        stats: Values substituted rather than parsed
    """
    transactions: List[Transaction] = field(default_factory=list)
    source: str = 'Unknown'
    region: Optional[str] = None
    currency: Optional[str] = None
    filename: Optional[str] = None
    stats: ParseStats = field(default_factory=ParseStats)

    @property
    def transaction_count(self) -> int:
        """Get number of transactions."""
        return len(self.transactions)

    def to_dict(self) -> dict:
        """Convert parse result to dictionary."""
        result = {
            'source': self.source,
            'filename': self.filename,
            'transaction_count': self.transaction_count,
            'transactions': [t.to_dict() for t in self.transactions],
            'stats': self.stats.to_dict(),
        }
        if self.region:
            result['region'] = self.region
        if self.currency:
            result['currency'] = self.currency
        return result
