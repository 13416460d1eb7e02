"""Counters for values that were substituted instead of parsed."""
from dataclasses import dataclass


@dataclass
class ParseStats:
    """
    Degraded-but-recovered substitutions made during one parse.

    Attributes:
        amount_fallbacks: Non-empty amounts that could not be parsed (became 0)
        date_fallbacks: Dates that could not be parsed (became "now")
    """
    amount_fallbacks: int = 0
    date_fallbacks: int = 0

    @property
    def total(self) -> int:
        return self.amount_fallbacks + self.date_fallbacks

    def to_dict(self) -> dict:
        return {
            'amount_fallbacks': self.amount_fallbacks,
            'date_fallbacks': self.date_fallbacks,
        }
