"""Parse currency amounts from various formats."""
import math
import re
import logging
from typing import Optional, Union

from .parse_stats import ParseStats
from ..config.settings import CURRENCY_SYMBOLS, DEFAULT_CURRENCY

logger = logging.getLogger(__name__)

AMOUNT_PREFIX_PATTERN = re.compile(r'^[-+]?(?:\d+\.?\d*|\.\d+)')


def parse_amount(
    amount: Union[str, int, float, None],
    stats: Optional[ParseStats] = None
) -> float:
    """
    Parse a currency amount into a non-negative float.

    Handles various formats:
    - $1,234.56
    - 1.234,56 (comma decimal)
    - 1,234 (comma thousands)
    - -45.00 (sign is dropped; direction is classified elsewhere)

    A comma on its own is read as a decimal separator only when the last
    comma group has exactly two digits. That is a heuristic: "12,34" reads
    as 12.34 but so would a mistyped thousands group.

    Args:
        amount: String or number containing an amount
        stats: Optional counters; unparseable input increments amount_fallbacks

    Returns:
        Absolute amount, or 0.0 if parsing fails (callers reject zero rows)
    """
    if isinstance(amount, bool):
        amount = None

    if isinstance(amount, (int, float)):
        if math.isfinite(amount):
            return abs(float(amount))
        _record_amount_fallback(amount, stats)
        return 0.0

    if amount is None:
        return 0.0

    # Keep digits, separators and sign only
    cleaned = re.sub(r'[^\d.\-,]', '', str(amount))

    if ',' in cleaned and '.' in cleaned:
        if cleaned.rfind(',') > cleaned.rfind('.'):
            # European format: 1.234,56
            cleaned = cleaned.replace('.', '').replace(',', '.')
        else:
            # US format: 1,234.56
            cleaned = cleaned.replace(',', '')
    elif ',' in cleaned:
        # Only comma - decimal if the final group has two digits
        head, _, tail = cleaned.rpartition(',')
        if len(tail) == 2:
            cleaned = f"{head.replace(',', '')}.{tail}"
        else:
            cleaned = cleaned.replace(',', '')

    # Leading numeric prefix only ("12.50-" -> 12.50)
    match = AMOUNT_PREFIX_PATTERN.match(cleaned)
    if not match:
        if str(amount).strip():
            _record_amount_fallback(amount, stats)
        return 0.0

    value = float(match.group(0))
    if not math.isfinite(value):
        _record_amount_fallback(amount, stats)
        return 0.0

    return abs(value)


def _record_amount_fallback(amount, stats: Optional[ParseStats]) -> None:
    logger.warning(f"Could not parse currency amount: {amount!r}")
    if stats is not None:
        stats.amount_fallbacks += 1


def is_negative_amount(amount: Union[str, int, float, None]) -> bool:
    """
    Check whether an amount carries a negative/credit marker.

    Recognises a leading minus (before or after the currency symbol),
    parentheses and a trailing CR.

    Args:
        amount: Raw amount as printed

    Returns:
        True if the amount is marked negative
    """
    if isinstance(amount, bool) or amount is None:
        return False
    if isinstance(amount, (int, float)):
        return amount < 0

    text = str(amount).strip()
    if not text:
        return False
    if text.startswith('(') and text.endswith(')'):
        return True
    if text.upper().endswith('CR'):
        return True
    return bool(re.match(r'^[^\d]*-', text))


def format_currency(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format amount as currency string.

    Args:
        amount: Numeric amount
        currency: Currency code (USD, NZD, GBP, ...)

    Returns:
        Formatted currency string
    """
    symbol = CURRENCY_SYMBOLS.get(currency or DEFAULT_CURRENCY, "$")

    # Format with thousands separator and 2 decimal places
    formatted = f"{abs(amount):,.2f}"

    if amount < 0:
        return f"-{symbol}{formatted}"
    else:
        return f"{symbol}{formatted}"
