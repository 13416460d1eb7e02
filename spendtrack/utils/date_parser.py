"""Date parsing and statement-period year inference."""
import logging
import re
from datetime import date, datetime, time, timezone
from typing import Optional, Union

from dateutil import parser as dateutil_parser

from .parse_stats import ParseStats

logger = logging.getLogger(__name__)

MONTH_ABBREVIATIONS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                       'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

DateLike = Union[date, datetime]


def parse_date(
    date_value: Union[str, DateLike, None],
    stats: Optional[ParseStats] = None,
    dayfirst: bool = False
) -> datetime:
    """
    Parse a date string into a timezone-aware UTC datetime.

    Strings without a timezone are read as UTC. Unparseable input falls back
    to the current time instead of raising; the substitution is logged and
    counted in ``stats.date_fallbacks``.

    Args:
        date_value: Date string (ISO, MM/DD/YYYY, DD Mon YYYY, ...) or date object
        stats: Optional counters for fallbacks
        dayfirst: Read ambiguous numeric dates as day/month (NZ, UK)

    Returns:
        datetime in UTC
    """
    if isinstance(date_value, datetime):
        return _as_utc(date_value)
    if isinstance(date_value, date):
        return datetime.combine(date_value, time(), tzinfo=timezone.utc)

    date_string = normalize_date_string(date_value) if isinstance(date_value, str) else ''

    if date_string:
        try:
            parsed = dateutil_parser.parse(date_string, dayfirst=dayfirst)
            return _as_utc(parsed)
        except (ValueError, OverflowError, TypeError):
            pass

    logger.warning(f"Could not parse date: {date_value!r} - using current time")
    if stats is not None:
        stats.date_fallbacks += 1
    return datetime.now(timezone.utc)


def build_date(
    year: int,
    month: int,
    day: int,
    stats: Optional[ParseStats] = None
) -> datetime:
    """
    Build a UTC date from components resolved by a statement parser.

    Components are rendered as an unambiguous ISO string and passed through
    parse_date, so impossible dates (e.g. 30 Feb) take the same fallback path.
    """
    return parse_date(f"{year:04d}-{month:02d}-{day:02d}", stats=stats)


def resolve_year(month: int, period_start: DateLike, period_end: DateLike) -> int:
    """
    Infer the year of a dateless statement row.

    If the statement period crosses a calendar-year boundary, rows dated in
    months at or after the start month belong to the start year and all
    others to the end year. Otherwise every row takes the end year.

    Args:
        month: Row month (1-12)
        period_start: Statement period start
        period_end: Statement period end

    Returns:
        Four-digit year

    Example:
        >>> # Statement period: 15 Dec 2024 - 14 Jan 2025
        >>> resolve_year(12, date(2024, 12, 15), date(2025, 1, 14))
        2024
        >>> resolve_year(1, date(2024, 12, 15), date(2025, 1, 14))
        2025
    """
    if period_start.year != period_end.year:
        return period_start.year if month >= period_start.month else period_end.year
    return period_end.year


def month_number(name: str) -> Optional[int]:
    """Month number for a three-letter English abbreviation ('Nov' -> 11)."""
    key = (name or '')[:3].title()
    if key in MONTH_ABBREVIATIONS:
        return MONTH_ABBREVIATIONS.index(key) + 1
    return None


def to_iso(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds ('...T00:00:00.000Z')."""
    value = _as_utc(value)
    return value.strftime('%Y-%m-%dT%H:%M:%S.') + f"{value.microsecond // 1000:03d}Z"


def coerce_day(value: Union[str, DateLike, None]) -> Optional[date]:
    """
    Convert a filter bound to a calendar day.

    Accepts None/'' (no bound), date/datetime objects, 'YYYY-MM-DD' strings
    (a time component, if present, is ignored) and any other date string
    dateutil can read ('01/31/2025'). A string that is not a date is logged
    and treated as no bound.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return _as_utc(value).date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    try:
        return _as_utc(dateutil_parser.parse(normalize_date_string(text))).date()
    except (ValueError, OverflowError):
        logger.warning(f"Ignoring unreadable date bound: {value!r}")
        return None


def normalize_date_string(date_str: str) -> str:
    """
    Normalize date string for consistent parsing.

    Args:
        date_str: Raw date string

    Returns:
        Normalized date string
    """
    # Remove extra whitespace, including spaces inside "10 / 22 / 2025"
    normalized = ' '.join(date_str.split())
    normalized = re.sub(r'\s*/\s*', '/', normalized)

    # Normalize month abbreviations (remove periods)
    normalized = re.sub(r'\b([A-Za-z]{3})\.', r'\1', normalized)

    # Remove ordinal suffixes (1st, 2nd, 3rd, 4th, etc.)
    normalized = re.sub(r'(\d+)(?:st|nd|rd|th)\b', r'\1', normalized)

    return normalized


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
