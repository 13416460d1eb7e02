"""Utility functions."""
from .logger import setup_logger, log_import_audit
from .parse_stats import ParseStats
from .currency_parser import parse_amount, is_negative_amount, format_currency
from .date_parser import (
    parse_date,
    build_date,
    resolve_year,
    month_number,
    to_iso,
    coerce_day,
    normalize_date_string
)

__all__ = [
    'setup_logger',
    'log_import_audit',
    'ParseStats',
    'parse_amount',
    'is_negative_amount',
    'format_currency',
    'parse_date',
    'build_date',
    'resolve_year',
    'month_number',
    'to_iso',
    'coerce_day',
    'normalize_date_string'
]
