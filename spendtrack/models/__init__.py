"""Data models for statement parsing."""
from .transaction import Transaction, Direction, ALL_CATEGORIES, CREDIT_PREFIX
from .parse_result import ParseResult

__all__ = ['Transaction', 'Direction', 'ALL_CATEGORIES', 'CREDIT_PREFIX', 'ParseResult']
