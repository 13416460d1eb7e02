"""Spendtrack - categorized spending from bank and card statements."""

__version__ = "0.1.0"
