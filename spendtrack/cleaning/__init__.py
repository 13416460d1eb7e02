"""Merchant cleanup, categorization and transfer filtering."""
from .merchant_cleaner import (
    clean_merchant_name,
    clean_apple_card_description,
    clean_regional_merchant_name,
    merchant_or_unknown,
    title_case
)
from .categorizer import categorize_transaction
from .transfer_filter import (
    is_transfer_or_payment,
    CREDIT_CARD_PAYMENT_KEYWORDS,
    ACCOUNT_TRANSFER_KEYWORDS
)

__all__ = [
    'clean_merchant_name',
    'clean_apple_card_description',
    'clean_regional_merchant_name',
    'merchant_or_unknown',
    'title_case',
    'categorize_transaction',
    'is_transfer_or_payment',
    'CREDIT_CARD_PAYMENT_KEYWORDS',
    'ACCOUNT_TRANSFER_KEYWORDS',
]
