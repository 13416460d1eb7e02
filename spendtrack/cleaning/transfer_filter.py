"""Detection of money movement that is not spending.

Credit card payments are already counted on the card's own statement, and
P2P or brokerage transfers move money between the user's accounts. Both are
dropped before a row reaches the ledger.
"""

# Paying off a credit card from a checking account
CREDIT_CARD_PAYMENT_KEYWORDS = (
    'amex epayment',
    'amex payment',
    'american express ach',
    'american express pmt',
    'applecard gsbank',
    'apple card payment',
    'chase payment',
    'citi payment',
    'discover payment',
    'capital one payment',
    'credit card payment',
)

# P2P and account-to-account transfers
ACCOUNT_TRANSFER_KEYWORDS = (
    'zelle',
    'venmo',
    'paypal transfer',
    'account transfer',
    'transfer to',
    'transfer from',
    'robinhood',
    'debits xxxxx',  # brokerage sweeps
    'internal transfer',
    'external transfer',
)


def is_transfer_or_payment(description: str) -> bool:
    """
    Check whether a raw description is a card payment or account transfer.

    Args:
        description: Raw (uncleaned) statement description

    Returns:
        True if the row should be excluded from spending
    """
    lower_desc = (description or '').lower()

    if any(keyword in lower_desc for keyword in CREDIT_CARD_PAYMENT_KEYWORDS):
        return True

    return any(keyword in lower_desc for keyword in ACCOUNT_TRANSFER_KEYWORDS)
