"""Merchant name cleanup for raw statement descriptions.

Statement descriptions carry a lot of noise around the merchant name:
point-of-sale prefixes (``TST*``, ``SQ *``), phone numbers, URLs, store
numbers and processor reference IDs. The cleaners here reduce a raw
description to a readable merchant title.

Cleaning is an ordered sequence of substitutions. Order matters: merchant
mappings are checked against the raw text first and short-circuit
everything else, and title-casing always runs last.
"""

import html
import logging
import re
from typing import Optional

from ..config import CategoryConfig, RegionConfig, get_category_config
from ..config.settings import UNKNOWN_MERCHANT

logger = logging.getLogger(__name__)

MAX_REGIONAL_TITLE_LENGTH = 100

LEADING_DATE_PATTERN = re.compile(r'^\d{1,2}/\d{1,2}/\d{2,4}\s+')

# Payment processor / POS prefixes, applied in order
PROCESSOR_PREFIX_PATTERNS = [
    re.compile(r'^AplPay\s+', re.IGNORECASE),      # Apple Pay via Amex
    re.compile(r'^TST\*\s*', re.IGNORECASE),       # Toast POS
    re.compile(r'^BT\*\s*', re.IGNORECASE),        # Bill.com
    re.compile(r'^PY\s*\*\s*', re.IGNORECASE),
    re.compile(r'^WIX\*[^*]*\*', re.IGNORECASE),   # Wix
    re.compile(r'^DD\s*\*', re.IGNORECASE),        # DoorDash
    re.compile(r'^TM\s*\*', re.IGNORECASE),        # Ticketmaster
    re.compile(r'^PT\s*\*', re.IGNORECASE),
    re.compile(r'^SQ\s*\*\s*', re.IGNORECASE),     # Square
    re.compile(r'^PAYPAL\s*\*\s*', re.IGNORECASE),
    re.compile(r'^SP\s+', re.IGNORECASE),          # Square (newer)
]

POS_SUFFIX_PATTERN = re.compile(r'\s+squareup\.com/receipts$', re.IGNORECASE)

PHONE_PATTERNS = [
    re.compile(r'\s+\d{3}-\d{3}-\d{4}'),           # 123-456-7890
    re.compile(r'\s+\(\d{3}\)\s*\d{3}-\d{4}'),     # (800) 555-1234
    re.compile(r'\s+\+\d{11,}'),                   # +18005551234
]

EMAIL_PATTERN = re.compile(r'\s+[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}', re.IGNORECASE)

URL_PATTERNS = [
    re.compile(r'\s+https?://\S+', re.IGNORECASE),
    re.compile(r'\s+[a-z]+\.com/\S*', re.IGNORECASE),
]

# Opaque processor references (20+ characters)
TRANSACTION_ID_PATTERN = re.compile(r'\s+[A-Z0-9_-]{20,}', re.IGNORECASE)

STORE_NUMBER_PATTERN = re.compile(r'\s+#\s*\d+\b')

BOILERPLATE_SUFFIX_PATTERN = re.compile(
    r'\s+(GOODS/SERVICES|LOCAL TRANSPORTATION|CABLE & PAY TV)$',
    re.IGNORECASE
)

# Apple Card appends "<street> <city> <ZIP> <ST> USA" to merchant names
APPLE_ADDRESS_PATTERN = re.compile(r'\s+\d+[\s\S]*?\d{5}\s+[A-Z]{2}\s+(?:USA|US)', re.IGNORECASE)
TRAILING_ZIP_PATTERN = re.compile(r'\s+\d{5}(?:-\d{4})?\s*$')
TRAILING_STATE_PATTERN = re.compile(r'\s+[A-Z]{2}\s*$')
TRAILING_COUNTRY_PATTERN = re.compile(r'\s+(?:USA|US)\s*$', re.IGNORECASE)

# NZ (ASB) description patterns
CARD_PREFIX_PATTERN = re.compile(r'^Card \d{4}\s+')
BILL_PAYMENT_REF_PATTERN = re.compile(r'^WO\d+\s+')
FOREIGN_CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}\s+[\d,.]+\s+At\s+[\d.]+\*?\s+(.+)$')
SALARY_PATTERN = re.compile(r'^(.+?)\s+\d{1,2}-\w+-\d{4}\s+Salary/Wages.+$')


def clean_merchant_name(raw_description: str, config: Optional[CategoryConfig] = None) -> str:
    """
    Reduce a raw statement description to a readable merchant title.

    Args:
        raw_description: Description as printed on the statement
        config: Category config providing merchant mappings (default: global)

    Returns:
        Cleaned, title-cased merchant name ('' only for empty input)

    Example:
        >>> clean_merchant_name("TST* JOE'S PIZZA 415-555-1234")
        "Joe's Pizza"
    """
    name = html.unescape((raw_description or '').strip())

    # Mapped merchant names win outright
    mapped = _match_merchant_mapping(name, config)
    if mapped is not None:
        return mapped

    name = LEADING_DATE_PATTERN.sub('', name)

    for pattern in PROCESSOR_PREFIX_PATTERNS:
        name = pattern.sub('', name)

    name = POS_SUFFIX_PATTERN.sub('', name)

    for pattern in PHONE_PATTERNS:
        name = pattern.sub('', name)

    name = EMAIL_PATTERN.sub('', name, count=1)

    for pattern in URL_PATTERNS:
        name = pattern.sub('', name)

    name = TRANSACTION_ID_PATTERN.sub('', name)
    name = STORE_NUMBER_PATTERN.sub('', name)
    name = BOILERPLATE_SUFFIX_PATTERN.sub('', name)

    return title_case(_collapse_whitespace(name))


def clean_apple_card_description(raw_description: str, config: Optional[CategoryConfig] = None) -> str:
    """
    Clean an Apple Card description, including its trailing street address.

    Args:
        raw_description: Description as printed on the statement
        config: Category config providing merchant mappings (default: global)

    Returns:
        Cleaned merchant name
    """
    desc = clean_merchant_name(raw_description, config)

    desc = APPLE_ADDRESS_PATTERN.sub('', desc)
    desc = TRAILING_ZIP_PATTERN.sub('', desc)
    desc = TRAILING_STATE_PATTERN.sub('', desc)
    desc = TRAILING_COUNTRY_PATTERN.sub('', desc)

    return _collapse_whitespace(desc)


def clean_regional_merchant_name(raw_description: str, region: RegionConfig) -> str:
    """
    Clean a description using a region's locale patterns.

    City prefixes, phone formats, postcodes and country names all come from
    the region configuration.

    Args:
        raw_description: Description as printed on the statement
        region: Region locale rules

    Returns:
        Cleaned merchant name, never empty ('Unknown Merchant' as a last resort)
    """
    cleaned = _collapse_whitespace(html.unescape((raw_description or '').strip()))

    cleaned = CARD_PREFIX_PATTERN.sub('', cleaned)
    cleaned = _strip_city_prefix(cleaned, region)
    cleaned = BILL_PAYMENT_REF_PATTERN.sub('', cleaned)

    # "USD 20.00 At 0.5709* Cursor, Ai Powered Ide" -> "Cursor, Ai Powered Ide"
    fx_match = FOREIGN_CURRENCY_PATTERN.match(cleaned)
    if fx_match:
        cleaned = fx_match.group(1)

    # "Acme Ltd 15-Nov-2025 Salary/Wagespay Ended" -> "Acme Ltd (Salary)"
    salary_match = SALARY_PATTERN.match(cleaned)
    if salary_match:
        cleaned = f"{salary_match.group(1)} (Salary)"

    for pattern in region.phone_patterns:
        cleaned = pattern.sub('', cleaned)

    if region.postcode_pattern is not None:
        cleaned = region.postcode_pattern.sub('', cleaned)
    if region.state_pattern is not None:
        cleaned = region.state_pattern.sub('', cleaned)
    if region.country_pattern is not None:
        cleaned = region.country_pattern.sub('', cleaned)

    cleaned = cleaned.strip()[:MAX_REGIONAL_TITLE_LENGTH].strip()
    return merchant_or_unknown(cleaned)


def merchant_or_unknown(name: str) -> str:
    """Fallback label for descriptions that clean down to nothing."""
    return name if name and name.strip() else UNKNOWN_MERCHANT


def title_case(name: str) -> str:
    """Capitalize the first letter of each word and lower-case the rest."""
    return ' '.join(word[:1].upper() + word[1:].lower() for word in name.split(' '))


def _match_merchant_mapping(name: str, config: Optional[CategoryConfig]) -> Optional[str]:
    config = config or get_category_config()
    for pattern, friendly_name in config.merchant_mappings:
        if pattern.search(name):
            logger.debug(f"Merchant mapping {pattern.pattern!r} -> {friendly_name}")
            return friendly_name
    return None


def _strip_city_prefix(cleaned: str, region: RegionConfig) -> str:
    brand_words = region.city_brand_words
    for city in region.city_prefixes:
        prefix = f"{city} "
        # Keep the city when little would remain after it
        if not cleaned.startswith(prefix) or len(cleaned) <= len(prefix) + 3:
            continue
        remainder = cleaned[len(prefix):]
        # "Auckland Airport", "Wellington City Council" keep their city
        if brand_words and re.match(rf"^(?:{'|'.join(map(re.escape, brand_words))})\b", remainder):
            continue
        cleaned = remainder
    return cleaned


def _collapse_whitespace(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip()
