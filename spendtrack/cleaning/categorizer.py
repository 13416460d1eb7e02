"""Keyword-based spending categorization."""
import logging
from typing import Optional

from ..config import CategoryConfig, get_category_config
from ..config.settings import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)


def categorize_transaction(title: str, config: Optional[CategoryConfig] = None) -> str:
    """
    Assign a category to a cleaned merchant title.

    Categories are tried in configuration order and the first one with a
    keyword contained in the title wins, so "Uber Eats" lands in
    Food & Dining before the plain "uber" keyword of Transportation is seen.

    Args:
        title: Cleaned merchant title
        config: Category tables (default: global config)

    Returns:
        Category name, or 'Other' when no keyword matches
    """
    config = config or get_category_config()
    lower_title = (title or '').lower()

    for category, keywords in config.category_keywords:
        for keyword in keywords:
            if keyword and keyword in lower_title:
                logger.debug(f"Keyword '{keyword}' -> {category}")
                return category

    return DEFAULT_CATEGORY
