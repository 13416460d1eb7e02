"""Category keyword and merchant-mapping tables."""
import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple
import yaml

from .settings import CATEGORY_CONFIG_FILE

logger = logging.getLogger(__name__)


class CategoryConfig:
    """
    Ordered categorization tables loaded from YAML.

    Both tables keep file order: categorization and merchant mapping are
    first-match-wins, so position in the file is the tie-break rule.
    """

    def __init__(
        self,
        category_keywords: List[Tuple[str, List[str]]],
        merchant_mappings: List[Tuple[re.Pattern, str]]
    ):
        self.category_keywords = category_keywords
        self.merchant_mappings = merchant_mappings

    @classmethod
    def from_dict(cls, data: dict) -> 'CategoryConfig':
        """Build tables from the parsed YAML document."""
        category_keywords = []
        for entry in data.get('categories', []):
            keywords = [str(kw).lower() for kw in entry.get('keywords', [])]
            category_keywords.append((entry['name'], keywords))

        merchant_mappings = []
        for entry in data.get('merchant_mappings', []):
            try:
                merchant_mappings.append((re.compile(entry['pattern'], re.IGNORECASE), entry['name']))
            except re.error as e:
                logger.error(f"Invalid merchant mapping pattern {entry.get('pattern')!r}: {e}")

        return cls(category_keywords, merchant_mappings)

    @classmethod
    def from_file(cls, path: Path) -> 'CategoryConfig':
        """Load tables from a YAML file; a missing file yields empty tables."""
        if not path.exists():
            logger.warning(f"Category config not found: {path} (all transactions will be 'Other')")
            return cls([], [])

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data)
        logger.debug(
            f"Loaded {len(config.category_keywords)} categories and "
            f"{len(config.merchant_mappings)} merchant mappings from {path}"
        )
        return config

    @property
    def category_names(self) -> List[str]:
        return [name for name, _ in self.category_keywords]


_category_config: Optional[CategoryConfig] = None


def get_category_config() -> CategoryConfig:
    """Get singleton instance of CategoryConfig."""
    global _category_config
    if _category_config is None:
        _category_config = CategoryConfig.from_file(CATEGORY_CONFIG_FILE)
    return _category_config
