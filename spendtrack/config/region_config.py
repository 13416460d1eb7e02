"""Locale rules for regional statement parsing."""
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
import yaml

from .settings import REGION_TEMPLATES_DIR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionConfig:
    """
    Read-only locale rules for one region.

    Attributes:
        code: Region code (e.g., 'NZ')
        name: Human-readable region name
        currency_code: ISO currency code
        currency_symbol: Display symbol
        parse_order: Date component order ('DMY', 'MDY' or 'YMD')
        phone_patterns: Compiled phone-number patterns to strip
        postcode_pattern: Trailing postcode pattern, if the region has one
        state_pattern: Trailing state pattern, if the region has one
        country_pattern: Trailing country-name pattern
        city_prefixes: City names stripped from the front of merchant text
        city_brand_words: Words that keep a city prefix when they follow it
    """
    code: str
    name: str
    currency_code: str
    currency_symbol: str
    parse_order: str
    phone_patterns: List[re.Pattern] = field(default_factory=list)
    postcode_pattern: Optional[re.Pattern] = None
    state_pattern: Optional[re.Pattern] = None
    country_pattern: Optional[re.Pattern] = None
    city_prefixes: List[str] = field(default_factory=list)
    city_brand_words: List[str] = field(default_factory=list)

    @property
    def dayfirst(self) -> bool:
        """Whether ambiguous numeric dates put the day first."""
        return self.parse_order == 'DMY'

    @classmethod
    def from_dict(cls, code: str, data: dict) -> 'RegionConfig':
        """Build a RegionConfig from its YAML mapping."""
        currency = data.get('currency', {})
        date_format = data.get('date_format', {})
        cleaning = data.get('cleaning_patterns', {})
        address = cleaning.get('address', {})

        def _compile(pattern: Optional[str], flags: int = 0) -> Optional[re.Pattern]:
            return re.compile(pattern, flags) if pattern else None

        return cls(
            code=code,
            name=data.get('name', code),
            currency_code=currency.get('code', ''),
            currency_symbol=currency.get('symbol', ''),
            parse_order=date_format.get('parse_order', 'MDY'),
            phone_patterns=[re.compile(p) for p in cleaning.get('phone', [])],
            postcode_pattern=_compile(address.get('postcode_pattern')),
            state_pattern=_compile(address.get('state_pattern')),
            country_pattern=_compile(address.get('country_pattern'), re.IGNORECASE),
            city_prefixes=list(data.get('city_prefixes', [])),
            city_brand_words=list(data.get('city_brand_words', [])),
        )


class RegionConfigLoader:
    """Loads region configurations from YAML files."""

    def __init__(self, config_dir: Path = REGION_TEMPLATES_DIR):
        self.config_dir = config_dir
        self._regions: Dict[str, RegionConfig] = {}

        for yaml_file in sorted(config_dir.glob("*.yaml")):
            with open(yaml_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            for code, region_dict in data.items():
                self._regions[code.upper()] = RegionConfig.from_dict(code.upper(), region_dict)
                logger.debug(f"Loaded region config for {code}")

    def get(self, code: str) -> Optional[RegionConfig]:
        """Get a region by code (case-insensitive)."""
        return self._regions.get(code.upper()) if code else None

    @property
    def codes(self) -> List[str]:
        return list(self._regions)


_region_loader: Optional[RegionConfigLoader] = None


def get_region_config(code: str = 'NZ') -> RegionConfig:
    """
    Get the configuration for a region.

    Raises:
        KeyError: If the region has no configuration file
    """
    global _region_loader
    if _region_loader is None:
        _region_loader = RegionConfigLoader()

    region = _region_loader.get(code)
    if region is None:
        raise KeyError(f"No region configuration for '{code}'. Available: {_region_loader.codes}")
    return region
