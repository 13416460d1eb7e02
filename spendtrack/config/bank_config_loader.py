"""Load and manage issuer-specific configurations."""
import logging
import re
from pathlib import Path
from typing import Dict, Optional, List
import yaml

from .settings import BANK_TEMPLATES_DIR, UNKNOWN_SOURCE

logger = logging.getLogger(__name__)

CSV_SIGN_CONVENTIONS = ("charges_positive", "charges_negative", "ignore")


class BankConfig:
    """Represents an issuer-specific configuration."""

    def __init__(self, config_dict: dict, bank_name: str):
        """Initialize bank config from dictionary."""
        self.bank_name = bank_name
        self._config = config_dict
        self._filename_regexes = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.filename_patterns
        ]

    @property
    def display_name(self) -> str:
        """Issuer label attached to transactions (e.g. 'American Express')."""
        return self._config.get('display_name', self.bank_name)

    @property
    def priority(self) -> int:
        """Detection priority; lower values are checked first."""
        return int(self._config.get('priority', 100))

    @property
    def filename_patterns(self) -> List[str]:
        """Get regex patterns matched (case-insensitive) against file names."""
        return self._config.get('filename_patterns', [])

    @property
    def content_patterns(self) -> List[str]:
        """Get literal substrings that identify the issuer in document text."""
        return self._config.get('content_patterns', [])

    @property
    def skip_patterns(self) -> List[str]:
        """Get issuer-specific description skip patterns."""
        return self._config.get('skip_patterns', [])

    @property
    def region(self) -> Optional[str]:
        """Get region code (e.g., 'US', 'NZ')."""
        return self._config.get('region')

    @property
    def currency(self) -> Optional[str]:
        """Get currency code (e.g., 'USD', 'NZD')."""
        return self._config.get('currency')

    @property
    def defer_categorization(self) -> bool:
        """Whether parsed rows keep the default category."""
        return bool(self._config.get('defer_categorization', False))

    @property
    def csv_sign_convention(self) -> str:
        """How the sign of a CSV amount maps to spend vs credit."""
        convention = self._config.get('csv_sign_convention', 'ignore')
        if convention not in CSV_SIGN_CONVENTIONS:
            logger.warning(f"Unknown csv_sign_convention '{convention}' for {self.bank_name}")
            return 'ignore'
        return convention

    def matches_filename(self, filename: str) -> bool:
        """Check whether a file name carries one of this issuer's markers."""
        if not filename:
            return False
        return any(regex.search(filename) for regex in self._filename_regexes)

    def matches_content(self, text: str) -> bool:
        """Check whether document text contains one of this issuer's markers."""
        if not text:
            return False
        return any(pattern in text for pattern in self.content_patterns)

    def __repr__(self) -> str:
        return f"BankConfig({self.bank_name!r}, priority={self.priority})"


class BankConfigLoader:
    """Loads issuer configurations from YAML files."""

    def __init__(self, config_dir: Path = BANK_TEMPLATES_DIR):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing bank config YAML files
        """
        self.config_dir = config_dir
        self._configs: Dict[str, BankConfig] = {}
        self._load_all_configs()

    def _load_all_configs(self) -> None:
        """Load all bank configuration files."""
        if not self.config_dir.exists():
            logger.warning(f"Bank config directory not found: {self.config_dir}")
            return

        yaml_files = sorted(self.config_dir.glob("*.yaml")) + sorted(self.config_dir.glob("*.yml"))

        if not yaml_files:
            logger.warning(f"No bank config files found in {self.config_dir}")
            return

        for yaml_file in yaml_files:
            try:
                self._load_config(yaml_file)
            except (OSError, yaml.YAMLError, re.error) as e:
                logger.error(f"Failed to load config {yaml_file}: {e}")

        logger.debug(f"Loaded {len(self._configs)} bank configurations")

    def _load_config(self, yaml_file: Path) -> None:
        """
        Load a single bank configuration file.

        Args:
            yaml_file: Path to YAML config file
        """
        with open(yaml_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        # Each YAML file has a top-level key with the bank name
        # e.g., american_express: {...}
        for bank_name, config_dict in data.items():
            if isinstance(config_dict, dict):
                self._configs[bank_name.lower()] = BankConfig(config_dict, bank_name)
                logger.debug(f"Loaded config for {bank_name}")

    def get_config(self, bank_name: str) -> Optional[BankConfig]:
        """
        Get configuration for a specific bank.

        Args:
            bank_name: Bank name (case-insensitive)

        Returns:
            BankConfig object or None if not found
        """
        return self._configs.get(bank_name.lower())

    def configs_by_priority(self) -> List[BankConfig]:
        """All configurations, highest detection priority first."""
        return sorted(self._configs.values(), key=lambda c: (c.priority, c.bank_name))

    def detect_bank_by_filename(self, filename: str) -> Optional[BankConfig]:
        """
        Detect the issuer from a file name alone.

        Args:
            filename: Original file name

        Returns:
            BankConfig object or None if no filename marker matches
        """
        for config in self.configs_by_priority():
            if config.matches_filename(filename):
                logger.info(f"Detected issuer from filename: {config.display_name}")
                return config
        return None

    def detect_bank_by_content(self, content: str) -> Optional[BankConfig]:
        """Detect the issuer from document text alone."""
        for config in self.configs_by_priority():
            if config.matches_content(content):
                logger.info(f"Detected issuer from content: {config.display_name}")
                return config
        return None

    def detect_bank(self, filename: str = '', content: str = '') -> Optional[BankConfig]:
        """
        Detect the issuer from a file name and document text.

        File names are checked against every issuer before any content
        check runs.

        Args:
            filename: Original file name
            content: Document text (or joined CSV cells)

        Returns:
            BankConfig object or None if the issuer cannot be detected
        """
        config = self.detect_bank_by_filename(filename) or self.detect_bank_by_content(content)
        if config is None:
            logger.debug("Could not detect issuer")
        return config

    def detect_source(self, filename: str = '', content: str = '') -> str:
        """Issuer label for a document, or 'Unknown'."""
        config = self.detect_bank(filename, content)
        return config.display_name if config else UNKNOWN_SOURCE

    def get_all_banks(self) -> List[str]:
        """Get list of all configured bank names."""
        return [config.bank_name for config in self.configs_by_priority()]

    @property
    def supported_banks_count(self) -> int:
        """Get count of configured banks."""
        return len(self._configs)


# Singleton instance
_loader: Optional[BankConfigLoader] = None


def get_bank_config_loader() -> BankConfigLoader:
    """Get singleton instance of BankConfigLoader."""
    global _loader
    if _loader is None:
        _loader = BankConfigLoader()
    return _loader
