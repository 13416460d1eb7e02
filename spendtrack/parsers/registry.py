"""Parser registry.

Maps issuer configuration keys to PDF parser classes and picks the parser
for a document. Adding an issuer means writing its parser class, shipping
its YAML configuration and registering the pair here.
"""

import logging
from typing import List, Optional, Tuple, Type

from .base_parser import BaseStatementParser
from .amex_parser import AmexParser
from .apple_card_parser import AppleCardParser
from .asb_parser import ASBParser
from .us_bank_parser import USBankParser
from ..config import BankConfig, BankConfigLoader, CategoryConfig, get_bank_config_loader

logger = logging.getLogger(__name__)


class ParserRegistry:
    """
    Ordered table of (bank key, parser class) pairs.

    Registration order is detection priority. Detection runs a filename
    pass over every entry before any content pass, so a file named
    "amex_jan.pdf" goes to the Amex parser even if its text mentions
    Apple Card.

    Usage:
        registry = get_default_registry()
        parser = registry.detect("statement.pdf", full_text)
        transactions = parser.parse(pages)
    """

    def __init__(
        self,
        bank_loader: Optional[BankConfigLoader] = None,
        category_config: Optional[CategoryConfig] = None
    ):
        self.bank_loader = bank_loader or get_bank_config_loader()
        self.category_config = category_config
        self._entries: List[Tuple[BankConfig, Type[BaseStatementParser]]] = []

    def register(self, parser_class: Type[BaseStatementParser], bank_key: Optional[str] = None) -> None:
        """
        Register a parser class for an issuer.

        Args:
            parser_class: BaseStatementParser subclass
            bank_key: Issuer configuration key (default: parser_class.bank_key)

        Raises:
            ValueError: If the issuer has no configuration
        """
        key = bank_key or parser_class.bank_key
        config = self.bank_loader.get_config(key)
        if config is None:
            raise ValueError(
                f"No bank configuration for '{key}'. "
                f"Configured banks: {', '.join(self.bank_loader.get_all_banks())}"
            )

        self._entries.append((config, parser_class))
        logger.debug(f"Registered {parser_class.__name__} for {key}")

    def create_parser(self, config: BankConfig, parser_class: Type[BaseStatementParser]) -> BaseStatementParser:
        """Fresh parser instance (parsers hold per-document state)."""
        return parser_class(config, self.category_config)

    def detect(self, filename: str = '', content: str = '') -> Optional[BaseStatementParser]:
        """
        Pick the parser for a document.

        Args:
            filename: Original file name
            content: Joined page text

        Returns:
            New parser instance, or None if no registered issuer matches
        """
        for config, parser_class in self._entries:
            if config.matches_filename(filename):
                logger.info(f"Detected {config.display_name} from filename")
                return self.create_parser(config, parser_class)

        for config, parser_class in self._entries:
            if config.matches_content(content):
                logger.info(f"Detected {config.display_name} from content")
                return self.create_parser(config, parser_class)

        return None

    @property
    def supported_sources(self) -> List[str]:
        """Issuer labels with PDF support, in detection order."""
        return [config.display_name for config, _ in self._entries]

    def __len__(self) -> int:
        return len(self._entries)


def get_default_registry(
    bank_loader: Optional[BankConfigLoader] = None,
    category_config: Optional[CategoryConfig] = None
) -> ParserRegistry:
    """
    Registry with every built-in PDF parser.

    Priority: Apple Card, American Express, US Bank, ASB Bank.
    """
    registry = ParserRegistry(bank_loader, category_config)
    for parser_class in (AppleCardParser, AmexParser, USBankParser, ASBParser):
        registry.register(parser_class)
    return registry
