"""Tests for parser registration and detection."""
import pytest

from spendtrack.parsers import (
    AmexParser,
    AppleCardParser,
    ASBParser,
    BaseStatementParser,
    ParserRegistry,
    USBankParser,
    get_default_registry
)


@pytest.fixture
def registry(bank_loader, category_config):
    return get_default_registry(bank_loader, category_config)


class TestParserRegistry:
    """Test registry detection order and instances."""

    def test_supported_sources(self, registry):
        """Test detection priority order."""
        assert registry.supported_sources == ["Apple Card", "American Express", "US Bank", "ASB Bank"]
        assert len(registry) == 4

    def test_detect_from_content(self, registry):
        """Test each issuer is found from its document text."""
        assert isinstance(registry.detect("statement.pdf", "Goldman Sachs Bank USA"), AppleCardParser)
        assert isinstance(registry.detect("statement.pdf", "AMERICAN EXPRESS"), AmexParser)
        assert isinstance(registry.detect("statement.pdf", "Altitude Go Visa"), USBankParser)
        assert isinstance(registry.detect("statement.pdf", "ASB Bank Streamline"), ASBParser)

    def test_filename_beats_content(self, registry):
        """Test a filename marker wins over another issuer's content."""
        assert isinstance(registry.detect("amex_jan.pdf", "Apple Card"), AmexParser)

    def test_content_priority(self, registry):
        """Test the first registered issuer wins when several match content."""
        assert isinstance(registry.detect("statement.pdf", "Apple Card paid with AMEX"), AppleCardParser)

    def test_no_match(self, registry):
        """Test unknown documents return None."""
        assert registry.detect("statement.pdf", "Some other bank") is None
        assert registry.detect("chase_jan.pdf", "") is None

    def test_fresh_instance_per_detection(self, registry):
        """Test parsers are not shared between documents."""
        first = registry.detect("amex.pdf")
        second = registry.detect("amex.pdf")
        assert first is not second

    def test_register_unknown_issuer(self, bank_loader):
        """Test registering a parser without configuration fails."""

        class MissingParser(BaseStatementParser):
            bank_key = "no_such_bank"

            def parse(self, pages):
                return []

        registry = ParserRegistry(bank_loader)
        with pytest.raises(ValueError, match="no_such_bank"):
            registry.register(MissingParser)

    def test_register_with_explicit_key(self, bank_loader):
        """Test a parser can be registered under another issuer's key."""
        registry = ParserRegistry(bank_loader)
        registry.register(AmexParser, "discover")

        parser = registry.detect("discover_feb.pdf")
        assert isinstance(parser, AmexParser)
        assert parser.source == "Discover"
