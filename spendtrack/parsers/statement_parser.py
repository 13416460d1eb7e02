"""Statement parsing facade.

Single entry point used by the worker: bytes or text in, ParseResult out.
"""

import logging
from typing import Optional

from .base_parser import NoTransactionsFoundError, StatementParseError, UnrecognizedStatementError
from .csv_parser import CSVStatementParser
from .registry import ParserRegistry, get_default_registry
from ..config.settings import MAX_PDF_PAGES
from ..extractors import ExtractionError, PDFExtractor
from ..models import ParseResult

logger = logging.getLogger(__name__)


class StatementParser:
    """
    Facade over PDF extraction, issuer detection and CSV parsing.

    Usage:
        parser = StatementParser()
        result = parser.parse_pdf_bytes(data, "amex_jan.pdf")
        result = parser.parse_csv_text(text, "chase_jan.csv")
    """

    def __init__(
        self,
        registry: Optional[ParserRegistry] = None,
        csv_parser: Optional[CSVStatementParser] = None,
        extractor: Optional[PDFExtractor] = None
    ):
        self.registry = registry or get_default_registry()
        self.csv_parser = csv_parser or CSVStatementParser()
        self.extractor = extractor or PDFExtractor()

    def parse_pdf_bytes(self, data: bytes, filename: str = '', max_pages: int = MAX_PDF_PAGES) -> ParseResult:
        """
        Parse a PDF statement held in memory.

        Args:
            data: Raw PDF bytes
            filename: Original file name
            max_pages: Largest page count accepted

        Returns:
            ParseResult with at least one transaction

        Raises:
            StatementParseError: "Failed to parse PDF: <reason>" for any failure
        """
        try:
            pages = self.extractor.extract_pages(data, max_pages)
            full_text = ' '.join(pages)

            parser = self.registry.detect(filename, full_text)
            if parser is None:
                raise UnrecognizedStatementError(
                    f"Unknown PDF format. Supported formats: {', '.join(self.registry.supported_sources)}"
                )

            transactions = parser.parse(pages)
            if not transactions:
                raise NoTransactionsFoundError(
                    "No transactions found in PDF. Make sure this is a valid statement."
                )

            if parser.stats.total:
                logger.warning(
                    f"{filename}: {parser.stats.amount_fallbacks} amount and "
                    f"{parser.stats.date_fallbacks} date values could not be parsed"
                )

            return ParseResult(
                transactions=transactions,
                source=parser.source,
                region=parser.region,
                currency=parser.currency,
                filename=filename or None,
                stats=parser.stats,
            )

        except (StatementParseError, ExtractionError) as e:
            raise StatementParseError(f"Failed to parse PDF: {e}") from e
        except Exception as e:
            logger.exception(f"Unexpected error parsing {filename}")
            raise StatementParseError(f"Failed to parse PDF: {e}") from e

    def parse_csv_text(self, text: str, filename: str = '') -> ParseResult:
        """
        Parse a CSV statement export.

        Args:
            text: CSV text including the header row
            filename: Original file name

        Returns:
            ParseResult with at least one transaction

        Raises:
            StatementParseError: If the file is empty, lacks required
                columns or yields no transactions
        """
        result = self.csv_parser.parse_text(text, filename)

        if not result.transactions:
            raise NoTransactionsFoundError(
                "No transactions found in CSV. Check that amounts are non-zero "
                "and descriptions are present."
            )

        if result.stats.total:
            logger.warning(
                f"{filename}: {result.stats.amount_fallbacks} amount and "
                f"{result.stats.date_fallbacks} date values could not be parsed"
            )

        return result
