"""Tests for PDF extraction and the statement parsing facade."""
import pytest

from spendtrack.extractors import ExtractionError, PageLimitExceededError, PDFExtractor
from spendtrack.extractors import pdf_extractor
from spendtrack.parsers import NoTransactionsFoundError, StatementParseError, StatementParser


AMEX_TEXT = """AMERICAN EXPRESS
New Charges Summary
Detail
Amount
01/15/25 BLUE BOTTLE COFFEE $6.50 ⧫
"""


class FakePage:
    def __init__(self, text):
        self.text = text

    def extract_text(self):
        return self.text


class FakePDF:
    def __init__(self, texts):
        self.pages = [FakePage(text) for text in texts]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeExtractor:
    """Stands in for PDFExtractor with fixed page texts."""

    def __init__(self, pages=None, error=None):
        self.pages = pages or []
        self.error = error

    def extract_pages(self, data, max_pages):
        if self.error is not None:
            raise self.error
        return self.pages


@pytest.fixture
def fake_pdfplumber(monkeypatch):
    """Replace pdfplumber.open with a fake PDF of the given page texts."""

    def install(texts):
        monkeypatch.setattr(pdf_extractor.pdfplumber, "open", lambda stream: FakePDF(texts))

    return install


class TestPDFExtractor:
    """Test page text extraction."""

    def test_extract_pages(self, fake_pdfplumber):
        """Test one text per page, with blank pages as ''."""
        fake_pdfplumber(["page one", None, "page three"])
        assert PDFExtractor().extract_pages(b"%PDF-1.4", max_pages=60) == ["page one", "", "page three"]

    def test_page_limit(self, fake_pdfplumber):
        """Test documents over the page limit are rejected."""
        fake_pdfplumber(["text"] * 61)

        with pytest.raises(PageLimitExceededError) as exc_info:
            PDFExtractor().extract_pages(b"%PDF-1.4", max_pages=60)

        assert str(exc_info.value) == "PDF has 61 pages. Max allowed is 60."

    def test_unreadable_pdf(self, monkeypatch):
        """Test pdfplumber failures become ExtractionError."""

        def broken_open(stream):
            raise ValueError("not a PDF")

        monkeypatch.setattr(pdf_extractor.pdfplumber, "open", broken_open)

        with pytest.raises(ExtractionError, match="PDF extraction failed: not a PDF"):
            PDFExtractor().extract_pages(b"garbage")

    def test_empty_data(self):
        """Test empty uploads are rejected before opening."""
        with pytest.raises(ExtractionError, match="File is empty"):
            PDFExtractor().extract_pages(b"")

    def test_can_handle(self):
        """Test PDF file names."""
        assert PDFExtractor().can_handle("Statement.PDF")
        assert not PDFExtractor().can_handle("statement.csv")


class TestStatementParser:
    """Test the parsing facade."""

    def test_parse_pdf(self):
        """Test a recognised PDF produces a labelled result."""
        parser = StatementParser(extractor=FakeExtractor([AMEX_TEXT]))
        result = parser.parse_pdf_bytes(b"%PDF", "statement.pdf")

        assert result.source == "American Express"
        assert result.region == "US"
        assert result.currency == "USD"
        assert result.filename == "statement.pdf"
        assert [t.title for t in result.transactions] == ["Blue Bottle Coffee"]

    def test_parse_pdf_through_pdfplumber(self, fake_pdfplumber):
        """Test the default extractor feeds the issuer parser."""
        fake_pdfplumber([AMEX_TEXT])
        result = StatementParser().parse_pdf_bytes(b"%PDF", "amex.pdf")
        assert result.transaction_count == 1

    def test_unknown_pdf(self):
        """Test unrecognised PDFs list the supported formats."""
        parser = StatementParser(extractor=FakeExtractor(["Some other bank"]))

        with pytest.raises(StatementParseError) as exc_info:
            parser.parse_pdf_bytes(b"%PDF", "statement.pdf")

        assert str(exc_info.value) == (
            "Failed to parse PDF: Unknown PDF format. "
            "Supported formats: Apple Card, American Express, US Bank, ASB Bank"
        )

    def test_recognised_pdf_without_rows(self):
        """Test a recognised PDF with no rows is an error."""
        parser = StatementParser(extractor=FakeExtractor(["AMERICAN EXPRESS"]))

        with pytest.raises(StatementParseError, match="No transactions found in PDF"):
            parser.parse_pdf_bytes(b"%PDF", "statement.pdf")

    def test_page_limit_message(self):
        """Test extraction errors are wrapped."""
        parser = StatementParser(extractor=FakeExtractor(error=PageLimitExceededError(61, 60)))

        with pytest.raises(StatementParseError) as exc_info:
            parser.parse_pdf_bytes(b"%PDF", "big.pdf")

        assert str(exc_info.value) == "Failed to parse PDF: PDF has 61 pages. Max allowed is 60."

    def test_unexpected_error_wrapped(self):
        """Test unexpected failures still surface as parse errors."""
        parser = StatementParser(extractor=FakeExtractor(error=RuntimeError("boom")))

        with pytest.raises(StatementParseError, match="Failed to parse PDF: boom"):
            parser.parse_pdf_bytes(b"%PDF", "statement.pdf")

    def test_parse_csv(self, whole_foods_csv):
        """Test CSV text is parsed."""
        result = StatementParser().parse_csv_text(whole_foods_csv, "export.csv")
        assert result.transactions[0].title == "Whole Foods Market"

    def test_csv_without_transactions(self):
        """Test a CSV of transfers only is an error."""
        text = "Date,Amount,Description\n2025-01-10,50.00,Zelle to John\n"

        with pytest.raises(NoTransactionsFoundError, match="No transactions found in CSV"):
            StatementParser().parse_csv_text(text)
