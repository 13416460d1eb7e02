"""PDF text extraction using pdfplumber."""
import logging
from io import BytesIO
from typing import List

import pdfplumber

from .base_extractor import BaseExtractor, ExtractionError, PageLimitExceededError
from ..config.settings import MAX_PDF_PAGES

logger = logging.getLogger(__name__)


class PDFExtractor(BaseExtractor):
    """
    Extract text from native PDF statements using pdfplumber.

    Only PDFs with selectable text are supported; scanned statements yield
    empty pages and, downstream, a "no transactions" error.
    """

    def can_handle(self, filename: str) -> bool:
        """
        Check if file is a PDF.

        Args:
            filename: Original file name

        Returns:
            True if file is a PDF
        """
        return (filename or '').lower().endswith('.pdf')

    def extract_pages(self, data: bytes, max_pages: int = MAX_PDF_PAGES) -> List[str]:
        """
        Extract text from each page of an in-memory PDF.

        The page count is checked before any page is read.

        Args:
            data: Raw PDF bytes
            max_pages: Largest page count accepted

        Returns:
            Page texts in order (empty string for pages without text)

        Raises:
            PageLimitExceededError: If the PDF has more than max_pages pages
            ExtractionError: If the PDF cannot be opened or read
        """
        self.validate_data(data)

        try:
            with pdfplumber.open(BytesIO(data)) as pdf:
                total_pages = len(pdf.pages)
                logger.debug(f"PDF has {total_pages} pages")

                if max_pages is not None and total_pages > max_pages:
                    raise PageLimitExceededError(total_pages, max_pages)

                pages = []
                for page_num, page in enumerate(pdf.pages, start=1):
                    text = page.extract_text() or ''
                    if not text.strip():
                        logger.warning(f"No text found on page {page_num}")
                    pages.append(text)

        except ExtractionError:
            raise
        except Exception as e:
            logger.error(f"Failed to extract text from PDF: {e}")
            raise ExtractionError(f"PDF extraction failed: {e}") from e

        logger.info(f"Extracted text from {len(pages)} pages")
        return pages
