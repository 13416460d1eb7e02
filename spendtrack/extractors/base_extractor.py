"""Base extractor abstract class."""
from abc import ABC, abstractmethod
from typing import List


class BaseExtractor(ABC):
    """
    Abstract base class for all extractors.

    Extractors turn an uploaded document held in memory into per-page text.
    Uploads are never written to disk, so extractors work on bytes rather
    than paths.
    """

    def __init__(self):
        """Initialize the extractor."""
        self.name = self.__class__.__name__

    @abstractmethod
    def extract_pages(self, data: bytes, max_pages: int) -> List[str]:
        """
        Extract the text of each page of a document.

        Args:
            data: Raw document bytes
            max_pages: Largest page count accepted

        Returns:
            One text string per page, in page order

        Raises:
            PageLimitExceededError: If the document has too many pages
            ExtractionError: If the document cannot be read
        """
        pass

    @abstractmethod
    def can_handle(self, filename: str) -> bool:
        """
        Check if this extractor can handle the given file.

        Args:
            filename: Original file name

        Returns:
            True if this extractor can process the file
        """
        pass

    def validate_data(self, data: bytes) -> None:
        """
        Validate that there is something to extract.

        Raises:
            ExtractionError: If the buffer is empty
        """
        if not data:
            raise ExtractionError("File is empty")


class ExtractionError(Exception):
    """Custom exception for extraction errors."""
    pass


class PageLimitExceededError(ExtractionError):
    """Raised when a document has more pages than allowed."""

    def __init__(self, page_count: int, max_pages: int):
        self.page_count = page_count
        self.max_pages = max_pages
        super().__init__(f"PDF has {page_count} pages. Max allowed is {max_pages}.")
