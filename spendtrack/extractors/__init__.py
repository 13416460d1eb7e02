"""Extractors for different document types."""
from .base_extractor import BaseExtractor, ExtractionError, PageLimitExceededError
from .pdf_extractor import PDFExtractor

__all__ = ['BaseExtractor', 'ExtractionError', 'PageLimitExceededError', 'PDFExtractor']
