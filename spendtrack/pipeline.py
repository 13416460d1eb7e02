"""
Import pipeline - upload validation, parsing and ledger merge.

Coordinates one import batch: each file is validated, parsed on the
background worker and merged into the session ledger. Merges happen one
file at a time on the caller's thread, so the ledger has a single writer.
"""
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config.settings import ALLOWED_EXTENSIONS, MAX_FILE_SIZE_BYTES, MAX_PDF_PAGES, PARSE_TIMEOUT_SECONDS
from .ledger import TransactionLedger
from .models import ParseResult
from .utils import log_import_audit
from .worker import KIND_CSV, CSVPayload, ParseFailedError, ParseTimeoutError, ParseWorker, PDFPayload

logger = logging.getLogger(__name__)


class FileRejectedError(Exception):
    """Raised when an upload fails the type or size checks."""
    pass


@dataclass
class FileImportError:
    """A file that could not be imported, with the reason shown to the user."""
    filename: str
    message: str


@dataclass
class ImportSummary:
    """
    Outcome of an import batch.

    Attributes:
        file_count: Files submitted
        inserted_count: Transactions added to the ledger
        skipped_count: Duplicates already present in the ledger
        sources: Issuer label of each imported file, in order
        errors: Files that failed
    """
    file_count: int = 0
    inserted_count: int = 0
    skipped_count: int = 0
    sources: List[str] = field(default_factory=list)
    errors: List[FileImportError] = field(default_factory=list)

    @property
    def imported_file_count(self) -> int:
        return self.file_count - len(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        """User-facing summary line."""
        plural = 's' if self.file_count > 1 else ''
        msg = f"Imported {self.inserted_count} transactions from {self.file_count} file{plural}"
        if self.skipped_count > 0:
            msg += f" ({self.skipped_count} duplicates skipped)"
        return msg


def format_file_size(size_bytes: int) -> str:
    """Size in whole kilobytes, rounded up ('1025 KB')."""
    return f"{math.ceil(size_bytes / 1024)} KB"


def file_kind(filename: str) -> Optional[str]:
    """'csv' or 'pdf' from the file extension (case-insensitive), else None."""
    suffix = Path(filename).suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        return None
    return suffix.lstrip('.')


def validate_upload(filename: str, size_bytes: int, max_size: int = MAX_FILE_SIZE_BYTES) -> str:
    """
    Check an upload before any parsing.

    Args:
        filename: Original file name
        size_bytes: File size
        max_size: Largest accepted size in bytes

    Returns:
        File kind ('csv' or 'pdf')

    Raises:
        FileRejectedError: If the file is too large or not a CSV/PDF
    """
    if size_bytes > max_size:
        max_label = f"{max_size / (1024 * 1024):g} MB"
        raise FileRejectedError(
            f"{filename} is too large ({format_file_size(size_bytes)}). Max file size is {max_label}."
        )

    kind = file_kind(filename)
    if kind is None:
        raise FileRejectedError(f"{filename} must be a CSV or PDF")
    return kind


class StatementImporter:
    """
    Import statement files into a ledger.

    Usage:
        ledger = TransactionLedger()
        with StatementImporter(ledger) as importer:
            summary = importer.import_files([("amex.pdf", data)])
        print(summary.message)
    """

    def __init__(
        self,
        ledger: TransactionLedger,
        worker: Optional[ParseWorker] = None,
        max_file_size: int = MAX_FILE_SIZE_BYTES,
        max_pages: int = MAX_PDF_PAGES,
        timeout: float = PARSE_TIMEOUT_SECONDS
    ):
        self.ledger = ledger
        self._owns_worker = worker is None
        self.worker = worker or ParseWorker()
        self.max_file_size = max_file_size
        self.max_pages = max_pages
        self.timeout = timeout

    def parse_file(self, filename: str, data: bytes) -> ParseResult:
        """
        Validate and parse one file without touching the ledger.

        Raises:
            FileRejectedError: If the upload is rejected
            ParseTimeoutError: If parsing takes too long
            ParseFailedError: If the file cannot be parsed
        """
        kind = validate_upload(filename, len(data), self.max_file_size)

        if kind == KIND_CSV:
            payload = CSVPayload(text=data.decode('utf-8-sig', errors='replace'))
        else:
            payload = PDFPayload(data=data, max_pages=self.max_pages)

        return self.worker.parse(filename, kind, payload, timeout=self.timeout)

    def import_file(self, filename: str, data: bytes) -> ImportSummary:
        """Import a single file."""
        return self.import_files([(filename, data)])

    def import_files(self, files: Sequence[Tuple[str, bytes]]) -> ImportSummary:
        """
        Import a batch of files.

        Files are parsed and merged in order. A failing file is recorded in
        the summary and the rest of the batch continues.

        Args:
            files: (filename, content bytes) pairs

        Returns:
            ImportSummary for the batch
        """
        summary = ImportSummary(file_count=len(files))

        for filename, data in files:
            kind = file_kind(filename) or 'unknown'
            try:
                result = self.parse_file(filename, data)
            except (FileRejectedError, ParseTimeoutError, ParseFailedError) as e:
                logger.error(f"Import failed for {filename}: {e}")
                summary.errors.append(FileImportError(filename, str(e)))
                log_import_audit(filename, kind, success=False, error=str(e))
                continue

            insert = self.ledger.add_transactions(result.transactions)
            summary.inserted_count += insert.inserted_count
            summary.skipped_count += insert.skipped_count
            summary.sources.append(result.source)

            log_import_audit(
                filename,
                kind,
                success=True,
                transaction_count=result.transaction_count,
                source=result.source
            )

        logger.info(summary.message)
        return summary

    def import_paths(self, paths: Iterable[Path]) -> ImportSummary:
        """
        Import files from disk.

        Unreadable paths are reported like any other failing file.
        """
        files = []
        unreadable = []
        for path in paths:
            path = Path(path)
            try:
                files.append((path.name, path.read_bytes()))
            except OSError as e:
                unreadable.append(FileImportError(path.name, f"Could not read {path.name}: {e.strerror or e}"))

        summary = self.import_files(files)
        summary.file_count += len(unreadable)
        summary.errors = unreadable + summary.errors
        return summary

    def close(self) -> None:
        if self._owns_worker:
            self.worker.shutdown()

    def __enter__(self) -> 'StatementImporter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
