"""Background parse worker.

Parsing runs off the caller's thread behind a request/response boundary:
every request gets exactly one response carrying the same id, and the
caller bounds each request with a timeout. A timed-out request is removed
from the pending table, so nothing leaks when a parse never finishes.
"""

import logging
import threading
import uuid
from concurrent.futures import Executor, Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .config.settings import MAX_PDF_PAGES, PARSE_TIMEOUT_SECONDS
from .models import ParseResult
from .parsers import StatementParser

logger = logging.getLogger(__name__)

KIND_CSV = 'csv'
KIND_PDF = 'pdf'


@dataclass(frozen=True)
class CSVPayload:
    """CSV request payload: the decoded file text."""
    text: str


@dataclass(frozen=True)
class PDFPayload:
    """PDF request payload: raw bytes plus the page cap."""
    data: bytes
    max_pages: int = MAX_PDF_PAGES


@dataclass(frozen=True)
class ParseRequest:
    """
    One file to parse.

    Attributes:
        id: Correlation id, echoed in the response
        filename: Original file name
        kind: 'csv' or 'pdf'
        payload: CSVPayload or PDFPayload
    """
    id: str
    filename: str
    kind: str
    payload: Union[CSVPayload, PDFPayload]


@dataclass(frozen=True)
class ParseResponse:
    """Worker reply: either a result (ok) or an error message."""
    id: str
    ok: bool
    result: Optional[ParseResult] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        response = {'id': self.id, 'ok': self.ok}
        if self.ok:
            response['result'] = self.result.to_dict()
        else:
            response['error'] = self.error
        return response


class ParseTimeoutError(Exception):
    """Raised when a parse request does not finish in time."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"File parsing timed out after {timeout:g} seconds")


class ParseFailedError(Exception):
    """Raised by ParseWorker.parse when the worker returns an error response."""
    pass


_statement_parser: Optional[StatementParser] = None
_statement_parser_lock = threading.Lock()


def _get_statement_parser() -> StatementParser:
    global _statement_parser
    with _statement_parser_lock:
        if _statement_parser is None:
            _statement_parser = StatementParser()
        return _statement_parser


def handle_request(request: ParseRequest, parser: Optional[StatementParser] = None) -> ParseResponse:
    """
    Worker-side request handler.

    Never raises: every failure becomes an error response for the same id.

    Args:
        request: Parse request
        parser: Statement parser (default: shared instance)

    Returns:
        ParseResponse correlated by request.id
    """
    try:
        parser = parser or _get_statement_parser()

        if request.kind == KIND_CSV and isinstance(request.payload, CSVPayload):
            result = parser.parse_csv_text(request.payload.text, request.filename)
        elif request.kind == KIND_PDF and isinstance(request.payload, PDFPayload):
            result = parser.parse_pdf_bytes(request.payload.data, request.filename, request.payload.max_pages)
        else:
            return ParseResponse(id=request.id, ok=False, error=f"Unsupported request kind: {request.kind}")

        return ParseResponse(id=request.id, ok=True, result=result)

    except Exception as e:
        logger.debug(f"Parse request {request.id} failed: {e}")
        return ParseResponse(id=request.id, ok=False, error=str(e) or e.__class__.__name__)


class ParseWorker:
    """
    Single background worker for parse requests.

    Usage:
        with ParseWorker() as worker:
            result = worker.parse("amex.pdf", "pdf", PDFPayload(data))
    """

    def __init__(self, executor: Optional[Executor] = None, parser: Optional[StatementParser] = None):
        """
        Initialize worker.

        Args:
            executor: Executor to run requests on (default: one thread)
            parser: Statement parser handed to every request
        """
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="spendtrack-parse")
        self._parser = parser
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    @property
    def pending_count(self) -> int:
        """Number of submitted requests without a delivered response."""
        with self._lock:
            return len(self._pending)

    def submit(self, request: ParseRequest) -> Future:
        """Queue a request and track it as pending."""
        future = self._executor.submit(handle_request, request, self._parser)
        with self._lock:
            self._pending[request.id] = future
        return future

    def parse(
        self,
        filename: str,
        kind: str,
        payload: Union[CSVPayload, PDFPayload],
        timeout: float = PARSE_TIMEOUT_SECONDS
    ) -> ParseResult:
        """
        Parse one file and wait for the result.

        Args:
            filename: Original file name
            kind: 'csv' or 'pdf'
            payload: Request payload
            timeout: Seconds to wait for the response

        Returns:
            ParseResult

        Raises:
            ParseTimeoutError: If no response arrives within timeout
            ParseFailedError: If the worker reports an error
        """
        request = ParseRequest(id=uuid.uuid4().hex, filename=filename, kind=kind, payload=payload)
        future = self.submit(request)

        try:
            response = future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.warning(f"Parsing {filename} timed out after {timeout:g} seconds")
            raise ParseTimeoutError(timeout)
        finally:
            with self._lock:
                self._pending.pop(request.id, None)

        if response.id != request.id:
            raise ParseFailedError(f"Mismatched response id for {filename}")
        if not response.ok:
            raise ParseFailedError(response.error)
        return response.result

    def shutdown(self) -> None:
        """Cancel everything pending and stop the executor."""
        with self._lock:
            pending = list(self._pending.values())
            self._pending.clear()
        for future in pending:
            future.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> 'ParseWorker':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
