"""Logging configuration for the application."""
import logging
import sys
from datetime import datetime
from typing import Optional

from ..config.settings import LOG_LEVEL, LOG_FILE


def setup_logger(name: str = "spendtrack") -> logging.Logger:
    """
    Set up logger with console and optional file handlers.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    # Create formatters
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    simple_formatter = logging.Formatter(
        '%(levelname)s: %(message)s'
    )

    # Console handler (WARNING and above; stdout belongs to the CLI output)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    # File handler (DEBUG and above), only when explicitly configured
    if LOG_FILE is not None:
        try:
            LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not set up file logging: {e}")

    return logger


def log_import_audit(
    filename: str,
    kind: str,
    success: bool,
    transaction_count: int = 0,
    source: Optional[str] = None,
    error: Optional[str] = None
) -> None:
    """
    Log an import audit line for one file.

    Only counts and issuer labels are logged, never merchant text or amounts.

    Args:
        filename: Uploaded file name
        kind: 'csv' or 'pdf'
        success: Whether the import succeeded
        transaction_count: Number of transactions parsed
        source: Detected issuer label
        error: Error message if failed
    """
    logger = logging.getLogger("spendtrack.audit")

    audit_data = {
        "timestamp": datetime.now().isoformat(),
        "file": filename,
        "kind": kind,
        "success": success,
        "transactions": transaction_count,
    }

    if source:
        audit_data["source"] = source
    if error:
        audit_data["error"] = error

    # Format as structured log entry
    audit_message = " | ".join(f"{k}={v}" for k, v in audit_data.items())
    logger.info(f"AUDIT: {audit_message}")
