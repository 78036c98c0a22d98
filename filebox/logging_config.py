"""
Application logging configuration.

This module provides unified logging configuration for the Filebox API.
It sets up structured logging that captures detailed error information
for debugging while returning safe, user-friendly messages to clients.
"""
import logging
import sys

RECOVERED_ERROR_EVENT = "recovered_error"


def setup_logging() -> logging.Logger:
    """
    Configure and return the application logger.

    The logger outputs to stdout with a structured format including:
    - Timestamp
    - Logger name
    - Log level
    - Message

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger("filebox")
    logger.setLevel(logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def log_recovered_error(
    logger: logging.Logger,
    operation: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log a failure that was handled locally instead of being propagated.

    Recovered errors (best-effort remote deletes, staged file cleanup, ...)
    are kept apart from propagated failures: they are logged at WARNING with
    ``event=recovered_error`` and the operation name so they can be filtered
    and counted without being mistaken for request errors.

    Args:
        logger: Logger to write to
        operation: Short name of the operation that failed (e.g. "blob_delete")
        exc: The exception that was swallowed
        **context: Extra identifiers (file_id, remote_id, path, ...)
    """
    details = ", ".join(f"{key}={value}" for key, value in context.items())
    logger.warning(
        f"Recovered error in {operation}: {exc.__class__.__name__}: {exc}"
        + (f" ({details})" if details else ""),
        extra={
            "event": RECOVERED_ERROR_EVENT,
            "operation": operation,
            **{f"ctx_{key}": value for key, value in context.items()},
        },
    )
