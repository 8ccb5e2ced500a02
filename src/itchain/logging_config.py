"""
Logging Configuration for itchain.

Provides centralized setup for the pipeline trace logger. The library is
silent by default; output is switched on from the environment:

- ITCHAIN_DEBUG_LOG: any non-empty value enables a stderr handler
- ITCHAIN_LOG_FILE: path of a file that trace records are appended to
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

TRACE_LOGGER_NAME = "itchain.trace"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _debug_log_enabled() -> bool:
    return bool(os.getenv("ITCHAIN_DEBUG_LOG"))


def _get_log_file() -> Optional[Path]:
    log_file = os.getenv("ITCHAIN_LOG_FILE")
    if not log_file:
        return None
    return Path(log_file)


def _create_file_handler(log_path: Path) -> logging.FileHandler:
    """
    Create a file handler for the specified log file.

    Args:
        log_path: Path of the log file; parent directories are created

    Returns:
        Configured FileHandler
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit.

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a handler.
    ::: This is stateless.
    """
    def emit(self, record):
        super().emit(record)
        self.flush()


def _create_stderr_handler() -> logging.StreamHandler:
    """Create a stderr handler for console output with auto-flush."""
    handler = FlushingStreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_trace_logging(
    stderr: Optional[bool] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    (Re)configure the trace logger.

    Existing handlers are closed and removed first, so this can be called
    again after the environment changes.

    Args:
        stderr: Attach a stderr handler. Defaults to ITCHAIN_DEBUG_LOG.
        log_file: Also append to this file. Defaults to ITCHAIN_LOG_FILE.

    Returns:
        Configured logger instance
    """
    if stderr is None:
        stderr = _debug_log_enabled()
    if log_file is None:
        log_file = _get_log_file()

    logger = logging.getLogger(TRACE_LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    if not stderr and log_file is None:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False  # Don't propagate to root logger

    if log_file is not None:
        logger.addHandler(_create_file_handler(Path(log_file)))
    if stderr:
        logger.addHandler(_create_stderr_handler())

    return logger


def get_trace_logger() -> logging.Logger:
    """
    Get the trace logger used by Pipeline.trace() and extend().

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(TRACE_LOGGER_NAME)

    # Only configure once
    if not logger.handlers:
        configure_trace_logging()

    return logger


def suppress_stderr_logging():
    """
    Suppress stderr output of the trace logger.

    File logging continues to work normally.
    """
    logger = get_trace_logger()
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(logging.CRITICAL + 1)  # Effectively disable


def restore_stderr_logging():
    """
    Restore stderr output of the trace logger.
    """
    logger = get_trace_logger()
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(logging.DEBUG)
