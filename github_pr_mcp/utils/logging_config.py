"""Logging configuration for the MCP server and launcher."""

import logging
import sys
from typing import Optional, Union


# Log level constants
DEFAULT_LOG_LEVEL = logging.INFO


def setup_logging(
    log_level: Optional[Union[int, str]] = None,
    log_file: Optional[str] = None,
    console: bool = False
) -> None:
    """
    Configure logging for the MCP server or launcher.

    The server writes logs to a file or suppresses them entirely to avoid
    interfering with MCP protocol communication on stdout. The launcher
    passes console=True to get its output on stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to
        console: Whether to also log to stderr
    """
    if log_level is None:
        log_level = DEFAULT_LOG_LEVEL
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = DEFAULT_LOG_LEVEL

    # Create formatter with detailed information
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers
    root_logger.handlers.clear()

    # NullHandler by default so nothing reaches stdout unless asked for
    root_logger.addHandler(logging.NullHandler())

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        root_logger.addHandler(console_handler)

    # Add file handler if specified
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError:
            pass  # Unwritable log file: keep running without file logs

    # Set specific loggers to WARNING to minimize noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ from module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
