"""Logging configuration for vkshadersgen."""

import logging
import os
import sys
from typing import Optional


def setup_logging(
    level: Optional[int] = None,
    log_file: Optional[str] = None
) -> None:
    """Setup logging configuration for the package."""

    # Determine logging level
    if level is None:
        if os.getenv("VERBOSE") == "1":
            level = logging.DEBUG
        elif os.getenv("QUIET") == "1":
            level = logging.WARNING
        else:
            level = logging.INFO

    # Only log to a file when explicitly asked to
    if log_file is None:
        log_file = os.getenv("VKSHADERS_LOG_FILE") or None

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Setup handlers
    handlers = []

    # Console handler, diagnostics stream
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger for this package
    logger = logging.getLogger('vkshadersgen')
    logger.setLevel(logging.DEBUG)  # Let handlers control the level

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    # Add new handlers
    for handler in handlers:
        logger.addHandler(handler)

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    logger.debug(f"Logging configured - Console: {logging.getLevelName(level)}, File: {log_file or 'disabled'}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the specified module name."""
    # Ensure the name is under vkshadersgen package
    if not name.startswith('vkshadersgen'):
        name = f'vkshadersgen.{name}'

    return logging.getLogger(name)
