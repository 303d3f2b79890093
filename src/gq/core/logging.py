"""
Logging configuration.

Console output goes to stderr so stdout only carries the answer.
"""

import logging
import sys
from pathlib import Path


def setup_logging(
    level: int = logging.WARNING,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure root logger with console and optional file output."""
    logger = logging.getLogger("gq")
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger."""
    return logging.getLogger(f"gq.{name}")
