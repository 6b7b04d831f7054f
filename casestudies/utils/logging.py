"""Logging utilities.

This module configures logging for experiment runs.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str | Path] = None,
    format_string: str = DEFAULT_FORMAT,
    tensorflow_level: int = logging.WARNING,
) -> None:
    """Configure logging for an experiment run.

    Args:
        level: Logging level for this package.
        log_file: Optional file to also write logs to.
        format_string: Log record format.
        tensorflow_level: Level applied to TensorFlow's own logger.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=handlers,
        force=True,
    )

    logging.getLogger("tensorflow").setLevel(tensorflow_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (typically __name__)."""
    return logging.getLogger(name)
