"""Process-wide logging setup shared by every layer."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from guest_directory.utils.config import get_settings


_CONFIGURED = False

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stdout handler once; later calls are no-ops."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved_level = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=resolved_level,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
