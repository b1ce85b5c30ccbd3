"""Loguru setup shared by the app and the admin scripts."""
from __future__ import annotations

import sys

from loguru import logger

from .config import get_settings

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with one honouring LOG_LEVEL."""
    global _configured
    if _configured:
        return
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or get_settings().log_level),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
    )
    _configured = True
