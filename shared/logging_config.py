"""Process-wide logging setup for entry points."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None, debug: bool = False):
    """
    Install the root handler once per process.

    Args:
        level: Level name (e.g. "INFO"); defaults to settings.LOG_LEVEL
        debug: Force DEBUG regardless of ``level``
    """
    if level is None:
        from .config import get_settings

        level = get_settings().LOG_LEVEL
    resolved = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
