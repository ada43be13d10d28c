"""
Loguru setup shared by scripts and the host application.
"""

from __future__ import annotations

import sys
from typing import Optional

from loguru import logger

from lexigraph import config


def setup_logging(level: Optional[str] = None) -> None:
    """Replace loguru's default sink with a stderr sink at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level or config.get_log_level(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}",
    )
