"""Logging configuration."""

import logging
import sys
from typing import Optional

from papertrade.config.settings import get_settings


def setup_logging(level: Optional[str] = None) -> None:
    """Configure application logging."""
    level = level or get_settings().log_level

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("yfinance").setLevel(logging.WARNING)
