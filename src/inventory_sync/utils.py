"""Utility helpers: logging setup and a plain-text inventory summary."""

import logging
import sys
from typing import (
    Optional,
    TextIO,
    Union,
)

from .types import InventoryStats
from .views import format_price


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(name: str = "inventory_sync", level: Union[int, str] = "WARNING") -> logging.Logger:
    """Configure a logger with a single stderr handler.

    Calling it again only updates the level, so handlers are never duplicated.

    Args:
        name: Logger name to configure.
        level: Logging level name (case-insensitive) or number.

    Returns:
        The configured logger.
    """
    if isinstance(level, str):
        level = level.upper()
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)

    logger.propagate = False
    return logger


def print_inventory_summary(stats: InventoryStats, stream: Optional[TextIO] = None) -> None:
    """Print the four inventory statistics as a one-line-per-stat summary."""
    out = stream or sys.stdout
    print("=" * 40, file=out)
    print(f"{'Total Products':<20}{stats.total_products:>20}", file=out)
    print(f"{'Total Value':<20}{format_price(stats.total_value):>20}", file=out)
    print(f"{'Items in Stock':<20}{stats.total_stock:>20}", file=out)
    print(f"{'Categories':<20}{stats.categories:>20}", file=out)
    print("=" * 40, file=out)
