"""Logging setup for applications and scripts embedding the client."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

PACKAGE_LOGGER = "odoo_rpc"


def _numeric_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str = "info") -> None:
    """Send ``odoo_rpc.*`` and other log records to stderr at *level*."""
    logging.basicConfig(
        level=_numeric_level(level),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    set_package_level(level)


def set_package_level(level: str) -> None:
    """Set the level of the ``odoo_rpc`` logger without touching handlers."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(_numeric_level(level))
