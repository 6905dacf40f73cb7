"""Logging configuration module."""

from __future__ import annotations

import logging

from wardrobe_api.config.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logger according to project conventions."""

    desired = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, desired, logging.INFO),
        format=LOG_FORMAT,
    )
    # httpx logs every request line at INFO, which drowns out the service logs.
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.root.level))
