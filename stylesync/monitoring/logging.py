"""Logging configuration module."""

from __future__ import annotations

import logging

from stylesync.config.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger; ``level`` overrides ``LOG_LEVEL``.

    HTTP client libraries log every request at INFO, so they are held at
    WARNING unless the stylist itself runs at DEBUG.
    """

    desired = getattr(logging, (level or get_settings().log_level).upper(), logging.INFO)
    logging.basicConfig(level=desired, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if desired <= logging.DEBUG else logging.WARNING)
