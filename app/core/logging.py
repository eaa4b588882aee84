"""Centralised logging configuration utilities."""
from __future__ import annotations

import logging
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL = logging.INFO


def configure_logging(level: int | str = DEFAULT_LEVEL) -> None:
    """Configure root logging, or only adjust its level if already configured."""

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module specific logger with shared configuration."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)
