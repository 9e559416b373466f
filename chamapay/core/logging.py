"""Logging setup for the API process."""

from __future__ import annotations

import logging

from chamapay.core.config import Settings

_configured = False


def configure_logging(settings: Settings) -> None:
    """Install a single stream handler on the root logger."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(settings.logging.format))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(settings.logging.level.upper())
    if not settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True


__all__ = ["configure_logging"]
