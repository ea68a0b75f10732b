"""Central logging configuration for the service.

One stdout handler for application loggers and a second, bare-format
handler for the per-request access line written by the request-id
middleware. uvicorn's own access logger is muted in favour of that line.
"""
from __future__ import annotations
import logging
import os
from logging.config import dictConfig

ACCESS_LOGGER = "itemlist.access"


def _dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s:%(name)s:%(message)s"},
            "access": {"format": "%(asctime)s access %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
        "loggers": {
            "itemlist": {"level": level, "handlers": ["console"], "propagate": False},
            ACCESS_LOGGER: {"level": "INFO", "handlers": ["access"], "propagate": False},
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Configure logging once per process.

    Skipped when the root logger already has handlers (reloaders, pytest's
    log capture). ``level`` applies to the ``itemlist`` loggers and falls
    back to ``LOG_LEVEL``.
    """
    if logging.getLogger().handlers:
        return
    wanted = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    dictConfig(_dict_config(wanted))


__all__ = ["configure_logging", "ACCESS_LOGGER"]
