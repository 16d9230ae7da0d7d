"""Logging setup applied once when the application is built."""

from __future__ import annotations

import logging
import logging.config

from marketplace.core.config import Settings


def configure_logging(settings: Settings) -> None:
    level = settings.logging.level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": settings.logging.format},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "marketplace": {"handlers": ["console"], "level": level, "propagate": False},
            },
        }
    )
    logging.getLogger(__name__).debug("Logging configured at %s", level)
