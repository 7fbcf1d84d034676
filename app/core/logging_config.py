"""Logging configuration for the application."""
import logging
import logging.config
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None):
    """Configure root logging once at startup."""
    level = (level or settings.LOG_LEVEL).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "simple",
                "stream": sys.stdout,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            # Keep the Prisma engine and access logs quieter than the app
            "prisma": {"level": "WARNING"},
            "uvicorn.access": {"level": "WARNING"},
        },
    })

    logging.getLogger(__name__).info("Logging configured (level=%s)", level)
