"""
Logging configuration
Applied once at application startup
"""

import logging
import logging.config

from .config import settings

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)

def setup_logging(level: str = None) -> None:
    """Configure root and application loggers"""
    level = (level or settings.LOG_LEVEL).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": JSON_FORMAT if settings.LOG_JSON else PLAIN_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "storefront": {"level": level},
            "sqlalchemy.engine": {"level": "INFO" if settings.DATABASE_ECHO else "WARNING"},
        },
        "root": {"level": level, "handlers": ["console"]},
    })
