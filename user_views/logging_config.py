import logging
import os
from logging.config import dictConfig

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure process logging for hosts embedding the view layer."""
    level = os.getenv("USER_VIEWS_LOG_LEVEL", "INFO").upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": DEFAULT_LOG_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )

    if os.getenv("USER_VIEWS_DEBUG_SQL", "0") == "1":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
