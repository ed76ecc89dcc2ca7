import logging
import os
import sys
from logging.config import dictConfig
from typing import Optional

from app.core.config import APP_ENV

LOG_LEVEL = os.getenv("LOG_LEVEL") or ("DEBUG" if APP_ENV == "development" else "INFO")

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Append the `extra=` context of a record as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED and not key.startswith("_")
        }
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{line} | {pairs}"


def setup_logging(level: Optional[str] = None):
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,

            "formatters": {
                "default": {
                    "()": ContextFormatter,
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | "
                        "%(client_addr)s | %(method)s | "
                        "%(path)s | %(status_code)s | "
                        "%(process_time_ms)sms"
                    ),
                },
            },

            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
                "access_console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                },
            },

            "loggers": {
                "access": {
                    "handlers": ["access_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                # approval transitions are kept at INFO even when the root is quieter
                "app.services.workflow": {
                    "level": "INFO",
                },
                "sqlalchemy.engine": {
                    "level": os.getenv("SQL_LOG_LEVEL", "WARNING"),
                },
            },

            "root": {
                "level": level or LOG_LEVEL,
                "handlers": ["console"],
            },
        }
    )
