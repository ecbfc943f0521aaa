"""Logging setup: plain text by default, JSON lines when LOG_FORMAT=json."""
from __future__ import annotations

import logging.config

from pythonjsonlogger import jsonlogger

# "leave_management" when installed, "src.leave_management.leave_management" from a checkout.
PACKAGE_LOGGER = __name__.rsplit(".", 1)[0]


class LeaveJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def build_logging_config(*, level: str = "INFO", fmt: str = "text") -> dict:
    formatter = "json" if fmt == "json" else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "json": {"()": LeaveJsonFormatter, "format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "level": level.upper(),
            },
        },
        "loggers": {
            PACKAGE_LOGGER: {"handlers": ["console"], "level": level.upper(), "propagate": False},
            "mysql.connector": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(*, level: str = "INFO", fmt: str = "text") -> None:
    logging.config.dictConfig(build_logging_config(level=level, fmt=fmt))
