"""Logging setup shared by the Flask app and the observer runtime."""

from __future__ import annotations

import logging.config

from pythonjsonlogger import jsonlogger


def build_logging_config(*, level: str = "INFO", fmt: str = "standard") -> dict:
    if fmt not in {"standard", "json"}:
        fmt = "standard"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": fmt,
            },
        },
        "loggers": {
            "hub_attendance": {
                "handlers": ["console"],
                "level": level.upper(),
                "propagate": False,
            },
        },
    }


def configure_logging(*, level: str = "INFO", fmt: str = "standard") -> None:
    logging.config.dictConfig(build_logging_config(level=level, fmt=fmt))
