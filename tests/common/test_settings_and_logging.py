import logging

import pytest
from pythonjsonlogger import jsonlogger

from hub_attendance.config import get_settings_module
from hub_attendance.core.logging import build_logging_config, configure_logging


@pytest.mark.parametrize(
    "env, module",
    [
        ("production", "hub_attendance.config.production"),
        ("prod", "hub_attendance.config.production"),
        ("testing", "hub_attendance.config.testing"),
        ("whatever", "hub_attendance.config.development"),
    ],
)
def test_app_env_selects_settings_module(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == module


def test_default_settings_module(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)

    assert get_settings_module() == "hub_attendance.config.development"


def test_json_formatter_config():
    config = build_logging_config(level="debug", fmt="json")

    assert config["handlers"]["console"]["formatter"] == "json"
    assert config["formatters"]["json"]["()"] is jsonlogger.JsonFormatter
    assert config["loggers"]["hub_attendance"]["level"] == "DEBUG"


def test_unknown_format_falls_back_to_standard():
    assert build_logging_config(fmt="xml")["handlers"]["console"]["formatter"] == "standard"


def test_configure_logging_sets_package_level():
    configure_logging(level="WARNING", fmt="json")

    assert logging.getLogger("hub_attendance").level == logging.WARNING
    handler = logging.getLogger("hub_attendance").handlers[0]
    assert isinstance(handler.formatter, jsonlogger.JsonFormatter)
