"""Tests for environment-driven configuration."""
from datetime import timedelta

import pytest

from barangay import create_app
from barangay.config import DEFAULT_DATABASE_URL, load_config, parse_expiration


@pytest.mark.parametrize(
    "value, expected",
    [
        ("24h", timedelta(hours=24)),
        ("30m", timedelta(minutes=30)),
        ("7d", timedelta(days=7)),
        ("45s", timedelta(seconds=45)),
        ("3600", timedelta(seconds=3600)),
        (" 2H ", timedelta(hours=2)),
        (None, timedelta(hours=24)),
        ("soon", timedelta(hours=24)),
    ],
)
def test_parse_expiration(value, expected):
    assert parse_expiration(value) == expected


def test_defaults():
    config = load_config({})
    assert config["SQLALCHEMY_DATABASE_URI"] == DEFAULT_DATABASE_URL
    assert config["JWT_ACCESS_TOKEN_EXPIRES"] == timedelta(hours=24)
    assert config["LOG_LEVEL"] == "INFO"
    assert config["LOG_JSON"] is False


def test_environment_overrides():
    config = load_config({
        "DATABASE_URL": "postgresql://db/barangay",
        "JWT_SECRET_KEY": "from-env",
        "JWT_EXPIRATION": "12h",
        "BARANGAY_LOG_LEVEL": "debug",
        "BARANGAY_LOG_JSON": "yes",
    })
    assert config["SQLALCHEMY_DATABASE_URI"] == "postgresql://db/barangay"
    assert config["JWT_SECRET_KEY"] == "from-env"
    assert config["JWT_ACCESS_TOKEN_EXPIRES"] == timedelta(hours=12)
    assert config["LOG_LEVEL"] == "DEBUG"
    assert config["LOG_JSON"] is True


def test_test_config_wins_over_environment(monkeypatch):
    monkeypatch.setenv("JWT_EXPIRATION", "1h")
    app = create_app({"SQLALCHEMY_DATABASE_URI": "sqlite://", "JWT_ACCESS_TOKEN_EXPIRES": timedelta(minutes=5)})
    assert app.config["JWT_ACCESS_TOKEN_EXPIRES"] == timedelta(minutes=5)


def test_json_log_formatter():
    import json
    import logging

    from barangay.log import JsonLogFormatter

    record = logging.LogRecord("barangay.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    payload = json.loads(JsonLogFormatter().format(record))
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "barangay.test"
