from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from marksense.core.config import Settings, parse_duration


@pytest.mark.parametrize(
    "value,expected",
    [
        ("7d", timedelta(days=7)),
        ("12h", timedelta(hours=12)),
        ("30m", timedelta(minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("2w", timedelta(weeks=2)),
        ("3600", timedelta(seconds=3600)),
        (90, timedelta(seconds=90)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "7x", "d7", "-1d", "1.5h"])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_mongo_uri_aliases(monkeypatch):
    monkeypatch.delenv("MONGO_URI", raising=False)
    monkeypatch.setenv("MONGODB_URI", "mongodb://db.internal:27017")
    assert Settings(_env_file=None).mongo_uri == "mongodb://db.internal:27017"


def test_openrouter_key_enables_ai(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    assert Settings(_env_file=None).openai_configured is False

    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")
    s = Settings(_env_file=None)
    assert s.openai_configured is True
    assert s.openai_base_url.startswith("https://openrouter.ai/")


def test_jwt_expire_is_validated(monkeypatch):
    monkeypatch.setenv("JWT_EXPIRE", "12h")
    assert Settings(_env_file=None).jwt_expire_delta == timedelta(hours=12)

    monkeypatch.setenv("JWT_EXPIRE", "forever")
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("raw,expected", [("api", "/api"), ("/api/", "/api"), ("", ""), ("/v1/api", "/v1/api")])
def test_api_prefix_normalized(raw, expected):
    assert Settings(_env_file=None, api_prefix=raw).api_prefix_normalized == expected
