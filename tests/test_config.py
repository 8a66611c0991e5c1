from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import AppSettings


def test_defaults(monkeypatch):
    monkeypatch.delenv("FORMDATA_DEFAULT_TIMEOUT_MS", raising=False)

    settings = AppSettings(_env_file=None)

    assert settings.default_timeout_ms == 30_000
    assert settings.log_level == "WARNING"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FORMDATA_DEFAULT_TIMEOUT_MS", "5000")
    monkeypatch.setenv("formdata_user_agent", "env-agent/1.0")

    settings = AppSettings(_env_file=None)

    assert settings.default_timeout_ms == 5000
    assert settings.user_agent == "env-agent/1.0"


def test_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("FORMDATA_DOCTOR_URL=https://echo.example.test/post\n", encoding="utf-8")

    settings = AppSettings(_env_file=env_file)

    assert settings.doctor_url == "https://echo.example.test/post"


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("FORMDATA_DEFAULT_TIMEOUT_MS", "0")

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None)
