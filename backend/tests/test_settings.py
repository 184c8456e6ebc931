import json

import pytest

from platecoach.core import settings as settings_module
from platecoach.core.settings import DEFAULT_PERSONAS, get_settings, merge_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "GOOGLE_API_KEY", "GEMINI_API_KEY", "GEMINI_MODEL", "GEMINI_TIMEOUT_SECONDS",
        "GEMINI_MAX_RETRIES", "COACH_PERSONAS", "DATABASE_URL", "DATA_DIR", "TIMEZONE",
        "MAX_IMAGE_MB", "CORS_ORIGINS", "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "config.json"))
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


def test_defaults():
    settings = get_settings()
    assert settings.vision.google_api_key is None
    assert settings.vision.max_image_bytes == 10 * 1024 * 1024
    assert settings.vision.max_retries == 1
    assert settings.coach.personas == DEFAULT_PERSONAS
    assert settings.server.timezone is None
    assert settings.server.log_level == "INFO"
    assert settings.database_url.startswith("sqlite+aiosqlite:///")
    assert settings.database_url.endswith("platecoach.db")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "abc")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-flash")
    monkeypatch.setenv("COACH_PERSONAS", "Bruce Lee, Marie Curie ,")
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/food")
    monkeypatch.setenv("TIMEZONE", "Europe/Madrid")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.vision.google_api_key == "abc"
    assert settings.vision.gemini_model == "gemini-2.5-flash"
    assert settings.coach.personas == ["Bruce Lee", "Marie Curie"]
    assert settings.database_url == "postgresql+asyncpg://u:p@db/food"
    assert settings.server.timezone == "Europe/Madrid"
    assert settings.server.log_level == "DEBUG"


def test_google_key_takes_precedence(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "google")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini")
    assert get_settings().vision.google_api_key == "google"


def test_file_config_is_overlaid_by_env(monkeypatch, tmp_path):
    (tmp_path / "config.json").write_text(
        json.dumps({"vision": {"gemini_model": "from-file", "max_retries": 3}, "coach": {"personas": ["Cleopatra"]}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("GEMINI_MODEL", "from-env")

    settings = get_settings()
    assert settings.vision.gemini_model == "from-env"
    assert settings.vision.max_retries == 3
    assert settings.coach.personas == ["Cleopatra"]


def test_invalid_values_raise(monkeypatch):
    monkeypatch.setenv("GEMINI_MAX_RETRIES", "lots")
    with pytest.raises(RuntimeError):
        get_settings()


def test_invalid_json_file(tmp_path):
    (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(RuntimeError):
        get_settings()


def test_merge_settings_env_wins():
    merged = merge_settings({"server": {"port": 9000}}, {"server": {"port": 8000, "host": "127.0.0.1"}})
    assert merged["server"] == {"port": 9000, "host": "127.0.0.1"}
    assert merged["vision"] == {}
