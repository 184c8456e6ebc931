import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_PERSONAS = [
    "Albert Einstein",
    "Cleopatra",
    "Julius Caesar",
    "Shakespeare",
    "Frida Kahlo",
    "Bruce Lee",
    "Leonardo da Vinci",
    "Napoleon Bonaparte",
    "Amelia Earhart",
    "Marie Curie",
]


class VisionConfig(BaseModel):
    google_api_key: Optional[str] = Field(default=None)
    gemini_model: str = Field(default="gemini-2.0-flash")
    timeout_seconds: float = Field(default=60, gt=0)
    max_retries: int = Field(default=1, ge=0, le=5)
    max_image_mb: int = Field(default=10, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_p: float = Field(default=0.8, ge=0.0, le=1.0)

    @property
    def max_image_bytes(self) -> int:
        return self.max_image_mb * 1024 * 1024


class CoachConfig(BaseModel):
    personas: list[str] = Field(default_factory=lambda: list(DEFAULT_PERSONAS), min_length=1)

    @field_validator("personas")
    def _strip_names(cls, v: list[str]) -> list[str]:
        names = [name.strip() for name in v if name and name.strip()]
        if not names:
            raise ValueError("at least one coach persona is required")
        return names


class DatabaseConfig(BaseModel):
    url: Optional[str] = None


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    timezone: Optional[str] = Field(default=None, description="IANA zone for day boundaries, server local if unset")
    log_level: str = Field(default="INFO")


class SecurityConfig(BaseModel):
    cors_origins: list[str] = Field(default_factory=list)


class DataConfig(BaseModel):
    data_dir: Path = Field(default=Path("backend/data"))

    @field_validator("data_dir", mode="before")
    def _expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()


class Settings(BaseModel):
    vision: VisionConfig = Field(default_factory=VisionConfig)
    coach: CoachConfig = Field(default_factory=CoachConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    data: DataConfig = Field(default_factory=DataConfig)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def database_url(self) -> str:
        if self.database.url:
            return self.database.url
        return f"sqlite+aiosqlite:///{self.data.data_dir / 'platecoach.db'}"


def _config_path() -> Path:
    return Path(os.environ.get("CONFIG_PATH", "config/config.json"))


def _load_file_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid JSON configuration at {path}") from exc


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _load_env() -> dict[str, Any]:
    env_config: dict[str, Any] = {}

    api_key = os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY")
    if api_key:
        env_config.setdefault("vision", {})["google_api_key"] = api_key

    model = os.environ.get("GEMINI_MODEL")
    if model:
        env_config.setdefault("vision", {})["gemini_model"] = model

    timeout = os.environ.get("GEMINI_TIMEOUT_SECONDS")
    if timeout:
        env_config.setdefault("vision", {})["timeout_seconds"] = float(timeout)

    retries = os.environ.get("GEMINI_MAX_RETRIES")
    if retries:
        env_config.setdefault("vision", {})["max_retries"] = int(retries)

    temperature = os.environ.get("GEMINI_TEMPERATURE")
    if temperature:
        env_config.setdefault("vision", {})["temperature"] = float(temperature)

    top_p = os.environ.get("GEMINI_TOP_P")
    if top_p:
        env_config.setdefault("vision", {})["top_p"] = float(top_p)

    max_image_mb = os.environ.get("MAX_IMAGE_MB")
    if max_image_mb:
        env_config.setdefault("vision", {})["max_image_mb"] = int(max_image_mb)

    personas = os.environ.get("COACH_PERSONAS")
    if personas:
        env_config.setdefault("coach", {})["personas"] = _split_list(personas)

    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        env_config.setdefault("database", {})["url"] = database_url

    host = os.environ.get("SERVER_HOST")
    if host:
        env_config.setdefault("server", {})["host"] = host

    port = os.environ.get("SERVER_PORT")
    if port:
        env_config.setdefault("server", {})["port"] = int(port)

    tz_name = os.environ.get("TIMEZONE")
    if tz_name:
        env_config.setdefault("server", {})["timezone"] = tz_name

    log_level = os.environ.get("LOG_LEVEL")
    if log_level:
        env_config.setdefault("server", {})["log_level"] = log_level.upper()

    cors_origins = os.environ.get("CORS_ORIGINS")
    if cors_origins:
        env_config.setdefault("security", {})["cors_origins"] = _split_list(cors_origins)

    data_dir = os.environ.get("DATA_DIR")
    if data_dir:
        env_config.setdefault("data", {})["data_dir"] = data_dir

    return env_config


SECTIONS = ("vision", "coach", "database", "server", "security", "data")


def merge_settings(env_config: dict[str, Any], file_config: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for section in SECTIONS:
        merged[section] = {**file_config.get(section, {}), **env_config.get(section, {})}
    return merged


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    try:
        env_config = _load_env()
    except ValueError as exc:
        raise RuntimeError(f"Configuration error: {exc}") from exc
    file_config = _load_file_config(_config_path())
    merged = merge_settings(env_config=env_config, file_config=file_config)
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise RuntimeError(f"Configuration error: {exc}") from exc


__all__ = ["DEFAULT_PERSONAS", "Settings", "get_settings", "merge_settings"]
