from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config import get_config_section

from . import constants


def _resolve_env_file() -> str:
    # Start from the package directory and search upwards
    here = Path(__file__).resolve().parent
    for p in [here, *here.parents]:
        f = p / ".env"
        if f.exists():
            return str(f)
    cwd = Path.cwd()
    for p in [cwd, *cwd.parents]:
        f = p / ".env"
        if f.exists():
            return str(f)
    return str(Path(__file__).resolve().parent / ".env")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MWB_",
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 7040

    base_url: str = constants.BASE_URL
    accept_language: str = "es-ES,es;q=0.5"
    landing_language: str = "es"
    request_timeout_seconds: float = 20.0
    slow_request_seconds: float = 10.0

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.rstrip("/")
        return value


def _load_from_config() -> Dict[str, Any]:
    server = get_config_section("server", {})
    scraper = get_config_section("scraper", {})
    merged: Dict[str, Any] = {}
    for section in (server, scraper):
        if isinstance(section, dict):
            merged.update(section)
    return {k: v for k, v in merged.items() if k in Settings.model_fields and v is not None}


def get_settings() -> Settings:
    """Build settings from the TOML config, letting MWB_* variables win."""
    overrides = _load_from_config()
    env_settings = Settings()
    explicit = env_settings.model_fields_set
    for key in explicit:
        overrides[key] = getattr(env_settings, key)
    return Settings(**overrides)
