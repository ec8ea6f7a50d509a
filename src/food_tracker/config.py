"""Application configuration."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = None
    openai_store: bool = False
    recognition_timeout_seconds: float = 60.0
    storage_path: Path = Path("data/food_tracker.json")
    default_daily_target: int = 2000
    timezone: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None) -> str | None:
    """Return a valid IANA timezone name, or None for the system zone."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "local"}:
        return None
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {cleaned}") from exc
    return cleaned
