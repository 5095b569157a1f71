# jokebox/config.py
"""
Runtime configuration read from environment variables.

The entry point calls load_dotenv() first, so values can also live in a .env file.
"""
from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


DEFAULT_API_URL = "https://v2.jokeapi.dev/joke/"


class AppConfig(BaseModel):
    data_dir: Path = Path("./data")
    api_url: str = DEFAULT_API_URL
    cache_ttl_s: float = Field(default=3600.0, ge=0)
    min_interval_s: float = Field(default=0.5, ge=0)
    timeout_s: float = Field(default=10.0, gt=0)
    threshold: float = Field(default=0.30, ge=0, le=1)
    max_attempts: int = Field(default=5, ge=1)

    @property
    def ratings_path(self) -> Path:
        return self.data_dir / "jokes.json"

    @property
    def report_path(self) -> Path:
        return self.data_dir / "user_report.json"

    @property
    def cache_path(self) -> Path:
        return self.data_dir / "cache.json"


# env var -> AppConfig field
ENV_FIELDS = {
    "JOKEBOX_DATA_DIR": "data_dir",
    "JOKEBOX_API_URL": "api_url",
    "JOKEBOX_CACHE_TTL_S": "cache_ttl_s",
    "JOKEBOX_MIN_INTERVAL_S": "min_interval_s",
    "JOKEBOX_TIMEOUT_S": "timeout_s",
    "JOKEBOX_THRESHOLD": "threshold",
    "JOKEBOX_MAX_ATTEMPTS": "max_attempts",
}


def load_config(**overrides) -> AppConfig:
    """
    Build AppConfig from the environment.

    Unset or empty env vars fall back to defaults. Keyword overrides (from CLI flags)
    win over the environment; None overrides are ignored.
    Invalid values raise pydantic.ValidationError.
    """
    values: dict = {}
    for env_name, field_name in ENV_FIELDS.items():
        raw = os.environ.get(env_name)
        if raw:
            values[field_name] = raw

    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    return AppConfig(**values)
