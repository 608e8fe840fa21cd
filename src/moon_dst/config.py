"""Application configuration contract."""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    home: str = Field(alias="HOME", default="")
    jobs: int = Field(alias="MOON_DST_JOBS", default=0, ge=0)
    log_level: str = Field(alias="MOON_DST_LOG_LEVEL", default="WARNING")
    log_json: int = Field(alias="MOON_DST_LOG_JSON", default=0)


def default_jobs(settings: Settings | None = None) -> int:
    """Worker count when ``--jobs`` is not given: configured value or half the cores."""
    configured = (settings or get_settings()).jobs
    if configured > 0:
        return configured
    return max(1, (os.cpu_count() or 1) // 2)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
