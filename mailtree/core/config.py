from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MAILTREE_", env_file=".env", extra="ignore")

    VERSION: str = "0.1.0"

    # Multipart levels below this depth are kept as opaque leaves.
    MAX_NESTING_DEPTH: int = 64
    LOG_LEVEL: str = "WARNING"
    ENABLE_PROMETHEUS_METRICS: bool = True
    MAX_BODY_PREVIEW_BYTES: int = 4096

    @field_validator("MAX_NESTING_DEPTH")
    @classmethod
    def _validate_max_nesting_depth(cls, v: int) -> int:
        if v < 1 or v > 256:
            raise ValueError("MAX_NESTING_DEPTH must be between 1 and 256")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return (v or "WARNING").strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
