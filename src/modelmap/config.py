"""
Configuration settings for modelmap.

Uses Pydantic Settings to load the debug-logging defaults from the
environment (``MODELMAP_DEBUG_LEVEL``, ``MODELMAP_DEBUG_TOPICS``) or a
``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LEVEL_NAMES: tuple[str, ...] = ("trace", "debug", "info", "warn", "error", "disabled")


class Settings(BaseSettings):
    debug_level: str | None = Field(None)
    debug_topics: str | None = Field(None)

    model_config = SettingsConfigDict(
        env_prefix="MODELMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("debug_level")
    @classmethod
    def _known_level(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        level = value.strip().lower()
        if level not in LEVEL_NAMES:
            raise ValueError(
                f"Unknown debug level {value!r}; expected one of {', '.join(LEVEL_NAMES)}"
            )
        return level

    def topics(self) -> frozenset[str] | None:
        """Parse ``debug_topics`` into a set; ``None`` means every topic."""
        if not self.debug_topics:
            return None
        parsed = frozenset(t.strip() for t in self.debug_topics.split(",") if t.strip())
        return parsed or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["LEVEL_NAMES", "Settings", "get_settings"]
