"""Centralized configuration for revdoc using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

Besides the runtime environment and log level, the settings carry the
*default tunables* applied when a document schema leaves them out. A schema
that names a tunable explicitly always wins over these defaults.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `REVDOC_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    default_max_history : int
        Archive entries retained when a schema omits `maxHistory`.
    default_min_time_gap : int
        Minimum milliseconds between accepted updates when a schema omits
        `minTimeGap`.
    default_max_char_limit : int
        Serialized-size budget in characters when a schema omits
        `maxCharLimit`.
    """

    environment: EnvName = Field(default="dev", alias="REVDOC_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    default_max_history: int = Field(default=10, ge=1, alias="REVDOC_MAX_HISTORY")
    default_min_time_gap: int = Field(default=2000, ge=0, alias="REVDOC_MIN_TIME_GAP")
    default_max_char_limit: int = Field(default=2000, ge=0, alias="REVDOC_MAX_CHAR_LIMIT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests can force a rebuild via `load_settings.cache_clear()` after
    mutating `os.environ`.
    """
    os.environ.setdefault("REVDOC_ENV", "dev")
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "revdoc") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = ["Settings", "get_logger", "load_settings", "settings"]
