from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .constants import DEFAULT_CONFIG_PATH, ENV_PREFIX


@dataclass(frozen=True, slots=True)
class Settings:
    """Process settings sourced from environment variables."""

    config_path: Path = DEFAULT_CONFIG_PATH
    log_level: str | None = None
    pager: str | None = None


def _read_settings() -> Settings:
    config_env = os.getenv(f"{ENV_PREFIX}CONFIG_PATH")
    log_env = os.getenv(f"{ENV_PREFIX}LOG")
    pager_env = os.getenv(f"{ENV_PREFIX}PAGER")
    config_path = Path(config_env) if config_env else DEFAULT_CONFIG_PATH
    log_level = log_env.strip().upper() if log_env and log_env.strip() else None
    return Settings(config_path=config_path, log_level=log_level, pager=pager_env or None)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return _read_settings()


__all__ = ["Settings", "get_settings"]
