from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .constants import DEFAULT_RESOURCE_READ_LIMIT, USER_AGENT
from .errors import ConfigError

DEFAULT_PAGER = "less -R"


def _default_pager() -> str:
    return os.environ.get("PAGER") or DEFAULT_PAGER


@dataclass(slots=True)
class ResourceConfig:
    read_limit: int = DEFAULT_RESOURCE_READ_LIMIT
    timeout_s: float = 100.0
    user_agent: str = USER_AGENT


@dataclass(slots=True)
class OutputConfig:
    pager: str = field(default_factory=_default_pager)


@dataclass(slots=True)
class StatsConfig:
    words_per_minute: int = 225


@dataclass(slots=True)
class AppConfig:
    resources: ResourceConfig = field(default_factory=ResourceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid configuration file {path}: {exc}") from exc


def _positive_int(data: Mapping[str, object], key: str, default: int) -> int:
    try:
        value = int(data.get(key, default))  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {data.get(key)!r}") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def _build_resources(data: Mapping[str, object] | None) -> ResourceConfig:
    if not data:
        return ResourceConfig()
    defaults = ResourceConfig()
    try:
        timeout_s = float(data.get("timeout_s", defaults.timeout_s))  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"timeout_s must be a number, got {data.get('timeout_s')!r}") from exc
    return ResourceConfig(
        read_limit=_positive_int(data, "read_limit", defaults.read_limit),
        timeout_s=timeout_s,
        user_agent=str(data.get("user_agent", defaults.user_agent)),
    )


def _build_output(data: Mapping[str, object] | None) -> OutputConfig:
    if not data or "pager" not in data:
        return OutputConfig()
    return OutputConfig(pager=str(data["pager"]))


def _build_stats(data: Mapping[str, object] | None) -> StatsConfig:
    if not data:
        return StatsConfig()
    return StatsConfig(words_per_minute=_positive_int(data, "words_per_minute", 225))


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{name}] must be a table, got {type(value).__name__}")
    return value


def load_config(path: Path | None = None) -> AppConfig:
    """Load the TOML configuration at ``path``; a missing file yields defaults."""

    if path is None:
        return AppConfig()
    raw = _read_toml(path.expanduser())
    return AppConfig(
        resources=_build_resources(_section(raw, "resources")),
        output=_build_output(_section(raw, "output")),
        stats=_build_stats(_section(raw, "stats")),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "resources": {
            "read_limit": config.resources.read_limit,
            "timeout_s": config.resources.timeout_s,
            "user_agent": config.resources.user_agent,
        },
        "output": {
            "pager": config.output.pager,
        },
        "stats": {
            "words_per_minute": config.stats.words_per_minute,
        },
    }
    return json.dumps(payload, indent=2)


__all__ = [
    "AppConfig",
    "OutputConfig",
    "ResourceConfig",
    "StatsConfig",
    "dump_config",
    "load_config",
]
