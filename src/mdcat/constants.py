from __future__ import annotations

from pathlib import Path

__version__ = "2.1.0"

PROGRAM_NAME = "mdcat"
USER_AGENT = f"{PROGRAM_NAME}/{__version__}"

DEFAULT_RESOURCE_READ_LIMIT = 104_857_600
DEFAULT_CONFIG_PATH = Path("~/.config/mdcat/config.toml")
ENV_PREFIX = "MDCAT_"

STDIN_SENTINEL = "-"

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_RESOURCE_READ_LIMIT",
    "ENV_PREFIX",
    "PROGRAM_NAME",
    "STDIN_SENTINEL",
    "USER_AGENT",
    "__version__",
]
