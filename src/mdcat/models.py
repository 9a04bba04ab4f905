"""Domain models for the viewer pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ResourceAccess(str, Enum):
    """What resources the renderer may access."""

    LOCAL_ONLY = "local-only"
    REMOTE = "remote"

    @classmethod
    def from_flag(cls, local_only: bool) -> "ResourceAccess":
        return cls.LOCAL_ONLY if local_only else cls.REMOTE


@dataclass(frozen=True, slots=True)
class InputResult:
    """Raw document text and the directory its relative references resolve against."""

    base_dir: Path
    text: str


@dataclass(slots=True)
class ProcessOptions:
    """Per-run switches shared by every file of one invocation."""

    show_line_numbers: bool = False
    show_stats: bool = False
    fail_fast: bool = False
    resource_access: ResourceAccess = ResourceAccess.REMOTE


__all__ = [
    "InputResult",
    "ProcessOptions",
    "ResourceAccess",
]
