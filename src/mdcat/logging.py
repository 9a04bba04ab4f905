from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

LOG_FORMAT = "%(asctime)s %(name)-16s %(levelname)-5s %(message)s"


def configure_logging(level: str) -> None:
    """Send log records at ``level`` and above to stderr; stdout carries the rendered document."""

    resolved = getattr(logging, level.upper(), None)
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


@dataclass(slots=True)
class FileFailure:
    filename: str
    code: str
    message: str

    def describe(self) -> str:
        return f"{self.filename}: {self.code} - {self.message}"


@dataclass(slots=True)
class RunSummary:
    total: int = 0
    successes: int = 0
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def record_success(self) -> None:
        self.total += 1
        self.successes += 1

    def record_failure(self, failure: FileFailure) -> None:
        self.total += 1
        self.failures.append(failure)


__all__ = ["FileFailure", "RunSummary", "configure_logging"]
