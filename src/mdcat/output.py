"""Output sinks: standard output or a pager's standard input."""

from __future__ import annotations

import errno
import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from .errors import OutputError

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 8192


class FlushStatus(str, Enum):
    OK = "ok"
    BENIGN = "benign"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class FlushOutcome:
    status: FlushStatus
    error: OSError | None = None


def is_broken_pipe(error: OSError) -> bool:
    return isinstance(error, BrokenPipeError) or error.errno == errno.EPIPE


def classify_io_error(error: OSError | None) -> FlushOutcome:
    """Broken pipes mean the reader went away early; they are not failures."""

    if error is None:
        return FlushOutcome(FlushStatus.OK)
    if is_broken_pipe(error):
        return FlushOutcome(FlushStatus.BENIGN, error)
    return FlushOutcome(FlushStatus.FATAL, error)


class TextSink:
    """Buffers text UTF-8 encoded and writes it to a byte stream.

    The buffer drains once it holds ``buffer_size`` encoded bytes.
    """

    encoding = "utf-8"

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        self._stream = stream
        self._buffer_size = buffer_size
        self._pending: list[bytes] = []
        self._pending_size = 0

    def write(self, text: str) -> int:
        data = text.encode(self.encoding)
        self._pending.append(data)
        self._pending_size += len(data)
        if self._pending_size >= self._buffer_size:
            self._drain()
        return len(text)

    def _drain(self) -> None:
        if not self._pending:
            return
        payload = b"".join(self._pending)
        self._pending.clear()
        self._pending_size = 0
        self._stream.write(payload)

    def flush(self) -> None:
        self._drain()
        self._stream.flush()

    def isatty(self) -> bool:
        isatty = getattr(self._stream, "isatty", None)
        return bool(isatty()) if callable(isatty) else False


class Output:
    """Either standard output or the standard input of a pager process."""

    def __init__(self, stream: BinaryIO, process: subprocess.Popen[bytes] | None = None) -> None:
        self._stream = stream
        self._process = process

    @classmethod
    def stdout(cls) -> "Output":
        return cls(sys.stdout.buffer)

    @classmethod
    def pager(cls, command: str) -> "Output":
        try:
            argv = shlex.split(command)
        except ValueError as exc:
            raise OutputError(f"Invalid pager command {command!r}: {exc}") from exc
        if not argv:
            raise OutputError("Pager command is empty")
        logger.debug("Starting pager %s", argv)
        try:
            process = subprocess.Popen(argv, stdin=subprocess.PIPE)
        except OSError as exc:
            raise OutputError(f"Failed to start pager {command!r}: {exc}") from exc
        if process.stdin is None:
            process.kill()
            process.wait()
            raise OutputError(f"Pager {command!r} has no standard input")
        return cls(process.stdin, process)

    @property
    def is_paginated(self) -> bool:
        return self._process is not None

    def writer(self) -> BinaryIO:
        return self._stream

    def sink(self) -> TextSink:
        return TextSink(self._stream)

    def close(self) -> None:
        if self._process is None:
            try:
                self._stream.flush()
            except OSError as exc:
                if not is_broken_pipe(exc):
                    raise
                # Keep interpreter shutdown from flushing into the closed pipe again.
                devnull = os.open(os.devnull, os.O_WRONLY)
                os.dup2(devnull, sys.stdout.fileno())
                os.close(devnull)
            return
        try:
            self._stream.close()
        except OSError as exc:
            if not is_broken_pipe(exc):
                raise
        self._process.wait()


__all__ = [
    "FlushOutcome",
    "FlushStatus",
    "Output",
    "TextSink",
    "classify_io_error",
    "is_broken_pipe",
]
