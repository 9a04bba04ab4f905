from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO

from .constants import STDIN_SENTINEL
from .errors import InputError
from .models import InputResult

logger = logging.getLogger(__name__)


def _current_dir(filename: str) -> Path:
    try:
        return Path(os.getcwd())
    except OSError as exc:
        raise InputError(filename, f"cannot determine working directory: {exc}") from exc


def _decode(filename: str, data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InputError(filename, f"stream did not contain valid UTF-8: {exc}") from exc


def read_input(filename: str, *, stdin: BinaryIO | None = None) -> InputResult:
    """Read the document named by ``filename``.

    ``-`` reads standard input and resolves references against the working
    directory; any other name is opened as a file whose parent directory
    becomes the base directory.
    """

    cwd = _current_dir(filename)
    if filename == STDIN_SENTINEL:
        stream = stdin if stdin is not None else sys.stdin.buffer
        try:
            data = stream.read()
        except OSError as exc:
            raise InputError(filename, f"failed to read standard input: {exc}") from exc
        return InputResult(base_dir=cwd, text=_decode(filename, data))

    path = cwd / filename
    try:
        data = path.read_bytes()
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise InputError(filename, reason) from exc
    base_dir = path.parent if path.parent != path else cwd
    logger.debug("Read %d bytes from %s", len(data), path)
    return InputResult(base_dir=base_dir, text=_decode(filename, data))


__all__ = ["read_input"]
