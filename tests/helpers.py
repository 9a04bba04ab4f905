from __future__ import annotations

import errno
from io import BytesIO


class RecordingRenderer:
    def __init__(self, raises: OSError | None = None) -> None:
        self.calls: list[dict] = []
        self._raises = raises

    def render(self, settings, environment, resolver, sink, document) -> None:
        self.calls.append(
            {
                "settings": settings,
                "environment": environment,
                "resolver": resolver,
                "document": document,
            }
        )
        if self._raises is not None:
            raise self._raises
        sink.write(f"<rendered {len(document.tokens)} tokens>\n")


class FailingStream(BytesIO):
    def __init__(self, error_number: int) -> None:
        super().__init__()
        self._errno = error_number

    def write(self, data) -> int:  # type: ignore[override]
        if self._errno == errno.EPIPE:
            raise BrokenPipeError(errno.EPIPE, "Broken pipe")
        raise OSError(self._errno, "write failed")


