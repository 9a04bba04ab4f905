"""Error types shared across the viewer pipeline."""

from __future__ import annotations


class MdcatError(RuntimeError):
    code = "ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ConfigError(MdcatError):
    code = "CONFIG"


class InputError(MdcatError):
    """Raised when a document cannot be read."""

    code = "INPUT"

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename


class ResourceError(MdcatError):
    code = "RESOURCE"

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class ResourceLimitExceeded(ResourceError):
    code = "SIZE_LIMIT"


class RemoteAccessDisabled(ResourceError):
    code = "REMOTE_DISABLED"


class UnsupportedResourceUrl(ResourceError):
    code = "UNSUPPORTED_URL"


class ResourceFetchError(ResourceError):
    code = "FETCH_FAILED"


class RenderError(MdcatError):
    code = "IO"


class OutputError(MdcatError):
    code = "OUTPUT"


__all__ = [
    "ConfigError",
    "InputError",
    "MdcatError",
    "OutputError",
    "RemoteAccessDisabled",
    "RenderError",
    "ResourceError",
    "ResourceFetchError",
    "ResourceLimitExceeded",
    "UnsupportedResourceUrl",
]
