"""Boundary to the terminal renderer."""

from __future__ import annotations

import errno
import logging
import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Protocol
from urllib.parse import urljoin

from markdown_it.token import Token
from rich.console import Console
from rich.markdown import Markdown

from .output import TextSink
from .resources import DispatchingResourceHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderSettings:
    colour: bool = True
    ansi_only: bool = False
    columns: int | None = None
    force_terminal: bool | None = None


@dataclass(frozen=True, slots=True)
class Environment:
    """Where relative references in a document point to."""

    base_url: str
    hostname: str

    @classmethod
    def for_local_directory(cls, base_dir: Path) -> "Environment":
        base_url = base_dir.resolve().as_uri()
        if not base_url.endswith("/"):
            base_url += "/"
        return cls(base_url=base_url, hostname=socket.gethostname())

    def resolve_reference(self, reference: str) -> str:
        return urljoin(self.base_url, reference)


@dataclass(frozen=True, slots=True)
class MarkdownDocument:
    """Source text with its block token tree; inline tokens are ``children``."""

    text: str
    tokens: tuple[Token, ...]

    @classmethod
    def from_tokens(cls, text: str, tokens: Iterable[Token]) -> "MarkdownDocument":
        return cls(text=text, tokens=tuple(tokens))


class Renderer(Protocol):
    def render(
        self,
        settings: RenderSettings,
        environment: Environment,
        resolver: DispatchingResourceHandler,
        sink: TextSink,
        document: MarkdownDocument,
    ) -> None:  # pragma: no cover - interface
        ...


class _SinkConsole(Console):
    def on_broken_pipe(self) -> None:
        # Leave the broken pipe to the caller instead of exiting the process.
        raise BrokenPipeError(errno.EPIPE, os.strerror(errno.EPIPE))


class _TokenMarkdown(Markdown):
    """A rich ``Markdown`` drawn from an already parsed token tree."""

    def __init__(self, markup: str, tokens: Iterable[Token], **kwargs: Any) -> None:
        super().__init__("", **kwargs)
        self.markup = markup
        self.parsed = list(tokens)


class RichRenderer:
    """Draws markdown with rich.

    The document's token tree is drawn as given; the text is not parsed
    again. Rich shows images as their alt text, so no resource is ever read
    through the resolver.
    """

    def __init__(self, code_theme: str = "monokai") -> None:
        self._code_theme = code_theme

    def _console(self, settings: RenderSettings, sink: TextSink) -> Console:
        if not settings.colour:
            color_system = None
        elif settings.ansi_only:
            color_system = "standard"
        else:
            color_system = "auto"
        return _SinkConsole(
            file=sink,  # type: ignore[arg-type]
            width=settings.columns,
            color_system=color_system,
            no_color=not settings.colour,
            force_terminal=settings.force_terminal,
            highlight=False,
            emoji=False,
        )

    def render(
        self,
        settings: RenderSettings,
        environment: Environment,
        resolver: DispatchingResourceHandler,
        sink: TextSink,
        document: MarkdownDocument,
    ) -> None:
        logger.debug("Rendering %d tokens relative to %s", len(document.tokens), environment.base_url)
        console = self._console(settings, sink)
        console.print(
            _TokenMarkdown(
                document.text,
                document.tokens,
                code_theme=self._code_theme,
                hyperlinks=settings.colour,
            ),
        )


__all__ = [
    "Environment",
    "MarkdownDocument",
    "Renderer",
    "RenderSettings",
    "RichRenderer",
]
