from __future__ import annotations

import logging
from typing import Callable, Sequence

from .config import AppConfig
from .errors import MdcatError, RenderError
from .input import read_input
from .logging import FileFailure, RunSummary
from .models import ProcessOptions
from .output import FlushStatus, Output, TextSink, classify_io_error
from .render import Environment, MarkdownDocument, Renderer, RenderSettings, RichRenderer
from .resources import DispatchingResourceHandler, create_resource_handler
from .stats import WORDS_PER_MINUTE, DocumentStats, annotate_line_numbers, parse_markdown

logger = logging.getLogger(__name__)


def _flush_output(filename: str, sink: TextSink, render: Callable[[], None] | None = None) -> None:
    error: OSError | None = None
    try:
        if render is not None:
            logger.debug("Rendering %s", filename)
            render()
        logger.debug("Finished rendering, flushing output")
        sink.flush()
    except OSError as exc:
        error = exc
    outcome = classify_io_error(error)
    if outcome.status is FlushStatus.BENIGN:
        logger.debug("Ignoring broken pipe")
    elif outcome.status is FlushStatus.FATAL:
        logger.error("Failed to process file %s: %s", filename, outcome.error)
        raise RenderError(str(outcome.error)) from outcome.error


def process_file(
    filename: str,
    settings: RenderSettings,
    resolver: DispatchingResourceHandler,
    output: Output,
    *,
    show_line_numbers: bool = False,
    show_stats: bool = False,
    renderer: Renderer | None = None,
    words_per_minute: int | None = None,
) -> None:
    """Read ``filename`` and render it to ``output``.

    With ``show_stats`` the statistics block is written first; unless line
    numbers were requested as well, nothing else is rendered.
    """

    renderer = renderer or RichRenderer()
    logger.debug("Acquiring %s", filename)
    source = read_input(filename)
    logger.debug("Read input, using %s as base directory", source.base_dir)
    sink = output.sink()

    if show_stats:
        logger.debug("Computing statistics for %s", filename)
        stats = DocumentStats.from_markdown(source.text, words_per_minute=words_per_minute or WORDS_PER_MINUTE)
        sink.write(stats.format())
        if not show_line_numbers:
            _flush_output(filename, sink)
            return
        sink.write("\n")

    text = source.text
    if show_line_numbers:
        logger.debug("Annotating %s with line numbers", filename)
        text = annotate_line_numbers(text)

    document = MarkdownDocument.from_tokens(text, parse_markdown(text))
    environment = Environment.for_local_directory(source.base_dir)
    _flush_output(
        filename,
        sink,
        lambda: renderer.render(settings, environment, resolver, sink, document),
    )


class ViewerService:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()

    @property
    def config(self) -> AppConfig:
        return self._config

    def process_files(
        self,
        filenames: Sequence[str],
        output: Output,
        *,
        options: ProcessOptions | None = None,
        settings: RenderSettings | None = None,
        renderer: Renderer | None = None,
        resolver: DispatchingResourceHandler | None = None,
    ) -> RunSummary:
        opts = options or ProcessOptions()
        settings = settings or RenderSettings()
        owns_resolver = resolver is None
        resolver = resolver or create_resource_handler(opts.resource_access, self._config.resources)
        summary = RunSummary()
        try:
            for filename in filenames:
                try:
                    process_file(
                        filename,
                        settings,
                        resolver,
                        output,
                        show_line_numbers=opts.show_line_numbers,
                        show_stats=opts.show_stats,
                        renderer=renderer,
                        words_per_minute=self._config.stats.words_per_minute,
                    )
                except MdcatError as exc:
                    logger.debug("Processing %s failed with %s", filename, exc.code)
                    summary.record_failure(FileFailure(filename=filename, code=exc.code, message=str(exc)))
                    if opts.fail_fast:
                        break
                    continue
                summary.record_success()
        finally:
            if owns_resolver:
                resolver.close()
        return summary


__all__ = ["ViewerService", "process_file"]
