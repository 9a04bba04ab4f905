import errno
from pathlib import Path

import pytest

from helpers import FailingStream, RecordingRenderer
from mdcat.config import AppConfig, StatsConfig
from mdcat.core import ViewerService, process_file
from mdcat.errors import InputError, RenderError, UnsupportedResourceUrl
from mdcat.models import ProcessOptions, ResourceAccess
from mdcat.output import Output, TextSink
from mdcat.render import Environment, MarkdownDocument, RenderSettings, RichRenderer
from mdcat.resources import create_resource_handler
from mdcat.stats import DocumentStats, parse_markdown

DOCUMENT = "# Title\n\nSome *text* with an ![image](logo.png).\n"


@pytest.fixture
def document(tmp_path: Path) -> Path:
    source = tmp_path / "doc.md"
    source.write_text(DOCUMENT, encoding="utf-8")
    return source


@pytest.fixture
def resolver():
    handler = create_resource_handler(ResourceAccess.LOCAL_ONLY)
    yield handler
    handler.close()


def test_process_file_renders_document(document, resolver, output, stream, renderer) -> None:
    process_file(str(document), RenderSettings(), resolver, output, renderer=renderer)
    assert len(renderer.calls) == 1
    call = renderer.calls[0]
    assert call["document"].text == DOCUMENT
    assert call["environment"].base_url == document.parent.resolve().as_uri() + "/"
    assert call["environment"].resolve_reference("logo.png") == (document.parent.resolve() / "logo.png").as_uri()
    assert call["resolver"] is resolver
    assert stream.getvalue().startswith(b"<rendered ")


def test_stats_only_mode_skips_rendering(document, resolver, output, stream, renderer) -> None:
    process_file(str(document), RenderSettings(), resolver, output, show_stats=True, renderer=renderer)
    assert renderer.calls == []
    assert stream.getvalue().decode("utf-8") == DocumentStats.from_markdown(DOCUMENT).format()


def test_stats_with_line_numbers_renders_annotated_text(document, resolver, output, stream, renderer) -> None:
    process_file(
        str(document),
        RenderSettings(),
        resolver,
        output,
        show_stats=True,
        show_line_numbers=True,
        renderer=renderer,
    )
    assert len(renderer.calls) == 1
    assert renderer.calls[0]["document"].text == (
        "1 │ # Title\n2 │ \n3 │ Some *text* with an ![image](logo.png)."
    )
    written = stream.getvalue().decode("utf-8")
    assert written.startswith("Document Statistics:\n")
    assert "\n\n<rendered " in written


def test_line_numbers_without_stats(document, resolver, output, stream, renderer) -> None:
    process_file(str(document), RenderSettings(), resolver, output, show_line_numbers=True, renderer=renderer)
    assert renderer.calls[0]["document"].text.startswith("1 │ # Title")
    assert not stream.getvalue().startswith(b"Document Statistics")


def test_broken_pipe_is_treated_as_success(document, resolver) -> None:
    renderer = RecordingRenderer(raises=BrokenPipeError(errno.EPIPE, "Broken pipe"))
    process_file(str(document), RenderSettings(), resolver, Output(FailingStream(errno.EPIPE)), renderer=renderer)
    assert len(renderer.calls) == 1


def test_broken_pipe_during_flush_is_treated_as_success(document, resolver, renderer) -> None:
    process_file(str(document), RenderSettings(), resolver, Output(FailingStream(errno.EPIPE)), renderer=renderer)


def test_other_write_errors_fail_with_cause(document, resolver, renderer) -> None:
    with pytest.raises(RenderError) as exc:
        process_file(
            str(document), RenderSettings(), resolver, Output(FailingStream(errno.ENOSPC)), renderer=renderer
        )
    assert isinstance(exc.value.__cause__, OSError)
    assert exc.value.__cause__.errno == errno.ENOSPC
    assert exc.value.code == "IO"


def test_missing_input_propagates(tmp_path, resolver, output, renderer) -> None:
    with pytest.raises(InputError):
        process_file(str(tmp_path / "missing.md"), RenderSettings(), resolver, output, renderer=renderer)
    assert renderer.calls == []


def test_process_files_collects_failures(tmp_path, document, output, renderer) -> None:
    missing = str(tmp_path / "missing.md")
    summary = ViewerService().process_files(
        [missing, str(document)],
        output,
        options=ProcessOptions(resource_access=ResourceAccess.LOCAL_ONLY),
        renderer=renderer,
    )
    assert summary.total == 2
    assert summary.successes == 1
    assert summary.failed
    failure = summary.failures[0]
    assert failure.filename == missing
    assert failure.code == "INPUT"
    assert failure.describe().startswith(f"{missing}: INPUT - ")
    assert len(renderer.calls) == 1


def test_process_files_fail_fast_stops_after_first_failure(tmp_path, document, output, renderer) -> None:
    summary = ViewerService().process_files(
        [str(tmp_path / "missing.md"), str(document)],
        output,
        options=ProcessOptions(fail_fast=True, resource_access=ResourceAccess.LOCAL_ONLY),
        renderer=renderer,
    )
    assert summary.total == 1
    assert len(summary.failures) == 1
    assert renderer.calls == []


def test_process_files_renders_in_order(tmp_path, output, stream, renderer) -> None:
    first = tmp_path / "a.md"
    first.write_text("first", encoding="utf-8")
    second = tmp_path / "b.md"
    second.write_text("second", encoding="utf-8")
    summary = ViewerService().process_files(
        [str(first), str(second)],
        output,
        options=ProcessOptions(resource_access=ResourceAccess.LOCAL_ONLY),
        renderer=renderer,
    )
    assert summary.successes == 2
    assert [call["document"].text for call in renderer.calls] == ["first", "second"]


def test_service_uses_configured_reading_speed(document, output, stream, renderer) -> None:
    config = AppConfig(stats=StatsConfig(words_per_minute=1))
    ViewerService(config).process_files(
        [str(document)],
        output,
        options=ProcessOptions(show_stats=True, resource_access=ResourceAccess.LOCAL_ONLY),
        renderer=renderer,
    )
    words = DocumentStats.from_markdown(DOCUMENT).word_count
    assert f"Estimated reading time: {words} minutes" in stream.getvalue().decode("utf-8")


def test_rich_renderer_writes_plain_text(document, resolver, output, stream) -> None:
    process_file(str(document), RenderSettings(colour=False, columns=60), resolver, output)
    rendered = stream.getvalue().decode("utf-8")
    assert "Title" in rendered
    assert "text" in rendered
    assert "\x1b[" not in rendered


def test_renderer_receives_block_token_tree(document, resolver, output, renderer) -> None:
    process_file(str(document), RenderSettings(), resolver, output, renderer=renderer)
    tokens = renderer.calls[0]["document"].tokens
    assert tokens[0].type == "heading_open"
    assert {token.type for token in tokens}.isdisjoint({"text", "image"})
    paragraph = next(token for token in tokens if token.type == "inline" and token.map[0] == 2)
    assert "image" in [child.type for child in paragraph.children]


def test_rich_renderer_draws_supplied_tokens(tmp_path, resolver, stream) -> None:
    sink = TextSink(stream)
    document = MarkdownDocument.from_tokens("ignored source", parse_markdown("# From tokens"))
    RichRenderer().render(
        RenderSettings(colour=False, columns=60),
        Environment.for_local_directory(tmp_path),
        resolver,
        sink,
        document,
    )
    sink.flush()
    rendered = stream.getvalue().decode("utf-8")
    assert "From tokens" in rendered
    assert "ignored" not in rendered


def test_broken_pipe_in_stats_only_mode_is_treated_as_success(document, resolver, renderer) -> None:
    process_file(
        str(document),
        RenderSettings(),
        resolver,
        Output(FailingStream(errno.EPIPE)),
        show_stats=True,
        renderer=renderer,
    )
    assert renderer.calls == []


class ResolvingRenderer:
    def __init__(self, url: str) -> None:
        self.url = url

    def render(self, settings, environment, resolver, sink, document) -> None:
        sink.write(str(len(resolver.read_resource(self.url))))


def test_resolver_errors_are_reported_per_file(document, output) -> None:
    summary = ViewerService().process_files(
        [str(document), str(document)],
        output,
        options=ProcessOptions(resource_access=ResourceAccess.LOCAL_ONLY),
        renderer=ResolvingRenderer("http://[bad/x.png"),
    )
    assert summary.total == 2
    assert [failure.code for failure in summary.failures] == [UnsupportedResourceUrl.code] * 2
