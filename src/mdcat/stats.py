"""Document statistics and line numbering for markdown sources."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import Iterator, TextIO

from markdown_it import MarkdownIt
from markdown_it.token import Token

WORDS_PER_MINUTE = 225
LINE_NUMBER_SEPARATOR = "│"

_COUNTED_TOKENS: dict[str, str] = {
    "heading_open": "heading_count",
    "fence": "code_block_count",
    "code_block": "code_block_count",
    "link_open": "link_count",
    "image": "image_count",
    "bullet_list_open": "list_count",
    "ordered_list_open": "list_count",
    "table_open": "table_count",
}


def create_parser() -> MarkdownIt:
    """CommonMark with the table and strikethrough extensions."""

    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


def _flatten(tokens: list[Token]) -> Iterator[Token]:
    for token in tokens:
        yield token
        if token.children:
            yield from _flatten(token.children)


def parse_markdown(text: str) -> list[Token]:
    """Parse ``text`` into block tokens; inline content hangs off ``children``."""

    return create_parser().parse(text)


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` with trailing ``\\r`` removed; a final newline adds no line."""

    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass(frozen=True, slots=True)
class DocumentStats:
    """Counts gathered from a markdown document.

    ``character_count`` is the UTF-8 byte length of the source, not its
    number of code points.
    """

    character_count: int = 0
    word_count: int = 0
    line_count: int = 0
    heading_count: int = 0
    code_block_count: int = 0
    link_count: int = 0
    image_count: int = 0
    list_count: int = 0
    table_count: int = 0
    words_per_minute: int = WORDS_PER_MINUTE

    def __post_init__(self) -> None:
        if self.words_per_minute <= 0:
            raise ValueError(f"words_per_minute must be positive, got {self.words_per_minute}")

    @classmethod
    def from_markdown(cls, content: str, *, words_per_minute: int = WORDS_PER_MINUTE) -> "DocumentStats":
        counts = dict.fromkeys(set(_COUNTED_TOKENS.values()), 0)
        for token in _flatten(parse_markdown(content)):
            counter = _COUNTED_TOKENS.get(token.type)
            if counter is not None:
                counts[counter] += 1
        return cls(
            character_count=len(content.encode("utf-8")),
            word_count=len(content.split()),
            line_count=len(split_lines(content)),
            words_per_minute=words_per_minute,
            **counts,
        )

    def reading_time_minutes(self) -> int:
        return -(-self.word_count // self.words_per_minute)

    def format(self) -> str:
        minutes = self.reading_time_minutes()
        unit = "minute" if minutes == 1 else "minutes"
        return (
            "Document Statistics:\n"
            "───────────────────\n"
            f"Characters: {self.character_count}\n"
            f"Words: {self.word_count}\n"
            f"Lines: {self.line_count}\n"
            f"Headings: {self.heading_count}\n"
            f"Code blocks: {self.code_block_count}\n"
            f"Links: {self.link_count}\n"
            f"Images: {self.image_count}\n"
            f"Lists: {self.list_count}\n"
            f"Tables: {self.table_count}\n"
            f"Estimated reading time: {minutes} {unit}\n"
        )


class LineNumberFormatter:
    """Writes right-aligned line number prefixes for sequentially emitted lines."""

    def __init__(self, show_line_numbers: bool, total_lines: int) -> None:
        self._current_line = 0
        self._show_line_numbers = show_line_numbers
        self._line_number_width = len(str(total_lines)) if show_line_numbers else 0

    @property
    def line_number_width(self) -> int:
        return self._line_number_width

    def current_line(self) -> int:
        return self._current_line

    def write_line_number(self, writer: TextIO) -> None:
        if not self._show_line_numbers:
            return
        self._current_line += 1
        writer.write(f"{self._current_line:>{self._line_number_width}} {LINE_NUMBER_SEPARATOR} ")

    def write_newline(self, writer: TextIO) -> None:
        writer.write("\n")


def annotate_line_numbers(text: str) -> str:
    """Prefix every line of ``text`` with its number, padded to the widest number.

    An empty document stays empty.
    """

    lines = split_lines(text)
    formatter = LineNumberFormatter(True, len(lines))
    buffer = StringIO()
    for index, line in enumerate(lines):
        if index:
            formatter.write_newline(buffer)
        formatter.write_line_number(buffer)
        buffer.write(line)
    return buffer.getvalue()


__all__ = [
    "DocumentStats",
    "LINE_NUMBER_SEPARATOR",
    "LineNumberFormatter",
    "WORDS_PER_MINUTE",
    "annotate_line_numbers",
    "create_parser",
    "parse_markdown",
    "split_lines",
]
