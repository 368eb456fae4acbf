"""Line-oriented Markdown block splitter.

Cuts normalized Markdown into top-level blocks with their 0-based start
lines. This is not a Markdown parser: it only decides where one renderable
unit ends and the next begins, which is all the document model needs.

Block Rules:
    - Blank lines separate blocks; trailing blank lines never belong to one
    - Front matter (``---`` on the first line) runs to the closing ``---``
    - Fenced code (``` or ~~~) and colon directives (``:::{name}``) run to a
      matching closing fence, blank lines included
    - Display math opened by a ``$$`` line runs to the next ``$$`` line
    - ATX headings and thematic breaks are single-line blocks
    - A ``---`` or ``===`` line under paragraph text closes that paragraph
      (setext heading)
    - Lists continue across blank lines while the next line is indented or
      starts another item
    - Indented code continues across blank lines while lines stay indented

Any callable with the ``BlockSplitter`` signature can replace
``split_blocks``; its output passes through ``coerce_split_output``.

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

from blockdoc.blocks import ParsedBlock, count_lines, find_overlap
from blockdoc.utils.logger import get_logger

logger = get_logger(__name__)

_THEMATIC_BREAK = re.compile(r"^ {0,3}([-*_])[ \t]*(?:\1[ \t]*){2,}$")
_SETEXT_UNDERLINE = re.compile(r"^ {0,3}(?:=+|-+)[ \t]*$")
_LIST_MARKER = re.compile(r"^ {0,3}(?:[-+*]|\d{1,9}[.)])(?:[ \t]|$)")
_FRONT_MATTER_END = frozenset({"---", "..."})


class BlockSplitter(Protocol):
    """Protocol for block splitters.

    Implementations receive normalized text and return ordered blocks as
    ``ParsedBlock``, ``(content, start_line)`` tuples, or mappings with
    ``content`` and ``startLine`` (or ``start_line``) keys.

    """

    def __call__(self, text: str) -> Sequence[Any]: ...


def split_blocks(text: str) -> list[ParsedBlock]:
    """Split Markdown into top-level blocks.

    Args:
        text: Normalized Markdown source.

    Returns:
        Blocks in source order with 0-based start lines.

    Example:
        >>> split_blocks("# Title\\n\\nSome text\\nmore text\\n")
        [ParsedBlock(content='# Title', start_line=0), ParsedBlock(content='Some text\\nmore text', start_line=2)]

    """
    if not text:
        return []
    return _BlockScanner(text.split("\n")).scan()


class _BlockScanner:
    """Single-pass scanner over source lines."""

    __slots__ = ("_lines", "_pos", "_blocks")

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self._pos = 0
        self._blocks: list[ParsedBlock] = []

    def scan(self) -> list[ParsedBlock]:
        lines = self._lines
        if lines and lines[0].rstrip() == "---":
            self._scan_front_matter()

        while self._pos < len(lines):
            line = lines[self._pos]
            if _is_blank(line):
                self._pos += 1
                continue
            self._scan_block(line)
        return self._blocks

    def _emit(self, start: int, end: int) -> None:
        """Record lines[start:end] as a block, dropping trailing blank lines."""
        while end > start and _is_blank(self._lines[end - 1]):
            end -= 1
        if end > start:
            content = "\n".join(self._lines[start:end])
            self._blocks.append(ParsedBlock(content=content, start_line=start))

    def _scan_front_matter(self) -> None:
        lines = self._lines
        for end in range(1, len(lines)):
            if lines[end].rstrip() in _FRONT_MATTER_END:
                self._emit(0, end + 1)
                self._pos = end + 1
                return
        # Unclosed front matter is ordinary content

    def _scan_block(self, line: str) -> None:
        start = self._pos
        stripped = line.lstrip(" ")
        indent = len(line) - len(stripped)

        if indent < 4:
            fence = _fence_opener(stripped)
            if fence is not None:
                self._scan_until_closing(start, fence)
                return
            if stripped.rstrip() == "$$":
                self._scan_until_closing(start, "$$")
                return
            if _is_atx_heading(stripped) or _THEMATIC_BREAK.match(line):
                self._emit(start, start + 1)
                self._pos = start + 1
                return
            if _LIST_MARKER.match(line):
                self._scan_list(start)
                return
        else:
            self._scan_indented_code(start)
            return

        self._scan_paragraph(start)

    def _scan_until_closing(self, start: int, fence: str) -> None:
        lines = self._lines
        for end in range(start + 1, len(lines)):
            if _closes_fence(lines[end], fence):
                self._emit(start, end + 1)
                self._pos = end + 1
                return
        # Unterminated fence swallows the rest of the document
        self._emit(start, len(lines))
        self._pos = len(lines)

    def _scan_paragraph(self, start: int) -> None:
        lines = self._lines
        end = start + 1
        while end < len(lines):
            line = lines[end]
            if _is_blank(line):
                break
            if _SETEXT_UNDERLINE.match(line):
                end += 1
                break
            if _interrupts_paragraph(line):
                break
            end += 1
        self._emit(start, end)
        self._pos = end

    def _scan_list(self, start: int) -> None:
        lines = self._lines
        end = start + 1
        while end < len(lines):
            line = lines[end]
            if not _is_blank(line):
                if _indent_of(line) == 0 and _starts_block(line):
                    if not _LIST_MARKER.match(line):
                        break
                end += 1
                continue
            following = _next_non_blank(lines, end)
            if following is None:
                break
            next_line = lines[following]
            if _LIST_MARKER.match(next_line) or _indent_of(next_line) >= 2:
                end = following
                continue
            break
        self._emit(start, end)
        self._pos = end

    def _scan_indented_code(self, start: int) -> None:
        lines = self._lines
        end = start + 1
        while end < len(lines):
            line = lines[end]
            if _is_blank(line) or _indent_of(line) >= 4:
                end += 1
                continue
            break
        self._emit(start, end)
        self._pos = end


def _is_blank(line: str) -> bool:
    return not line.strip()


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _next_non_blank(lines: list[str], pos: int) -> int | None:
    for index in range(pos, len(lines)):
        if not _is_blank(lines[index]):
            return index
    return None


def _fence_opener(content: str) -> str | None:
    """Return the opening fence run for code or directive fences.

    Fences are 3+ backticks, tildes, or colons. Backtick fences cannot carry
    backticks in their info string.

    """
    if not content or content[0] not in "`~:":
        return None

    char = content[0]
    count = len(content) - len(content.lstrip(char))
    if count < 3:
        return None

    info = content[count:].strip()
    if char == "`" and "`" in info:
        return None
    if char == ":" and not info.startswith("{"):
        return None
    return char * count


def _closes_fence(line: str, fence: str) -> bool:
    """Check if line closes a fence opened with ``fence``.

    Closing fences may be indented up to 3 spaces, use the same character,
    be at least as long as the opener, and carry nothing else.

    """
    if _indent_of(line) >= 4:
        return False
    content = line.strip()
    if fence == "$$":
        return content == "$$"
    char = fence[0]
    return len(content) >= len(fence) and content == char * len(content)


def _is_atx_heading(content: str) -> bool:
    level = len(content) - len(content.lstrip("#"))
    if level == 0 or level > 6:
        return False
    rest = content[level:]
    return not rest or rest[0] in " \t"


def _starts_block(line: str) -> bool:
    """Line starts a construct that always begins a new block."""
    stripped = line.lstrip(" ")
    if _indent_of(line) >= 4:
        return False
    return (
        _fence_opener(stripped) is not None
        or stripped.rstrip() == "$$"
        or _is_atx_heading(stripped)
        or bool(_THEMATIC_BREAK.match(line))
    )


def _interrupts_paragraph(line: str) -> bool:
    return _starts_block(line) or bool(_LIST_MARKER.match(line))


def coerce_split_output(raw: Any) -> list[ParsedBlock]:
    """Normalize splitter output into ``ParsedBlock`` records.

    ``None`` means no blocks. Output that is not an iterable of recognizable
    entries, or whose blocks are out of order or overlap, is treated as zero
    blocks and logged. Errors raised while iterating lazy output propagate to
    the caller.

    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        logger.warning(
            "Splitter returned %s, expected a sequence; using zero blocks",
            type(raw).__name__,
        )
        return []

    parsed: list[ParsedBlock] = []
    for position, entry in enumerate(raw):
        block = _coerce_entry(entry)
        if block is None:
            logger.warning(
                "Malformed splitter entry at position %d: %r; using zero blocks",
                position,
                entry,
            )
            return []
        parsed.append(block)

    overlap = find_overlap((block.start_line, count_lines(block.content)) for block in parsed)
    if overlap is not None:
        logger.warning(
            "Splitter entry at position %d starts on line %d, inside or before the "
            "previous block; using zero blocks",
            overlap,
            parsed[overlap].start_line,
        )
        return []
    return parsed


def _coerce_entry(entry: Any) -> ParsedBlock | None:
    if isinstance(entry, ParsedBlock):
        content, start_line = entry
    elif isinstance(entry, Mapping):
        content = entry.get("content")
        start_line = entry.get("startLine", entry.get("start_line"))
    elif isinstance(entry, tuple) and len(entry) == 2:
        content, start_line = entry
    else:
        return None

    if not isinstance(content, str):
        return None
    if isinstance(start_line, bool) or not isinstance(start_line, int) or start_line < 0:
        return None
    return ParsedBlock(content=content, start_line=start_line)


__all__ = [
    "BlockSplitter",
    "coerce_split_output",
    "split_blocks",
]
