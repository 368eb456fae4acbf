"""Block records: the unit of identity and payload caching.

A ``Block`` is owned by exactly one snapshot. Its ``id`` and ``payload`` are
carried into the next snapshot only when the matcher pairs it with a new
block of identical hash; everything else is rebuilt from the splitter output.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

from blockdoc.commands import BlockAttrs


class ParsedBlock(NamedTuple):
    """One block as produced by a splitter: raw content and 0-based start line."""

    content: str
    start_line: int


@dataclass(slots=True)
class Block:
    """Block metadata held by a document snapshot.

    Attributes:
        id: Process-unique identifier, stable while content is unchanged
        hash: Content hash used for matching across updates
        start_line: 0-based line of the first content line
        line_count: Number of content lines (trailing blank lines excluded)
        content: Raw source text of the block
        payload: Cached render output, None until a renderer provides it
        pending: Payload is an async placeholder still waiting to resolve

    """

    id: str
    hash: str
    start_line: int
    line_count: int
    content: str
    payload: str | None = None
    pending: bool = False

    @property
    def end_line(self) -> int:
        """First line after this block's content."""
        return self.start_line + self.line_count

    @property
    def needs_render(self) -> bool:
        return self.payload is None or self.pending

    @property
    def attrs(self) -> BlockAttrs:
        return BlockAttrs(
            block_id=self.id,
            block_hash=self.hash,
            start_line=self.start_line,
            line_count=self.line_count,
        )

    def contains_line(self, line: float) -> bool:
        return self.start_line <= line < self.end_line


class IndexedBlock(NamedTuple):
    """A block together with its position in the snapshot."""

    block: Block
    index: int


def count_lines(content: str) -> int:
    """Content line count: one more than the number of newlines."""
    return content.count("\n") + 1


def find_overlap(spans: Iterable[tuple[int, int]]) -> int | None:
    """Position of the first ``(start_line, line_count)`` span that starts
    before the previous one ends, or None when spans are ordered and disjoint.

    Example:
        >>> find_overlap([(0, 2), (3, 1)]) is None
        True
        >>> find_overlap([(5, 1), (0, 1)])
        1

    """
    previous_end = 0
    for position, (start_line, line_count) in enumerate(spans):
        if start_line < previous_end:
            return position
        previous_end = start_line + line_count
    return None


__all__ = [
    "Block",
    "IndexedBlock",
    "ParsedBlock",
    "count_lines",
    "find_overlap",
]
