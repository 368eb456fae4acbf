"""Line/position mapping between source lines and blocks.

Translates a fractional source line into ``(block, progress)`` and back.
Scroll-sync consumers use these to keep an editor and a rendered view
aligned: the editor speaks source lines, the render target speaks block ids
and pixel progress within a block.

"Not found" is a normal outcome. A line past the last block belongs to
content that has not been rendered yet, and every query returns ``None``
for it instead of raising.

All queries are O(n) in block count.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from blockdoc.blocks import Block, IndexedBlock


@dataclass(frozen=True, slots=True)
class LinePosition:
    """Block containing a source line and the progress (0-1) within it."""

    block: Block
    index: int
    progress: float


@dataclass(frozen=True, slots=True)
class BlockPosition:
    """Identity-keyed position, for render targets that only know block ids."""

    block_id: str
    progress: float


@dataclass(frozen=True, slots=True)
class SurroundingBlocks:
    """Nearest blocks before and after a line, for interpolation in gaps."""

    previous: IndexedBlock | None = None
    next: IndexedBlock | None = None


class LineMapper(Protocol):
    """What a scroll controller needs from a document.

    ``BlockDocument`` satisfies this protocol.

    """

    def line_from_block_id(self, block_id: str, progress: float = 0.0) -> float | None: ...

    def block_position_from_line(self, line: float) -> BlockPosition | None: ...


def clamp_progress(progress: float) -> float:
    return max(0.0, min(1.0, progress))


def line_position(blocks: Sequence[Block], line: float) -> LinePosition | None:
    """Locate the block for ``line``.

    Returns the first block whose range ends after ``line``. A line inside a
    gap between blocks resolves to the following block with progress 0.

    Example:
        >>> from blockdoc import BlockDocument
        >>> doc = BlockDocument("one\\ntwo\\n\\nthree")
        >>> pos = line_position(doc.blocks, 1.0)
        >>> pos.index, pos.progress
        (0, 0.5)

    """
    if not blocks or line < 0:
        return None

    for index, block in enumerate(blocks):
        if line < block.end_line:
            progress = 0.0
            if block.line_count > 0:
                progress = clamp_progress((line - block.start_line) / block.line_count)
            return LinePosition(block=block, index=index, progress=progress)
    return None


def line_from_position(blocks: Sequence[Block], index: int, progress: float) -> float | None:
    """Inverse of ``line_position``; ``None`` for an index outside the snapshot."""
    if index < 0 or index >= len(blocks):
        return None
    return line_in_block(blocks[index], progress)


def line_in_block(block: Block, progress: float) -> float:
    return block.start_line + clamp_progress(progress) * block.line_count


def block_position_from_line(blocks: Sequence[Block], line: float) -> BlockPosition | None:
    position = line_position(blocks, line)
    if position is None:
        return None
    return BlockPosition(block_id=position.block.id, progress=position.progress)


def find_block_by_line(blocks: Sequence[Block], line: float) -> IndexedBlock | None:
    """Block whose range strictly contains ``line``; gaps return ``None``."""
    for index, block in enumerate(blocks):
        if block.contains_line(line):
            return IndexedBlock(block, index)
    return None


def surrounding_blocks(blocks: Sequence[Block], line: float) -> SurroundingBlocks:
    """Last block starting at or before ``line`` and first block starting after it."""
    previous: IndexedBlock | None = None
    for index, block in enumerate(blocks):
        if block.start_line > line:
            return SurroundingBlocks(previous=previous, next=IndexedBlock(block, index))
        previous = IndexedBlock(block, index)
    return SurroundingBlocks(previous=previous)


def total_line_count(blocks: Sequence[Block]) -> int:
    """Lines covered up to the end of the last block."""
    if not blocks:
        return 0
    return blocks[-1].end_line


__all__ = [
    "BlockPosition",
    "LineMapper",
    "LinePosition",
    "SurroundingBlocks",
    "block_position_from_line",
    "clamp_progress",
    "find_block_by_line",
    "line_from_position",
    "line_in_block",
    "line_position",
    "surrounding_blocks",
    "total_line_count",
]
