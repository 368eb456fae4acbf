"""Incremental block document model.

``BlockDocument`` keeps the current snapshot of a changing Markdown text as
an ordered tuple of ``Block`` records plus an ``id -> index`` map. Each
``update()`` normalizes and splits the new text, matches the new blocks to
the installed ones by content hash, and returns the commands that bring a
render target from the old snapshot to the new one.

Identity:
    A block keeps its id and cached payload across an update only when the
    matcher pairs it with an old block of identical hash. Content edits
    always produce a fresh id and an empty payload.

Index:
    The ordered tuple is the single source of truth. The id index is derived
    from it and rebuilt wholesale after every update or restore, never
    patched.

Thread Safety:
    Not thread-safe. Callers must serialize ``update()`` and payload
    mutation; render jobs for different blocks may run concurrently as long
    as their results are applied through ``set_payload`` one at a time.

Example:
    >>> doc = BlockDocument()
    >>> result = doc.update("# Title\\n\\nBody")
    >>> result.stats.inserted
    2
    >>> result = doc.update("# Title\\n\\nIntro\\n\\nBody")
    >>> [c.type.value for c in result.commands]
    ['insertBefore', 'updateAttrs']

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace
from typing import Any

from blockdoc.blocks import Block, IndexedBlock, ParsedBlock, count_lines, find_overlap
from blockdoc.commands import (
    Append,
    Clear,
    Command,
    CommandResult,
    CommandStats,
    Replace,
)
from blockdoc.config import DocumentConfig, get_document_config
from blockdoc.errors import SnapshotError
from blockdoc.generator import generate_commands
from blockdoc.mapping import (
    BlockPosition,
    LinePosition,
    SurroundingBlocks,
    block_position_from_line,
    find_block_by_line,
    line_from_position,
    line_in_block,
    line_position,
    surrounding_blocks,
    total_line_count,
)
from blockdoc.matcher import match_blocks
from blockdoc.normalize import normalize
from blockdoc.profiling import get_update_accumulator
from blockdoc.splitter import BlockSplitter, coerce_split_output, split_blocks
from blockdoc.utils.hashing import make_hasher
from blockdoc.utils.logger import get_logger
from blockdoc.utils.text import escape_html

logger = get_logger(__name__)


class BlockDocument:
    """In-memory Markdown document with block identity and payload caching.

    Args:
        text: Optional initial content; performs a first ``update`` when
            non-empty.
        splitter: Block splitter (defaults to ``split_blocks``).
        hasher: Content hasher (defaults to truncated SHA-256).
        config: Document configuration (defaults to the context-local one).

    """

    def __init__(
        self,
        text: str | None = None,
        *,
        splitter: BlockSplitter | None = None,
        hasher: Callable[[str], str] | None = None,
        config: DocumentConfig | None = None,
    ) -> None:
        self._config = config or get_document_config()
        self._splitter = splitter or split_blocks
        self._hasher = hasher or make_hasher(self._config.hash_length)
        self._blocks: tuple[Block, ...] = ()
        self._index: dict[str, int] = {}
        self._raw_content = ""
        self._normalized_content = ""
        self._id_counter = 0

        if text:
            self.update(text)

    # =========================================================================
    # Snapshot state
    # =========================================================================

    @property
    def config(self) -> DocumentConfig:
        return self._config

    @property
    def blocks(self) -> tuple[Block, ...]:
        return self._blocks

    @property
    def block_count(self) -> int:
        return len(self._blocks)

    @property
    def raw_content(self) -> str:
        return self._raw_content

    @property
    def normalized_content(self) -> str:
        """Content after normalization; all line numbers refer to this text."""
        return self._normalized_content

    @property
    def id_counter(self) -> int:
        return self._id_counter

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def __repr__(self) -> str:
        return f"BlockDocument(blocks={len(self._blocks)}, id_counter={self._id_counter})"

    def block_ids(self) -> list[str]:
        return [block.id for block in self._blocks]

    # =========================================================================
    # Update
    # =========================================================================

    def update(self, text: str) -> CommandResult:
        """Install a new snapshot for ``text`` and return the commands to apply.

        The first update of an empty document emits a single ``Clear`` and
        reports every block as inserted; the caller renders the blocks from
        scratch (see ``full_render_commands``). Updating to zero blocks also
        emits a single ``Clear``.

        Never raises for any input text.

        """
        old_blocks = self._blocks
        normalized = normalize(text, math=self._config.normalize_math)
        new_blocks = [self._make_block(parsed) for parsed in self._split(normalized)]

        if not old_blocks:
            for block in new_blocks:
                block.id = self._new_id()
            result = CommandResult(
                commands=(Clear(),),
                stats=CommandStats(inserted=len(new_blocks)),
            )
        elif not new_blocks:
            result = CommandResult(
                commands=(Clear(),),
                stats=CommandStats(removed=len(old_blocks)),
            )
        else:
            match = match_blocks(
                [block.hash for block in old_blocks],
                [block.hash for block in new_blocks],
            )
            result = generate_commands(old_blocks, new_blocks, match, self._new_id)

        self._raw_content = text
        self._normalized_content = normalized
        self._install(new_blocks)

        stats = result.stats
        logger.debug(
            "Installed %d blocks (first=%s): kept=%d inserted=%d removed=%d, %d commands",
            len(new_blocks),
            not old_blocks,
            stats.kept,
            stats.inserted,
            stats.removed,
            len(result.commands),
        )

        accumulator = get_update_accumulator()
        if accumulator is not None:
            accumulator.record_update(len(text), len(new_blocks), stats)

        return result

    def _split(self, normalized: str) -> list[ParsedBlock]:
        # Lazy output is consumed inside the guard
        try:
            return coerce_split_output(self._splitter(normalized))
        except Exception:
            logger.warning("Block splitter failed; using zero blocks", exc_info=True)
            return []

    def _make_block(self, parsed: ParsedBlock) -> Block:
        # id is assigned by the first-render path or the command generator
        return Block(
            id="",
            hash=self._hasher(parsed.content),
            start_line=parsed.start_line,
            line_count=count_lines(parsed.content),
            content=parsed.content,
        )

    def _new_id(self) -> str:
        self._id_counter += 1
        return f"{self._config.id_prefix}-{self._id_counter}"

    def _install(self, blocks: Sequence[Block]) -> None:
        self._blocks = tuple(blocks)
        self._index = {block.id: index for index, block in enumerate(self._blocks)}

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_block(self, index: int) -> Block | None:
        if 0 <= index < len(self._blocks):
            return self._blocks[index]
        return None

    def get_block_by_id(self, block_id: str) -> Block | None:
        index = self._index.get(block_id)
        return self._blocks[index] if index is not None else None

    def get_block_index_by_id(self, block_id: str) -> int:
        """Index of ``block_id`` in the snapshot, or -1."""
        return self._index.get(block_id, -1)

    def _resolve(self, key: int | str) -> Block | None:
        if isinstance(key, str):
            return self.get_block_by_id(key)
        return self.get_block(key)

    # =========================================================================
    # Payloads
    # =========================================================================

    def set_payload(self, key: int | str, payload: str, *, pending: bool | None = None) -> bool:
        """Attach rendered output to a block addressed by index or id.

        Args:
            key: Block index or block id.
            payload: Rendered output.
            pending: Whether the payload is still an async placeholder. When
                None, detected from the configured placeholder marker.

        Returns:
            True if the block exists and was updated.

        """
        block = self._resolve(key)
        if block is None:
            return False
        if pending is None:
            pending = self._config.placeholder_marker in payload
        block.payload = payload
        block.pending = pending
        return True

    def get_blocks_needing_render(self) -> list[IndexedBlock]:
        """Blocks without a payload or whose payload is still pending."""
        return [
            IndexedBlock(block, index)
            for index, block in enumerate(self._blocks)
            if block.needs_render
        ]

    def clear_payloads(self) -> None:
        for block in self._blocks:
            block.payload = None
            block.pending = False

    def replace_command(self, key: int | str) -> Replace | None:
        """Command pushing a block's current payload into the render target.

        Returns None when the block is unknown or has no payload yet.

        """
        block = self._resolve(key)
        if block is None or block.payload is None:
            return None
        return Replace(block_id=block.id, payload=block.payload, attrs=block.attrs)

    def full_render_commands(self) -> tuple[Command, ...]:
        """Commands that rebuild a render target from scratch."""
        appends = tuple(
            Append(block_id=block.id, payload=block.payload or "", attrs=block.attrs)
            for block in self._blocks
        )
        return (Clear(), *appends)

    def wrap_block_html(self, block: Block) -> str:
        attributes = " ".join(
            f'{name}="{escape_html(str(value))}"'
            for name, value in block.attrs.data_attributes().items()
        )
        return f'<div class="{self._config.block_class}" {attributes}>{block.payload or ""}</div>'

    def get_full_html(self) -> str:
        """All rendered blocks wrapped in their container markup.

        Blocks without a payload are skipped.

        """
        return "\n".join(
            self.wrap_block_html(block) for block in self._blocks if block.payload is not None
        )

    # =========================================================================
    # Line mapping
    # =========================================================================

    def line_position(self, line: float) -> LinePosition | None:
        return line_position(self._blocks, line)

    def line_from_position(self, index: int, progress: float) -> float | None:
        return line_from_position(self._blocks, index, progress)

    def block_position_from_line(self, line: float) -> BlockPosition | None:
        return block_position_from_line(self._blocks, line)

    def line_from_block_id(self, block_id: str, progress: float = 0.0) -> float | None:
        block = self.get_block_by_id(block_id)
        if block is None:
            return None
        return line_in_block(block, progress)

    def surrounding_blocks(self, line: float) -> SurroundingBlocks:
        return surrounding_blocks(self._blocks, line)

    def find_block_by_line(self, line: float) -> IndexedBlock | None:
        return find_block_by_line(self._blocks, line)

    def total_line_count(self) -> int:
        return total_line_count(self._blocks)

    # =========================================================================
    # Serialization
    # =========================================================================

    @classmethod
    def restore(
        cls,
        raw_content: str,
        blocks: Sequence[Block],
        id_counter: int,
        *,
        splitter: BlockSplitter | None = None,
        hasher: Callable[[str], str] | None = None,
        config: DocumentConfig | None = None,
    ) -> BlockDocument:
        """Rebuild a document from exported state without re-splitting.

        The given blocks are copied, never mutated; copies start without a
        payload. The id counter is raised past any numeric id suffix already
        in use so freshly minted ids cannot collide.

        Raises:
            SnapshotError: If blocks are out of order or their line ranges
                overlap.

        """
        overlap = find_overlap((block.start_line, block.line_count) for block in blocks)
        if overlap is not None:
            raise SnapshotError(
                "block starts inside or before the previous block",
                f"blocks[{overlap}].startLine",
            )

        doc = cls(splitter=splitter, hasher=hasher, config=config)
        doc._raw_content = raw_content
        doc._normalized_content = normalize(raw_content, math=doc._config.normalize_math)
        doc._id_counter = max(id_counter, _highest_id_suffix(blocks, doc._config.id_prefix))
        doc._install([replace(block, payload=None, pending=False) for block in blocks])
        return doc

    def to_dict(self) -> dict[str, Any]:
        from blockdoc.serialization import to_dict

        return to_dict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> BlockDocument:
        from blockdoc.serialization import from_dict

        return from_dict(data, **kwargs)


def _highest_id_suffix(blocks: Sequence[Block], prefix: str) -> int:
    highest = 0
    marker = f"{prefix}-"
    for block in blocks:
        if block.id.startswith(marker):
            suffix = block.id[len(marker) :]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
    return highest


__all__ = ["BlockDocument"]
