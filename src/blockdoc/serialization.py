"""Snapshot serialization: JSON round-trip for BlockDocument state.

Exports ``{"blocks": [...], "rawContent": ..., "idCounter": ...}`` where each
block carries ``id``, ``hash``, ``startLine``, ``lineCount`` and ``content``.
Rendered payloads are not durable: they are dropped on export and recomputed
on demand after a restore.

All JSON output is deterministic (sorted keys).

Example:
    from blockdoc import BlockDocument
    from blockdoc.serialization import to_json, from_json

    doc = BlockDocument("# Hello\\n\\nWorld")
    restored = from_json(to_json(doc))
    assert restored.block_ids() == doc.block_ids()

Thread Safety:
    All functions are pure with respect to their inputs.

"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from blockdoc.blocks import Block
from blockdoc.errors import SnapshotError

if TYPE_CHECKING:
    from blockdoc.config import DocumentConfig
    from blockdoc.document import BlockDocument
    from blockdoc.splitter import BlockSplitter

# Wire name -> (Block attribute, expected type)
_BLOCK_FIELDS: dict[str, tuple[str, type]] = {
    "id": ("id", str),
    "hash": ("hash", str),
    "startLine": ("start_line", int),
    "lineCount": ("line_count", int),
    "content": ("content", str),
}


def to_dict(doc: BlockDocument) -> dict[str, Any]:
    """Export a document snapshot as a JSON-compatible dict (no payloads)."""
    return {
        "blocks": [_block_to_dict(block) for block in doc.blocks],
        "rawContent": doc.raw_content,
        "idCounter": doc.id_counter,
    }


def _block_to_dict(block: Block) -> dict[str, Any]:
    return {wire: getattr(block, attr) for wire, (attr, _) in _BLOCK_FIELDS.items()}


def from_dict(
    data: dict[str, Any],
    *,
    splitter: BlockSplitter | None = None,
    hasher: Callable[[str], str] | None = None,
    config: DocumentConfig | None = None,
) -> BlockDocument:
    """Reconstruct a document from ``to_dict`` output.

    Raises:
        SnapshotError: If keys are missing, values have the wrong type,
            block ids are not unique, or block line ranges are out of order.

    """
    from blockdoc.document import BlockDocument

    if not isinstance(data, dict):
        raise SnapshotError(f"expected a dict, got {type(data).__name__}")

    raw_content = _require(data, "rawContent", str)
    id_counter = _require(data, "idCounter", int)
    raw_blocks = _require(data, "blocks", list)

    blocks = [_block_from_dict(entry, position) for position, entry in enumerate(raw_blocks)]

    seen: set[str] = set()
    for position, block in enumerate(blocks):
        if block.id in seen:
            raise SnapshotError(f"duplicate block id {block.id!r}", f"blocks[{position}].id")
        seen.add(block.id)

    return BlockDocument.restore(
        raw_content,
        blocks,
        id_counter,
        splitter=splitter,
        hasher=hasher,
        config=config,
    )


def _block_from_dict(entry: Any, position: int) -> Block:
    path = f"blocks[{position}]"
    if not isinstance(entry, dict):
        raise SnapshotError(f"expected a dict, got {type(entry).__name__}", path)

    kwargs: dict[str, Any] = {}
    for wire, (attr, expected) in _BLOCK_FIELDS.items():
        kwargs[attr] = _require(entry, wire, expected, path)
    for wire in ("startLine", "lineCount"):
        if entry[wire] < 0:
            raise SnapshotError(f"must be non-negative, got {entry[wire]}", f"{path}.{wire}")
    return Block(**kwargs)


def _require(data: dict[str, Any], key: str, expected: type, path: str = "") -> Any:
    field = f"{path}.{key}" if path else key
    if key not in data:
        raise SnapshotError("missing required field", field)
    value = data[key]
    # bool is an int subclass but never a valid line number or counter
    if isinstance(value, bool) or not isinstance(value, expected):
        raise SnapshotError(
            f"expected {expected.__name__}, got {type(value).__name__}",
            field,
        )
    return value


def to_json(doc: BlockDocument, *, indent: int | None = None) -> str:
    """Serialize a document snapshot to a JSON string with sorted keys."""
    return json.dumps(to_dict(doc), sort_keys=True, indent=indent)


def from_json(data: str, **kwargs: Any) -> BlockDocument:
    """Deserialize a document snapshot from a JSON string.

    Raises:
        SnapshotError: If the JSON is invalid or not a snapshot.

    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"invalid JSON: {exc.msg}") from exc
    return from_dict(raw, **kwargs)


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
