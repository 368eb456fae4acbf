"""Render-target command protocol.

Every structural change the document model wants applied to a render target
is expressed as one of six frozen command dataclasses. Commands must be
applied strictly in emission order; the core never touches a render target
itself, so tests assert directly on the emitted command tuples.

Command Set:
    Clear        -- empty the render target
    Append       -- add a node at the end
    InsertBefore -- add a node before the node keyed ``ref_id``
    Remove       -- drop the node keyed ``block_id``
    Replace      -- swap payload and attributes of an existing node
    UpdateAttrs  -- rewrite line attributes of an existing node

Thread Safety:
    All commands are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class CommandType(Enum):
    """Discriminator for the command union.

    Values match the wire names used by render-target executors.
    """

    CLEAR = "clear"
    APPEND = "append"
    INSERT_BEFORE = "insertBefore"
    REMOVE = "remove"
    REPLACE = "replace"
    UPDATE_ATTRS = "updateAttrs"


@dataclass(frozen=True, slots=True)
class BlockAttrs:
    """Attributes mirrored onto a rendered node for later re-querying.

    Executors write these as ``data-*`` attributes so that a render target
    can map a node back to its block id and source lines.

    """

    block_id: str
    block_hash: str
    start_line: int
    line_count: int

    def data_attributes(self) -> dict[str, str | int]:
        """Attributes in ``data-*`` form.

        Example:
            >>> BlockAttrs("block-1", "ab12", 0, 2).data_attributes()
            {'data-block-id': 'block-1', 'data-block-hash': 'ab12', 'data-line': 0, 'data-line-count': 2}

        """
        return {
            "data-block-id": self.block_id,
            "data-block-hash": self.block_hash,
            "data-line": self.start_line,
            "data-line-count": self.line_count,
        }


@dataclass(frozen=True, slots=True)
class Clear:
    type: ClassVar[CommandType] = CommandType.CLEAR


@dataclass(frozen=True, slots=True)
class Append:
    """Append a node carrying ``payload`` (empty when not yet rendered)."""

    type: ClassVar[CommandType] = CommandType.APPEND

    block_id: str
    payload: str
    attrs: BlockAttrs


@dataclass(frozen=True, slots=True)
class InsertBefore:
    """Insert a node immediately before the node keyed ``ref_id``."""

    type: ClassVar[CommandType] = CommandType.INSERT_BEFORE

    block_id: str
    payload: str
    ref_id: str
    attrs: BlockAttrs


@dataclass(frozen=True, slots=True)
class Remove:
    type: ClassVar[CommandType] = CommandType.REMOVE

    block_id: str


@dataclass(frozen=True, slots=True)
class Replace:
    """Replace the payload and attributes of an existing node."""

    type: ClassVar[CommandType] = CommandType.REPLACE

    block_id: str
    payload: str
    attrs: BlockAttrs


@dataclass(frozen=True, slots=True)
class UpdateAttrs:
    """Rewrite the line attributes of a node whose content is unchanged."""

    type: ClassVar[CommandType] = CommandType.UPDATE_ATTRS

    block_id: str
    start_line: int
    line_count: int

    def data_attributes(self) -> dict[str, str | int]:
        return {
            "data-line": self.start_line,
            "data-line-count": self.line_count,
        }


Command = Clear | Append | InsertBefore | Remove | Replace | UpdateAttrs


@dataclass(slots=True)
class CommandStats:
    """Counters describing one update.

    A kept block that had to be moved is reported as removed + inserted,
    because its rendered node is rebuilt even though its id and payload
    persist. ``replaced`` counts ``Replace`` commands in the result; the
    diff itself never emits one, payload refreshes go through
    ``BlockDocument.replace_command``.

    """

    kept: int = 0
    inserted: int = 0
    removed: int = 0
    replaced: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "kept": self.kept,
            "inserted": self.inserted,
            "removed": self.removed,
            "replaced": self.replaced,
        }


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Commands to apply, in order, plus the update counters."""

    commands: tuple[Command, ...]
    stats: CommandStats

    def __iter__(self):
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def of_type(self, command_type: CommandType) -> tuple[Command, ...]:
        """Commands of one kind, in emission order."""
        return tuple(c for c in self.commands if c.type is command_type)


__all__ = [
    "Append",
    "BlockAttrs",
    "Clear",
    "Command",
    "CommandResult",
    "CommandStats",
    "CommandType",
    "InsertBefore",
    "Remove",
    "Replace",
    "UpdateAttrs",
]
