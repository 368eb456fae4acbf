"""Command generation from a block match.

Turns a ``MatchResult`` into the ordered command list that moves a render
target from the old snapshot to the new one, and assigns identity to the new
blocks as a side effect.

Ordering rules:
    1. Deleted blocks are removed first, so no two nodes ever claim the
       same slot.
    2. Kept blocks whose old position falls behind an earlier kept block are
       order violations. They are removed and reinserted with their cached
       payload.
    3. Kept blocks in order stay in place; only changed line attributes are
       rewritten.
    4. Inserted and moved blocks are placed before the nearest following
       block that stays in place, or appended when none follows.

"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from blockdoc.blocks import Block
from blockdoc.commands import (
    Append,
    Command,
    CommandResult,
    CommandStats,
    InsertBefore,
    Remove,
    UpdateAttrs,
)
from blockdoc.matcher import MatchResult


def generate_commands(
    old_blocks: Sequence[Block],
    new_blocks: Sequence[Block],
    match: MatchResult,
    new_id: Callable[[], str],
) -> CommandResult:
    """Assign ids to ``new_blocks`` and emit the commands for the transition.

    Args:
        old_blocks: The installed snapshot, untouched by this call.
        new_blocks: Freshly split blocks. Their ``id``, ``payload`` and
            ``pending`` fields are overwritten here.
        match: Output of ``match_blocks`` for the two sequences.
        new_id: Mints a fresh block id.

    Returns:
        CommandResult with commands in application order.

    """
    commands: list[Command] = []
    stats = CommandStats()
    keep_map = match.keep_map()

    for new_index, old_index in match.keeps:
        old = old_blocks[old_index]
        block = new_blocks[new_index]
        block.id = old.id
        block.payload = old.payload
        block.pending = old.pending
        stats.kept += 1

    for new_index in match.inserts:
        block = new_blocks[new_index]
        block.id = new_id()
        block.payload = None
        block.pending = False
        stats.inserted += 1

    for old_index in match.deletes:
        commands.append(Remove(block_id=old_blocks[old_index].id))
        stats.removed += 1

    moved = find_order_violations(match.keeps)
    anchors = _next_anchors(len(new_blocks), keep_map, moved, new_blocks)

    for index, block in enumerate(new_blocks):
        old_index = keep_map.get(index)

        if old_index is not None and index not in moved:
            old = old_blocks[old_index]
            if old.start_line != block.start_line or old.line_count != block.line_count:
                commands.append(
                    UpdateAttrs(
                        block_id=block.id,
                        start_line=block.start_line,
                        line_count=block.line_count,
                    )
                )
            continue

        if old_index is not None:
            commands.append(Remove(block_id=block.id))
            stats.removed += 1
            stats.kept -= 1
            stats.inserted += 1

        payload = (block.payload or "") if old_index is not None else ""
        ref_id = anchors[index]
        if ref_id is None:
            commands.append(Append(block_id=block.id, payload=payload, attrs=block.attrs))
        else:
            commands.append(
                InsertBefore(
                    block_id=block.id,
                    payload=payload,
                    ref_id=ref_id,
                    attrs=block.attrs,
                )
            )

    return CommandResult(commands=tuple(commands), stats=stats)


def find_order_violations(keeps: Sequence[tuple[int, int]]) -> set[int]:
    """New indices of kept blocks that moved backward relative to a predecessor.

    Walks keep pairs in new-index order tracking the largest old index seen.
    A pair below that maximum cannot stay where it is. Flagged pairs do not
    raise the maximum.

    Example:
        >>> sorted(find_order_violations([(0, 1), (1, 0), (2, 2)]))
        [1]

    """
    moved: set[int] = set()
    max_old = -1
    for new_index, old_index in sorted(keeps):
        if old_index < max_old:
            moved.add(new_index)
        else:
            max_old = old_index
    return moved


def _next_anchors(
    count: int,
    keep_map: dict[int, int],
    moved: set[int],
    new_blocks: Sequence[Block],
) -> list[str | None]:
    """For each position, the id of the nearest later block that stays in place."""
    anchors: list[str | None] = [None] * count
    following: str | None = None
    for index in range(count - 1, -1, -1):
        anchors[index] = following
        if index in keep_map and index not in moved:
            following = new_blocks[index].id
    return anchors


__all__ = ["find_order_violations", "generate_commands"]
