"""Hash-keyed block matching between two snapshots.

Blocks are matched by exact content hash. The pass is linear in block count
for documents without heavy duplication.

Algorithm:
    1. Index old positions by hash (ascending, duplicates kept together).
    2. Visit new blocks in order; among unclaimed old positions with the same
       hash, claim the one nearest to the new position. Equal distances go to
       the lower old position.
    3. Unclaimed old positions are deletions, unmatched new positions are
       insertions.

Thread Safety:
    ``match_blocks`` is a pure function, safe to call from any thread.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Correspondence between an old and a new block sequence.

    Attributes:
        keeps: ``(new_index, old_index)`` pairs, sorted by new index
        inserts: New indices with no old counterpart, ascending
        deletes: Old indices that were not claimed, ascending

    """

    keeps: tuple[tuple[int, int], ...]
    inserts: tuple[int, ...]
    deletes: tuple[int, ...]

    def keep_map(self) -> dict[int, int]:
        """Map new index -> old index for kept blocks."""
        return dict(self.keeps)

    @property
    def is_identity(self) -> bool:
        """True when every block was kept in place."""
        return (
            not self.inserts
            and not self.deletes
            and all(new == old for new, old in self.keeps)
        )


def match_blocks(old_hashes: Sequence[str], new_hashes: Sequence[str]) -> MatchResult:
    """Match new blocks to old blocks by content hash.

    Args:
        old_hashes: Hashes of the current snapshot, in order.
        new_hashes: Hashes of the freshly split blocks, in order.

    Returns:
        MatchResult with keep pairs, insertions, and deletions.

    Example:
        >>> match_blocks(["a", "b", "c"], ["b", "a", "c"]).keeps
        ((0, 1), (1, 0), (2, 2))
        >>> match_blocks(["h", "x", "h"], ["h", "h"]).deletes
        (1,)

    """
    positions: dict[str, list[int]] = {}
    for old_index, block_hash in enumerate(old_hashes):
        positions.setdefault(block_hash, []).append(old_index)

    claimed: set[int] = set()
    keeps: list[tuple[int, int]] = []
    inserts: list[int] = []

    for new_index, block_hash in enumerate(new_hashes):
        best = _nearest_unclaimed(positions.get(block_hash), new_index, claimed)
        if best is None:
            inserts.append(new_index)
            continue
        claimed.add(best)
        keeps.append((new_index, best))

    deletes = tuple(i for i in range(len(old_hashes)) if i not in claimed)
    return MatchResult(keeps=tuple(keeps), inserts=tuple(inserts), deletes=deletes)


def _nearest_unclaimed(
    candidates: list[int] | None,
    new_index: int,
    claimed: set[int],
) -> int | None:
    """Pick the unclaimed candidate closest to ``new_index``.

    Candidates are ascending, so the strict comparison hands ties to the
    lower old index.

    """
    if not candidates:
        return None

    best: int | None = None
    best_distance = 0
    for old_index in candidates:
        if old_index in claimed:
            continue
        distance = abs(old_index - new_index)
        if best is None or distance < best_distance:
            best = old_index
            best_distance = distance
    return best


__all__ = ["MatchResult", "match_blocks"]
