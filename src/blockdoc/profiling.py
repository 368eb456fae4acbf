"""Opt-in profiling for document updates.

Accumulates metrics across ``BlockDocument.update`` calls:
- Total duration
- Source length and resulting block count
- Kept / inserted / removed / replaced totals

Zero overhead when disabled (get_update_accumulator() returns None).

Example:
    from blockdoc import BlockDocument
    from blockdoc.profiling import profiled_update

    doc = BlockDocument()
    with profiled_update() as metrics:
        doc.update("# Hello")
        doc.update("# Hello\\n\\nWorld")

    print(metrics.summary())
    # {"total_ms": 0.4, "update_calls": 2, "blocks": 3, "kept": 1, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

from blockdoc.commands import CommandStats


@dataclass
class UpdateAccumulator:
    """Accumulated metrics during document updates.

    Attributes:
        start_time: Profiling start timestamp.
        update_calls: Number of update() calls recorded.
        source_length: Total length of source text passed to update().
        blocks: Total blocks installed across recorded updates.
        kept: Total kept blocks.
        inserted: Total inserted blocks (moves included).
        removed: Total removed blocks (moves included).
        replaced: Total Replace commands reported by updates.

    """

    start_time: float = field(default_factory=perf_counter)
    update_calls: int = 0
    source_length: int = 0
    blocks: int = 0
    kept: int = 0
    inserted: int = 0
    removed: int = 0
    replaced: int = 0

    def record_update(self, source_length: int, block_count: int, stats: CommandStats) -> None:
        """Record an update call."""
        self.update_calls += 1
        self.source_length += source_length
        self.blocks += block_count
        self.kept += stats.kept
        self.inserted += stats.inserted
        self.removed += stats.removed
        self.replaced += stats.replaced

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    @property
    def reuse_ratio(self) -> float:
        """Fraction of installed blocks that kept their identity."""
        return self.kept / self.blocks if self.blocks else 0.0

    def summary(self) -> dict[str, Any]:
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "update_calls": self.update_calls,
            "source_length": self.source_length,
            "blocks": self.blocks,
            "kept": self.kept,
            "inserted": self.inserted,
            "removed": self.removed,
            "replaced": self.replaced,
            "reuse_ratio": round(self.reuse_ratio, 3),
        }


_accumulator: ContextVar[UpdateAccumulator | None] = ContextVar(
    "update_accumulator",
    default=None,
)


def get_update_accumulator() -> UpdateAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_update() -> Iterator[UpdateAccumulator]:
    """Context manager for profiled updates.

    Creates an UpdateAccumulator and makes it available via
    get_update_accumulator() for the duration of the with block.

    Yields:
        UpdateAccumulator that will be populated during update calls.

    """
    acc = UpdateAccumulator()
    token: Token[UpdateAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = [
    "UpdateAccumulator",
    "get_update_accumulator",
    "profiled_update",
]
