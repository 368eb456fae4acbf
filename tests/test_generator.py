"""Tests for blockdoc.generator: command generation and order violations."""

import itertools

from blockdoc.blocks import Block, count_lines
from blockdoc.commands import Append, InsertBefore, Remove, UpdateAttrs
from blockdoc.generator import find_order_violations, generate_commands
from blockdoc.matcher import match_blocks

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _old(*contents: str) -> list[Block]:
    """Installed blocks named after their content, one paragraph per 2 lines."""
    return [
        Block(
            id=f"old-{content}",
            hash=content,
            start_line=index * 2,
            line_count=count_lines(content),
            content=content,
            payload=f"<p>{content}</p>",
        )
        for index, content in enumerate(contents)
    ]


def _new(*contents: str) -> list[Block]:
    return [
        Block(
            id="",
            hash=content,
            start_line=index * 2,
            line_count=count_lines(content),
            content=content,
        )
        for index, content in enumerate(contents)
    ]


def _run(old: list[Block], new: list[Block]):  # type: ignore[no-untyped-def]
    counter = itertools.count(1)
    match = match_blocks([b.hash for b in old], [b.hash for b in new])
    return generate_commands(old, new, match, lambda: f"new-{next(counter)}")


# ---------------------------------------------------------------------------
# find_order_violations
# ---------------------------------------------------------------------------


class TestFindOrderViolations:
    def test_increasing_old_indices_have_no_violations(self) -> None:
        assert find_order_violations([(0, 0), (1, 2), (2, 5)]) == set()

    def test_swap_flags_the_later_block(self) -> None:
        assert find_order_violations([(0, 1), (1, 0), (2, 2)]) == {1}

    def test_moved_block_does_not_raise_the_maximum(self) -> None:
        # old order C, A, B -> new order A, B, C: only C moved
        assert find_order_violations([(0, 1), (1, 2), (2, 0)]) == {2}

    def test_reversal_flags_all_but_first(self) -> None:
        assert find_order_violations([(0, 2), (1, 1), (2, 0)]) == {1, 2}

    def test_input_order_does_not_matter(self) -> None:
        assert find_order_violations([(2, 2), (1, 0), (0, 1)]) == {1}


# ---------------------------------------------------------------------------
# generate_commands
# ---------------------------------------------------------------------------


class TestIdentityAssignment:
    def test_kept_blocks_inherit_id_and_payload(self) -> None:
        old = _old("A", "B")
        new = _new("A", "B")
        _run(old, new)
        assert [b.id for b in new] == ["old-A", "old-B"]
        assert [b.payload for b in new] == ["<p>A</p>", "<p>B</p>"]

    def test_kept_blocks_inherit_pending_flag(self) -> None:
        old = _old("A")
        old[0].pending = True
        new = _new("A")
        _run(old, new)
        assert new[0].pending is True

    def test_inserted_blocks_get_fresh_ids_in_order(self) -> None:
        old = _old("A")
        new = _new("X", "A", "Y")
        _run(old, new)
        assert [b.id for b in new] == ["new-1", "old-A", "new-2"]
        assert new[0].payload is None
        assert new[2].payload is None


class TestCommands:
    def test_unchanged_sequence_emits_nothing(self) -> None:
        result = _run(_old("A", "B"), _new("A", "B"))
        assert result.commands == ()
        assert result.stats.as_dict() == {"kept": 2, "inserted": 0, "removed": 0, "replaced": 0}

    def test_insert_before_following_kept_block(self) -> None:
        new = _new("A", "B", "C")
        result = _run(_old("A", "C"), new)
        assert result.commands == (
            InsertBefore(block_id="new-1", payload="", ref_id="old-C", attrs=new[1].attrs),
            UpdateAttrs(block_id="old-C", start_line=4, line_count=1),
        )
        assert result.stats.inserted == 1
        assert result.stats.removed == 0
        assert result.stats.kept == 2

    def test_insert_at_end_appends(self) -> None:
        new = _new("A", "B")
        result = _run(_old("A"), new)
        assert result.commands == (Append(block_id="new-1", payload="", attrs=new[1].attrs),)

    def test_removes_come_first(self) -> None:
        result = _run(_old("A", "B", "C"), _new("X", "A", "C"))
        assert isinstance(result.commands[0], Remove)
        assert result.commands[0].block_id == "old-B"
        assert all(not isinstance(c, Remove) for c in result.commands[1:])

    def test_deletion_updates_following_lines(self) -> None:
        result = _run(_old("A", "B", "C"), _new("A", "C"))
        assert result.commands == (
            Remove(block_id="old-B"),
            UpdateAttrs(block_id="old-C", start_line=2, line_count=1),
        )
        assert result.stats.removed == 1
        assert result.stats.inserted == 0

    def test_moved_block_is_removed_and_reinserted_with_payload(self) -> None:
        new = _new("B", "A", "C")
        result = _run(_old("A", "B", "C"), new)
        assert result.commands == (
            UpdateAttrs(block_id="old-B", start_line=0, line_count=1),
            Remove(block_id="old-A"),
            InsertBefore(
                block_id="old-A",
                payload="<p>A</p>",
                ref_id="old-C",
                attrs=new[1].attrs,
            ),
        )
        assert result.stats.as_dict() == {"kept": 2, "inserted": 1, "removed": 1, "replaced": 0}

    def test_moved_last_block_is_appended(self) -> None:
        new = _new("B", "C", "A")
        result = _run(_old("A", "B", "C"), new)
        assert result.commands[-2:] == (
            Remove(block_id="old-A"),
            Append(block_id="old-A", payload="<p>A</p>", attrs=new[2].attrs),
        )

    def test_moved_block_without_payload_carries_empty_payload(self) -> None:
        old = _old("A", "B")
        old[0].payload = None
        result = _run(old, _new("B", "A"))
        appended = result.commands[-1]
        assert isinstance(appended, Append)
        assert appended.payload == ""

    def test_line_count_change_triggers_update_attrs(self) -> None:
        old = _old("A", "B")
        new = _new("A", "B")
        new[1].start_line = 3
        result = _run(old, new)
        assert result.commands == (UpdateAttrs(block_id="old-B", start_line=3, line_count=1),)

    def test_content_edit_replaces_block(self) -> None:
        new = _new("A2")
        result = _run(_old("A"), new)
        assert result.commands == (
            Remove(block_id="old-A"),
            Append(block_id="new-1", payload="", attrs=new[0].attrs),
        )
