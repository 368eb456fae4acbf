"""Tests for blockdoc.matcher: hash-keyed block matching."""

from blockdoc.matcher import MatchResult, match_blocks


class TestBasicMatching:
    """Distinct hashes: keeps, inserts, and deletes."""

    def test_identical_sequences_keep_everything_in_place(self) -> None:
        result = match_blocks(["a", "b", "c"], ["a", "b", "c"])
        assert result.keeps == ((0, 0), (1, 1), (2, 2))
        assert result.inserts == ()
        assert result.deletes == ()
        assert result.is_identity

    def test_insertion_in_the_middle(self) -> None:
        result = match_blocks(["a", "c"], ["a", "b", "c"])
        assert result.keeps == ((0, 0), (2, 1))
        assert result.inserts == (1,)
        assert result.deletes == ()
        assert not result.is_identity

    def test_deletion_in_the_middle(self) -> None:
        result = match_blocks(["a", "b", "c"], ["a", "c"])
        assert result.keeps == ((0, 0), (1, 2))
        assert result.inserts == ()
        assert result.deletes == (1,)

    def test_content_change_is_delete_plus_insert(self) -> None:
        result = match_blocks(["h1"], ["h2"])
        assert result.keeps == ()
        assert result.inserts == (0,)
        assert result.deletes == (0,)

    def test_swap_keeps_both(self) -> None:
        result = match_blocks(["a", "b", "c"], ["b", "a", "c"])
        assert result.keeps == ((0, 1), (1, 0), (2, 2))

    def test_empty_inputs(self) -> None:
        assert match_blocks([], []) == MatchResult(keeps=(), inserts=(), deletes=())
        assert match_blocks([], ["a"]).inserts == (0,)
        assert match_blocks(["a"], []).deletes == (0,)

    def test_keep_map(self) -> None:
        result = match_blocks(["a", "b"], ["x", "b", "a"])
        assert result.keep_map() == {1: 1, 2: 0}


class TestDuplicateHashes:
    """Nearest-position tie-breaking among blocks with equal content."""

    def test_nearest_old_position_wins(self) -> None:
        # new[2] is nearer to old[3] than to old[0]
        result = match_blocks(["h", "x", "y", "h"], ["x", "y", "h"])
        assert (2, 3) in result.keeps
        assert result.deletes == (0,)

    def test_equal_distance_goes_to_lower_old_index(self) -> None:
        result = match_blocks(["a", "b", "a"], ["b", "a"])
        assert result.keeps == ((0, 1), (1, 0))
        assert result.deletes == (2,)

    def test_three_duplicates_shrinking(self) -> None:
        result = match_blocks(["d", "d", "d"], ["d", "d"])
        assert result.keeps == ((0, 0), (1, 1))
        assert result.deletes == (2,)

    def test_three_duplicates_shifted_by_insert(self) -> None:
        result = match_blocks(["d", "d", "d"], ["x", "d", "d", "d"])
        # Greedy in new order: new[1] takes old[1], new[2] old[2], new[3] the rest
        assert result.keeps == ((1, 1), (2, 2), (3, 0))
        assert result.inserts == (0,)
        assert result.deletes == ()

    def test_claimed_positions_are_never_reused(self) -> None:
        result = match_blocks(["d"], ["d", "d", "d"])
        assert result.keeps == ((0, 0),)
        assert result.inserts == (1, 2)

    def test_every_old_index_accounted_for_once(self) -> None:
        old = ["a", "b", "a", "c", "a", "b"]
        new = ["b", "a", "a", "d", "b"]
        result = match_blocks(old, new)
        kept_old = [old_index for _, old_index in result.keeps]
        assert len(kept_old) == len(set(kept_old))
        assert sorted(kept_old + list(result.deletes)) == list(range(len(old)))
        kept_new = [new_index for new_index, _ in result.keeps]
        assert sorted(kept_new + list(result.inserts)) == list(range(len(new)))
        for new_index, old_index in result.keeps:
            assert old[old_index] == new[new_index]
