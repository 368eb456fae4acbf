"""Tests for the line-oriented block splitter."""

import pytest

from blockdoc.blocks import ParsedBlock, find_overlap
from blockdoc.splitter import coerce_split_output, split_blocks


def _spans(text: str) -> list[tuple[str, int]]:
    return [(block.content, block.start_line) for block in split_blocks(text)]


class TestBasicBlocks:
    def test_heading_paragraph_list(self) -> None:
        text = "# Title\n\nPara one\nline two\n\n- a\n- b\n"
        assert _spans(text) == [
            ("# Title", 0),
            ("Para one\nline two", 2),
            ("- a\n- b", 5),
        ]

    def test_empty_and_blank_text(self) -> None:
        assert split_blocks("") == []
        assert split_blocks("\n\n   \n") == []

    def test_trailing_blank_lines_are_dropped(self) -> None:
        assert _spans("a\n\n\n") == [("a", 0)]

    def test_heading_ends_paragraph(self) -> None:
        assert _spans("# H\ntext\n## H2") == [("# H", 0), ("text", 1), ("## H2", 2)]

    def test_hash_without_space_is_text(self) -> None:
        assert _spans("#hashtag\nmore") == [("#hashtag\nmore", 0)]

    def test_thematic_break(self) -> None:
        assert _spans("above\n\n***\n\nbelow") == [("above", 0), ("***", 2), ("below", 4)]

    def test_list_interrupts_paragraph(self) -> None:
        assert _spans("text\n- item") == [("text", 0), ("- item", 1)]

    def test_returns_parsed_blocks(self) -> None:
        assert split_blocks("x") == [ParsedBlock(content="x", start_line=0)]


class TestFences:
    def test_fence_keeps_blank_lines(self) -> None:
        text = "```py\na\n\nb\n```\nafter"
        assert _spans(text) == [("```py\na\n\nb\n```", 0), ("after", 5)]

    def test_tilde_fence(self) -> None:
        assert _spans("~~~\n# not a heading\n~~~") == [("~~~\n# not a heading\n~~~", 0)]

    def test_shorter_closer_does_not_close(self) -> None:
        text = "````\n```\n````"
        assert _spans(text) == [(text, 0)]

    def test_unterminated_fence_swallows_rest(self) -> None:
        text = "```\ncode\n\nmore"
        assert _spans(text) == [(text, 0)]

    def test_nested_colon_directives(self) -> None:
        text = "::::{note}\n:::{tip}\nx\n:::\n::::\nafter"
        assert _spans(text) == [("::::{note}\n:::{tip}\nx\n:::\n::::", 0), ("after", 5)]

    def test_colons_without_brace_are_text(self) -> None:
        assert _spans(":::\ntext") == [(":::\ntext", 0)]

    def test_display_math(self) -> None:
        assert _spans("A\n\n$$\nx\n\ny\n$$\n\nB") == [
            ("A", 0),
            ("$$\nx\n\ny\n$$", 2),
            ("B", 8),
        ]


class TestSetextAndFrontMatter:
    def test_setext_heading(self) -> None:
        assert _spans("Title\n===\nBody") == [("Title\n===", 0), ("Body", 2)]

    def test_front_matter(self) -> None:
        assert _spans("---\ntitle: x\n---\n# H") == [("---\ntitle: x\n---", 0), ("# H", 3)]

    def test_unclosed_front_matter_is_content(self) -> None:
        blocks = split_blocks("---\ntitle: x")
        assert blocks[0].start_line == 0
        assert "title: x" in "\n".join(b.content for b in blocks)


class TestContinuation:
    def test_list_continues_across_blank_before_item(self) -> None:
        assert _spans("- a\n\n- b\n\npara") == [("- a\n\n- b", 0), ("para", 4)]

    def test_list_continues_into_indented_paragraph(self) -> None:
        assert _spans("1. one\n\n   more\n\nend") == [("1. one\n\n   more", 0), ("end", 4)]

    def test_heading_ends_list(self) -> None:
        assert _spans("- a\n# H") == [("- a", 0), ("# H", 1)]

    def test_indented_code(self) -> None:
        assert _spans("para\n\n    code\n\n    more\nafter") == [
            ("para", 0),
            ("    code\n\n    more", 2),
            ("after", 5),
        ]


class TestCoerceSplitOutput:
    def test_none_is_empty(self) -> None:
        assert coerce_split_output(None) == []

    def test_accepts_tuples_and_mappings(self) -> None:
        raw = [
            ("a", 0),
            {"content": "b", "startLine": 2},
            {"content": "c", "start_line": 4},
            ParsedBlock("d", 6),
        ]
        assert coerce_split_output(raw) == [
            ParsedBlock("a", 0),
            ParsedBlock("b", 2),
            ParsedBlock("c", 4),
            ParsedBlock("d", 6),
        ]

    def test_adjacent_blocks_are_accepted(self) -> None:
        raw = [("a\nb", 0), ("c", 2)]
        assert coerce_split_output(raw) == [ParsedBlock("a\nb", 0), ParsedBlock("c", 2)]

    def test_find_overlap(self) -> None:
        assert find_overlap([(0, 2), (2, 1), (10, 3)]) is None
        assert find_overlap([(0, 2), (1, 1)]) == 1
        assert find_overlap([]) is None

    def test_accepts_generators(self) -> None:
        assert coerce_split_output(iter([("a", 0)])) == [ParsedBlock("a", 0)]

    @pytest.mark.parametrize(
        "raw",
        [
            "not a list",
            b"bytes",
            42,
            [("a", -1)],
            [("a", True)],
            [("a", 1.5)],
            [(1, 0)],
            [{"content": "a"}],
            [("a", 0, "extra")],
            [("a", 0), None],
            [("b", 5), ("a", 0)],
            [("a\nb", 0), ("c", 1)],
            [("a", 2), ("b", 2)],
        ],
    )
    def test_malformed_output_is_rejected_whole(self, raw: object) -> None:
        assert coerce_split_output(raw) == []
