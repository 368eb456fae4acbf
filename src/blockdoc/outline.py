"""Outline extraction from block content.

Produces title and table-of-contents data straight from the block model,
without waiting for any renderer.

Example:
    >>> from blockdoc import BlockDocument
    >>> doc = BlockDocument("# Guide\\n\\n## Setup\\n\\n## Setup")
    >>> [(h.level, h.id) for h in extract_headings(doc.blocks)]
    [(1, 'guide'), (2, 'setup'), (2, 'setup-1')]

"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from blockdoc.blocks import Block
from blockdoc.utils.text import slugify

_TITLE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)
_HEADING = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
_FENCES = ("```", "~~~")


@dataclass(frozen=True, slots=True)
class HeadingInfo:
    """A heading for navigation: level, text, anchor id, 0-based source line."""

    level: int
    text: str
    id: str
    line: int


def extract_title(text: str) -> str | None:
    """Text of the first level-1 ATX heading, if any."""
    match = _TITLE.search(text)
    return match.group(1).strip() if match else None


def extract_headings(blocks: Sequence[Block]) -> list[HeadingInfo]:
    """First ATX heading of each block, with unique anchor ids.

    Ids come from ``slugify``; empty slugs fall back to ``heading`` and
    repeats get ``-1``, ``-2``, ... suffixes in document order.

    """
    headings: list[HeadingInfo] = []
    seen: set[str] = set()

    for block in blocks:
        if block.content.lstrip().startswith(_FENCES):
            continue
        match = _HEADING.search(block.content)
        if match is None:
            continue
        text = match.group(2).strip()
        base = slugify(text) or "heading"
        anchor = base
        counter = 1
        while anchor in seen:
            anchor = f"{base}-{counter}"
            counter += 1
        seen.add(anchor)
        headings.append(
            HeadingInfo(level=len(match.group(1)), text=text, id=anchor, line=block.start_line)
        )

    return headings


__all__ = ["HeadingInfo", "extract_headings", "extract_title"]
