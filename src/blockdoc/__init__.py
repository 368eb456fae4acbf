"""
blockdoc -- Incremental block document model for live Markdown previews

Keeps a block-level snapshot of a changing Markdown text, matches blocks
across edits by content hash, and emits the minimal command list that brings
a keyed render target (a DOM container, a terminal view, a list of nodes) up
to date while reusing every cached render payload it can.

Quick Start:
    >>> from blockdoc import BlockDocument
    >>> doc = BlockDocument()
    >>> result = doc.update("# Hello\\n\\nWorld")
    >>> result.stats.inserted
    2
    >>> doc.set_payload(0, "<h1>Hello</h1>")
    True
    >>> result = doc.update("# Hello\\n\\nWorld, again")
    >>> doc.get_block(0).payload
    '<h1>Hello</h1>'

Render targets:
    >>> from blockdoc import KeyedNodeList
    >>> target = KeyedNodeList()
    >>> target.apply(doc.full_render_commands())
    >>> target.block_ids() == doc.block_ids()
    True

Installation:
    pip install blockdoc              # zero runtime dependencies
    pip install blockdoc[test]        # + pytest, hypothesis
"""

from blockdoc.blocks import Block, IndexedBlock, ParsedBlock
from blockdoc.commands import (
    Append,
    BlockAttrs,
    Clear,
    Command,
    CommandResult,
    CommandStats,
    CommandType,
    InsertBefore,
    Remove,
    Replace,
    UpdateAttrs,
)
from blockdoc.config import (
    DocumentConfig,
    document_config_context,
    get_document_config,
    reset_document_config,
    set_document_config,
)
from blockdoc.document import BlockDocument
from blockdoc.errors import BlockdocError, ConfigError, SnapshotError
from blockdoc.executor import KeyedNodeList, RenderedNode, RenderTarget
from blockdoc.generator import find_order_violations, generate_commands
from blockdoc.mapping import BlockPosition, LineMapper, LinePosition, SurroundingBlocks
from blockdoc.matcher import MatchResult, match_blocks
from blockdoc.normalize import normalize_math_blocks
from blockdoc.outline import HeadingInfo, extract_headings, extract_title
from blockdoc.profiling import UpdateAccumulator, get_update_accumulator, profiled_update
from blockdoc.serialization import from_dict, from_json, to_dict, to_json
from blockdoc.splitter import BlockSplitter, split_blocks

__version__ = "0.1.0"


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Document model
    "BlockDocument",
    "Block",
    "IndexedBlock",
    "ParsedBlock",
    # Commands
    "Command",
    "CommandType",
    "CommandResult",
    "CommandStats",
    "BlockAttrs",
    "Clear",
    "Append",
    "InsertBefore",
    "Remove",
    "Replace",
    "UpdateAttrs",
    # Algorithm
    "MatchResult",
    "match_blocks",
    "generate_commands",
    "find_order_violations",
    # Text pipeline
    "normalize_math_blocks",
    "split_blocks",
    "BlockSplitter",
    # Line mapping
    "LineMapper",
    "LinePosition",
    "BlockPosition",
    "SurroundingBlocks",
    # Render targets
    "KeyedNodeList",
    "RenderedNode",
    "RenderTarget",
    # Outline
    "HeadingInfo",
    "extract_headings",
    "extract_title",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration
    "DocumentConfig",
    "get_document_config",
    "set_document_config",
    "reset_document_config",
    "document_config_context",
    # Profiling
    "UpdateAccumulator",
    "get_update_accumulator",
    "profiled_update",
    # Errors
    "BlockdocError",
    "ConfigError",
    "SnapshotError",
    "__version__",
]
