"""Test helpers shared across modules."""

from blockdoc import BlockDocument, CommandResult, KeyedNodeList
from blockdoc.commands import Clear


def paragraphs(*texts: str) -> str:
    """Join single-line paragraphs; paragraph i starts on line 2 * i."""
    return "\n\n".join(texts)


def sync(target: KeyedNodeList, doc: BlockDocument, result: CommandResult) -> None:
    """Apply an update result, rebuilding from scratch after a lone Clear."""
    if result.commands == (Clear(),):
        target.apply(doc.full_render_commands())
    else:
        target.apply(result.commands)


def render_all(doc: BlockDocument, target: KeyedNodeList | None = None) -> None:
    """Give every block a payload derived from its content."""
    for index, block in enumerate(doc.blocks):
        doc.set_payload(index, f"<p>{block.content}</p>")
        if target is not None:
            command = doc.replace_command(index)
            assert command is not None
            target.apply([command])
