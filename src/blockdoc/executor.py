"""Reference command executor over an in-memory keyed node list.

``KeyedNodeList`` applies the command protocol the same way a DOM executor
does: nodes are looked up by block id, and a lookup miss makes the command a
no-op instead of an error. It is what tests and headless consumers (previews,
snapshot exporters) use as a render target.

Example:
    >>> from blockdoc import BlockDocument
    >>> doc = BlockDocument("# A\\n\\nB")
    >>> target = KeyedNodeList()
    >>> target.apply(doc.full_render_commands())
    >>> target.block_ids() == doc.block_ids()
    True

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Protocol

from blockdoc.commands import (
    Append,
    BlockAttrs,
    Clear,
    Command,
    InsertBefore,
    Remove,
    Replace,
    UpdateAttrs,
)


class RenderTarget(Protocol):
    """Anything that can apply a command list in order."""

    def apply(self, commands: Iterable[Command]) -> None: ...


@dataclass(slots=True)
class RenderedNode:
    """One node of the render target, keyed by block id."""

    block_id: str
    payload: str
    attributes: dict[str, str | int] = field(default_factory=dict)


class KeyedNodeList:
    """Ordered list of rendered nodes with id-keyed mutation."""

    __slots__ = ("_nodes",)

    def __init__(self) -> None:
        self._nodes: list[RenderedNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[RenderedNode]:
        return iter(self._nodes)

    def block_ids(self) -> list[str]:
        return [node.block_id for node in self._nodes]

    def get(self, block_id: str) -> RenderedNode | None:
        position = self._find(block_id)
        return self._nodes[position] if position is not None else None

    def apply(self, commands: Iterable[Command]) -> None:
        """Apply commands strictly in order."""
        for command in commands:
            self.apply_one(command)

    def apply_one(self, command: Command) -> None:
        match command:
            case Clear():
                self._nodes.clear()
            case Append(block_id=block_id, payload=payload, attrs=attrs):
                self._nodes.append(_make_node(block_id, payload, attrs))
            case InsertBefore(block_id=block_id, payload=payload, ref_id=ref_id, attrs=attrs):
                position = self._find(ref_id)
                if position is not None:
                    self._nodes.insert(position, _make_node(block_id, payload, attrs))
            case Remove(block_id=block_id):
                position = self._find(block_id)
                if position is not None:
                    del self._nodes[position]
            case Replace(block_id=block_id, payload=payload, attrs=attrs):
                node = self.get(block_id)
                if node is not None:
                    node.payload = payload
                    node.attributes.update(attrs.data_attributes())
            case UpdateAttrs(block_id=block_id):
                node = self.get(block_id)
                if node is not None:
                    node.attributes.update(command.data_attributes())

    def _find(self, block_id: str) -> int | None:
        # First match wins, like querySelector
        for position, node in enumerate(self._nodes):
            if node.block_id == block_id:
                return position
        return None


def _make_node(block_id: str, payload: str, attrs: BlockAttrs) -> RenderedNode:
    return RenderedNode(block_id=block_id, payload=payload, attributes=attrs.data_attributes())


__all__ = ["KeyedNodeList", "RenderTarget", "RenderedNode"]
