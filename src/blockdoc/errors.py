"""Exception classes for blockdoc.

``BlockDocument.update`` never raises: splitter failures degrade to an
empty snapshot and out-of-range line queries return ``None``. Exceptions are
reserved for invalid configuration and malformed serialized snapshots.
"""

from __future__ import annotations


class BlockdocError(Exception):
    """Base exception for all blockdoc errors.

    Subclass this for specific error categories.
    """

    pass


class SnapshotError(BlockdocError, ValueError):
    """A serialized snapshot cannot be restored.

    Raised by ``blockdoc.serialization.from_dict`` when keys are missing,
    values have the wrong type, or block ids collide.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize snapshot error.

        Args:
            message: Description of the problem
            field: Dotted path of the offending field (e.g. "blocks[2].id")
        """
        self.field = field
        location = f"{field}: " if field else ""
        super().__init__(f"{location}{message}")


class ConfigError(BlockdocError, ValueError):
    """Invalid DocumentConfig value."""

    def __init__(self, option: str, message: str) -> None:
        self.option = option
        super().__init__(f"Config option '{option}': {message}")
