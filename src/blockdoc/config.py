"""ContextVar-based document configuration for blockdoc.

A ``BlockDocument`` created without an explicit config reads the active
``DocumentConfig`` from a ContextVar once, at construction time.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    from blockdoc import BlockDocument
    from blockdoc.config import DocumentConfig, document_config_context

    with document_config_context(DocumentConfig(normalize_math=False)):
        doc = BlockDocument("$$x$$")

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from blockdoc.errors import ConfigError


@dataclass(frozen=True, slots=True)
class DocumentConfig:
    """Immutable document configuration.

    Attributes:
        normalize_math: Expand single-line ``$$...$$`` before splitting
        hash_length: Hex characters kept from the SHA-256 content digest
            (None keeps the full digest)
        id_prefix: Prefix of generated block ids ("block" -> "block-1")
        placeholder_marker: Substring that flags a payload as pending
        block_class: CSS class written by ``BlockDocument.wrap_block_html``

    """

    normalize_math: bool = True
    hash_length: int | None = 16
    id_prefix: str = "block"
    placeholder_marker: str = "async-placeholder"
    block_class: str = "md-block"

    def __post_init__(self) -> None:
        if self.hash_length is not None and self.hash_length <= 0:
            raise ConfigError("hash_length", f"must be positive, got {self.hash_length}")
        if not self.id_prefix:
            raise ConfigError("id_prefix", "must not be empty")

    @classmethod
    def from_dict(cls, config_dict: dict) -> "DocumentConfig":
        """Create DocumentConfig from dictionary.

        Only includes keys that are valid DocumentConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = DocumentConfig.from_dict({
            ...     "normalize_math": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.normalize_math
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: DocumentConfig = DocumentConfig()

_document_config: ContextVar[DocumentConfig] = ContextVar(
    "document_config",
    default=_DEFAULT_CONFIG,
)


def get_document_config() -> DocumentConfig:
    """Get current document configuration (context-local)."""
    return _document_config.get()


def set_document_config(config: DocumentConfig) -> None:
    """Set document configuration for current context.

    Only affects documents constructed afterwards in this context.

    """
    _document_config.set(config)


def reset_document_config() -> None:
    """Reset to the default configuration."""
    _document_config.set(_DEFAULT_CONFIG)


@contextmanager
def document_config_context(config: DocumentConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Properly restores the previous config even if an exception is raised.

    Example:
        >>> with document_config_context(DocumentConfig(id_prefix="b")):
        ...     doc = BlockDocument("# Hi")
        >>> doc.block_ids()
        ['b-1']

    """
    previous = _document_config.get()
    _document_config.set(config)
    try:
        yield
    finally:
        _document_config.set(previous)


__all__ = [
    "DocumentConfig",
    "document_config_context",
    "get_document_config",
    "reset_document_config",
    "set_document_config",
]
