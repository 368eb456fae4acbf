"""Content fingerprints for block matching.

Identity across updates is decided by content hash alone, so a hasher must
be deterministic for identical input within a process. Equal hashes are
treated as equal content; a truncated digest trades collision resistance for
shorter ``data-block-hash`` attributes.

Example:
    >>> hash_str("hello world", truncate=16)
    'b94d27b9934d3e08'
"""

import hashlib
from collections.abc import Callable


def hash_str(
    content: str,
    truncate: int | None = None,
    algorithm: str = "sha256",
) -> str:
    """Hex digest of ``content`` encoded as UTF-8.

    Args:
        content: Text to fingerprint
        truncate: Keep only the first N hex characters (None keeps all)
        algorithm: Any name accepted by ``hashlib.new``
    """
    digest = hashlib.new(algorithm, content.encode("utf-8")).hexdigest()
    if truncate is None:
        return digest
    return digest[:truncate]


def make_hasher(length: int | None = 16) -> Callable[[str], str]:
    """Default block hasher: SHA-256 truncated to ``length`` hex characters.

    Example:
        >>> make_hasher(8)("hello")
        '2cf24dba'
    """

    def hasher(content: str) -> str:
        return hash_str(content, truncate=length)

    return hasher
