"""Logger access for blockdoc modules.

Every module logs under the ``blockdoc`` namespace. The library never
installs handlers; an application that wants update summaries configures the
``blockdoc`` logger (DEBUG for per-update counters, WARNING for splitter
failures).

Example:
    >>> from blockdoc.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Installed snapshot")
"""

from __future__ import annotations

import logging

_ROOT = "blockdoc"


def get_logger(name: str) -> logging.Logger:
    """Standard library logger namespaced under ``blockdoc.``.

    Example:
        >>> get_logger("matcher").name
        'blockdoc.matcher'
    """
    if name != _ROOT and not name.startswith(f"{_ROOT}."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
