"""Utility modules for blockdoc.

Provides:
- hashing: hash_str, make_hasher for block content fingerprinting
- logger: get_logger for logging
- text: slugify, escape_html for outline ids and wrapped markup
"""

from blockdoc.utils.hashing import hash_str, make_hasher
from blockdoc.utils.logger import get_logger
from blockdoc.utils.text import escape_html, slugify

__all__ = [
    "escape_html",
    "get_logger",
    "hash_str",
    "make_hasher",
    "slugify",
]
