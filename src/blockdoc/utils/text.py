"""Text helpers for heading ids and wrapped block markup.

Example:
    >>> from blockdoc.utils.text import slugify
    >>> slugify("Hello World!")
    'hello-world'
"""

from __future__ import annotations

import html as html_module
import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[-\s]+")


def slugify(text: str, separator: str = "-") -> str:
    """Convert heading text to a URL-safe anchor id.

    Unicode word characters are kept so headings in any script produce a
    usable anchor. HTML entities are decoded before stripping punctuation.

    Examples:
        >>> slugify("Getting Started")
        'getting-started'
        >>> slugify("Q&amp;A")
        'qa'
        >>> slugify("Café")
        'café'
    """
    if not text:
        return ""

    text = html_module.unescape(text).lower().strip()
    text = _NON_WORD.sub("", text)
    text = _SEPARATORS.sub(separator, text)
    return text.strip(separator)


def escape_html(text: str) -> str:
    """Escape HTML special characters for safe use in attribute values.

    Examples:
        >>> escape_html('say "hi" & <bye>')
        'say &quot;hi&quot; &amp; &lt;bye&gt;'
    """
    if not text:
        return ""

    escaped = html_module.escape(text, quote=True)
    return escaped.replace("'", "&#x27;")
