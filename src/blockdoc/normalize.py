"""Text normalization applied before block splitting.

Single-line display math (``$$E = mc^2$$`` alone on a line) is rewritten to
the fenced multi-line form so the splitter sees one self-contained math
block and renderers receive it as display math.

Line coordinates of every later stage refer to the normalized text.

"""

import re

_SINGLE_LINE_MATH = re.compile(
    r"^[ \t]*(?<!\$\$)\$\$(.+?)\$\$(?!\$\$)[ \t]*$",
    re.MULTILINE,
)


def normalize_math_blocks(text: str) -> str:
    """Expand single-line ``$$...$$`` into multi-line display math.

    Example:
        >>> normalize_math_blocks("Intro\\n$$x^2$$\\nOutro")
        'Intro\\n\\n$$\\nx^2\\n$$\\n\\nOutro'

    """
    return _SINGLE_LINE_MATH.sub(_expand_math, text)


def _expand_math(match: re.Match[str]) -> str:
    return f"\n$$\n{match.group(1).strip()}\n$$\n"


def normalize(text: str, *, math: bool = True) -> str:
    """Apply every enabled normalization step."""
    if math:
        text = normalize_math_blocks(text)
    return text
