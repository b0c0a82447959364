"""HTML escaping used by ``{{ }}`` interpolation.

Escaping is a single pass through ``str.translate()`` with a precomputed
table. There is no "safe string" type: every value printed
through ``{{ }}`` is escaped, and ``{!! !!}`` is the only way to emit raw
markup.

Thread-Safety:
The translation table is built once at import time and never mutated.

"""

from __future__ import annotations

from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)

# Characters that force the slow path; anything else is returned as-is.
_ESCAPE_CHARS = frozenset("&<>\"'")


def to_str(value: Any) -> str:
    """Convert a value for output. ``None`` renders as an empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def html_escape(value: Any) -> str:
    """HTML-escape a value for safe output.

    Escapes ``&``, ``<``, ``>``, ``"`` and ``'``. Non-string values are
    converted with :func:`to_str` first.

    Complexity: O(n) single pass.

    Example:
        >>> html_escape("<a href='x'>Tom & Jerry</a>")
        '&lt;a href=&#39;x&#39;&gt;Tom &amp; Jerry&lt;/a&gt;'
    """
    text = to_str(value)
    if _ESCAPE_CHARS.isdisjoint(text):
        return text
    return text.translate(_ESCAPE_TABLE)
