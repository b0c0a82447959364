"""Parser for wafview templates.

Tokens → node tree. See :class:`wafview.parser.core.Parser`.
"""

from wafview.parser.core import Parser

__all__ = ["Parser"]
