"""Expression nodes.

Expressions are plain Python, parsed with :mod:`ast`. The node keeps the
original text for error messages next to the parsed tree.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

from wafview.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """A Python expression (or assignment target) from the template source."""

    source: str
    tree: ast.expr

    def __str__(self) -> str:
        return self.source
