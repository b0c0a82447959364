"""Output nodes."""

from __future__ import annotations

from dataclasses import dataclass

from wafview.nodes.base import Node
from wafview.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {{ expr }} (escape=True) or {!! expr !!} (escape=False)"""

    expr: Expr
    escape: bool = True


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Literal text between template constructs."""

    value: str
