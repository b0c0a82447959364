"""Control flow nodes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from wafview.nodes.base import Node
from wafview.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: @if(cond) ... @elseif(cond) ... @else ... @endif"""

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class For(Node):
    """Loop: @foreach(item in items) ... @endforeach or @for(...) ... @endfor

    ``keyword`` records which opener was used so the matching closer
    can be enforced.
    """

    target: Expr
    iter: Expr
    body: Sequence[Node]
    keyword: str = "foreach"


@dataclass(frozen=True, slots=True)
class While(Node):
    """While loop: @while(cond) ... @endwhile"""

    test: Expr
    body: Sequence[Node]
