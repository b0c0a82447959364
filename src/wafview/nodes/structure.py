"""Template structure nodes (inheritance and inclusion)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from wafview.nodes.base import Node
from wafview.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node of a template.

    Attributes:
        body: Top-level nodes. For an extending template this holds only
            its Section nodes.
        extends: Parent template identifier, or None for a base template.
    """

    body: Sequence[Node]
    extends: Extends | None = None


@dataclass(frozen=True, slots=True)
class Extends(Node):
    """Layout inheritance: @extends('layouts.app')"""

    template: str


@dataclass(frozen=True, slots=True)
class Section(Node):
    """Named section: @section('name') ... @endsection or @section('name', expr)"""

    name: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Yield(Node):
    """Section emission point: @yield('name'[, 'default'])"""

    name: str
    default: str = ""


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Partial inclusion: @include('name'[, data])"""

    template: str
    data: Expr | None = None
