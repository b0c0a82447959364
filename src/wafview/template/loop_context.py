"""Loop iteration metadata for ``@foreach`` and ``@for`` blocks."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any


class LoopContext:
    """Iteration state available as ``loop`` inside a loop body.

    Only created when the body actually references ``loop``; the iterable
    is materialized so ``length`` and ``last`` are known up front.

    Properties:
        index / iteration: 1-based position (1, 2, 3, ...)
        index0: 0-based position
        first, last: Boundary flags
        even, odd: Parity of ``index``
        length / count: Number of items
        revindex: Items left including the current one (counts down to 1)
        revindex0 / remaining: Items left after the current one
        previtem, nextitem: Neighbouring items (None at the edges)
        depth: Nesting level, 1 for the outermost loop
        parent: LoopContext of the enclosing loop, or None

    Methods:
        cycle(*values): Return values[index0 % len(values)]

    Example:
            ```
            @foreach(items as item)
              <li class="{{ loop.cycle('odd', 'even') }}">
                {{ loop.index }}/{{ loop.length }}: {{ item }}
                @if(loop.last) (end) @endif
              </li>
            @endforeach
            ```
    """

    __slots__ = ("_index", "_items", "_length", "parent")

    def __init__(self, items: Iterable[Any], parent: LoopContext | None = None) -> None:
        self._items = items if isinstance(items, list) else list(items)
        self._length = len(self._items)
        self._index = 0
        self.parent = parent

    def __iter__(self) -> Iterator[Any]:
        for index, item in enumerate(self._items):
            self._index = index
            yield item

    @property
    def index(self) -> int:
        return self._index + 1

    iteration = index

    @property
    def index0(self) -> int:
        return self._index

    @property
    def first(self) -> bool:
        return self._index == 0

    @property
    def last(self) -> bool:
        return self._index == self._length - 1

    @property
    def even(self) -> bool:
        return self.index % 2 == 0

    @property
    def odd(self) -> bool:
        return self.index % 2 == 1

    @property
    def length(self) -> int:
        return self._length

    count = length

    @property
    def revindex(self) -> int:
        return self._length - self._index

    @property
    def revindex0(self) -> int:
        return self._length - self._index - 1

    remaining = revindex0

    @property
    def previtem(self) -> Any:
        if self._index == 0:
            return None
        return self._items[self._index - 1]

    @property
    def nextitem(self) -> Any:
        if self._index >= self._length - 1:
            return None
        return self._items[self._index + 1]

    @property
    def depth(self) -> int:
        return 1 if self.parent is None else self.parent.depth + 1

    def cycle(self, *values: Any) -> Any:
        if not values:
            return None
        return values[self._index % len(values)]

    def __repr__(self) -> str:
        return f"<LoopContext {self.index}/{self.length}>"
