"""Control flow block parsing: @if, @foreach, @for, @while."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wafview._types import Token, TokenType
from wafview.nodes import Expr, For, If, Node, While
from wafview.parser.blocks.core import BlockStackMixin


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing control flow blocks.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body: method
        - _parse_expression: method
        - _parse_loop_header: method
    """

    if TYPE_CHECKING:

        def _parse_body(self, end_keywords: frozenset[str] = frozenset()) -> list[Node]: ...
        def _parse_expression(self, text: str | None, token: Token) -> Expr: ...
        def _parse_loop_header(self, token: Token) -> tuple[Expr, Expr]: ...

    def _parse_if(self) -> If:
        """Parse @if(cond) ... [@elseif(cond) ...]* [@else ...] @endif."""
        start = self._advance()
        self._push_block("if", start)
        test = self._parse_expression(start.args, start)
        body = self._parse_body(frozenset({"elseif", "else", "endif"}))

        elif_: list[tuple[Expr, tuple[Node, ...]]] = []
        else_: list[Node] = []
        while self._current.type is TokenType.DIRECTIVE and self._current.value == "elseif":
            token = self._advance()
            elif_test = self._parse_expression(token.args, token)
            elif_body = self._parse_body(frozenset({"elseif", "else", "endif"}))
            elif_.append((elif_test, tuple(elif_body)))

        if self._current.type is TokenType.DIRECTIVE and self._current.value == "else":
            self._advance()
            else_ = self._parse_body(frozenset({"endif"}))

        self._consume_end_tag("if", start)
        return If(
            lineno=start.lineno,
            col_offset=start.col_offset,
            test=test,
            body=tuple(body),
            elif_=tuple(elif_),
            else_=tuple(else_),
        )

    def _parse_loop(self) -> For:
        """Parse @foreach(...) ... @endforeach and @for(...) ... @endfor."""
        start = self._advance()
        keyword = start.value
        self._push_block(keyword, start)
        target, iterable = self._parse_loop_header(start)
        body = self._parse_body(frozenset({f"end{keyword}"}))
        self._consume_end_tag(keyword, start)
        return For(
            lineno=start.lineno,
            col_offset=start.col_offset,
            target=target,
            iter=iterable,
            body=tuple(body),
            keyword=keyword,
        )

    def _parse_while(self) -> While:
        """Parse @while(cond) ... @endwhile."""
        start = self._advance()
        self._push_block("while", start)
        test = self._parse_expression(start.args, start)
        body = self._parse_body(frozenset({"endwhile"}))
        self._consume_end_tag("while", start)
        return While(
            lineno=start.lineno,
            col_offset=start.col_offset,
            test=test,
            body=tuple(body),
        )
