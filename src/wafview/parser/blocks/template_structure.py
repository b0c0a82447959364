"""Template structure parsing: @extends, @section, @yield, @include."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wafview._types import Token
from wafview.environment.exceptions import ErrorCode
from wafview.nodes import Expr, Extends, Include, Node, Output, Section, Yield
from wafview.parser.blocks.core import BlockStackMixin


class TemplateStructureBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing template structure directives.

    Required Host Attributes:
        - All from BlockStackMixin
        - _extends: Extends | None
        - _parse_body, _parse_call_args, _string_literal: methods
    """

    if TYPE_CHECKING:
        _extends: Extends | None

        def _parse_body(self, end_keywords: frozenset[str] = frozenset()) -> list[Node]: ...
        def _parse_call_args(
            self, token: Token, min_args: int, max_args: int
        ) -> list[Expr]: ...
        def _string_literal(self, expr: Expr, token: Token, what: str) -> str: ...

    def _parse_extends(self) -> None:
        """Parse @extends('layout'). Recorded on the parser, not emitted as a body node."""
        start = self._advance()
        if self._block_stack:
            opener, lineno, _ = self._block_stack[-1]
            raise self._error(
                f"@extends must be at the top level of a template, "
                f"not inside @{opener} (line {lineno})",
                start,
                code=ErrorCode.INVALID_EXTENDS,
            )
        if self._extends is not None:
            raise self._error(
                f"Template already extends '{self._extends.template}' "
                f"(line {self._extends.lineno})",
                start,
                suggestion="A template can extend only one layout",
                code=ErrorCode.INVALID_EXTENDS,
            )
        (arg,) = self._parse_call_args(start, 1, 1)
        self._extends = Extends(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=self._string_literal(arg, start, "Layout name"),
        )

    def _parse_section(self) -> Section:
        """Parse @section('name') ... @endsection or inline @section('name', expr)."""
        start = self._advance()
        if self._block_stack:
            opener, lineno, _ = self._block_stack[-1]
            raise self._error(
                f"@section cannot be nested inside @{opener} (line {lineno})",
                start,
                code=ErrorCode.INVALID_SECTION,
            )
        args = self._parse_call_args(start, 1, 2)
        name = self._string_literal(args[0], start, "Section name")

        if len(args) == 2:
            body: tuple[Node, ...] = (
                Output(lineno=start.lineno, col_offset=start.col_offset, expr=args[1]),
            )
        else:
            self._push_block("section", start)
            body = tuple(self._parse_body(frozenset({"endsection"})))
            self._consume_end_tag("section", start)

        return Section(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=name,
            body=body,
        )

    def _parse_yield(self) -> Yield:
        """Parse @yield('name'[, 'default'])."""
        start = self._advance()
        args = self._parse_call_args(start, 1, 2)
        name = self._string_literal(args[0], start, "Section name")
        default = self._string_literal(args[1], start, "@yield default") if len(args) == 2 else ""
        return Yield(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=name,
            default=default,
        )

    def _parse_include(self) -> Include:
        """Parse @include('partial'[, data])."""
        start = self._advance()
        args = self._parse_call_args(start, 1, 2)
        return Include(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=self._string_literal(args[0], start, "Template name"),
            data=args[1] if len(args) == 2 else None,
        )
