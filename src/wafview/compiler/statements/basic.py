"""Basic statement compilation: literal text and interpolation."""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wafview.nodes import Data, Expr, Output


class BasicStatementMixin:
    """Mixin for compiling literal text and ``{{ }}`` / ``{!! !!}`` output."""

    if TYPE_CHECKING:

        def _compile_expr(self, node: Expr) -> ast.expr: ...
        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_data(self, node: Data) -> list[ast.stmt]:
        """_append("literal text")"""
        if not node.value:
            return []
        return [self._emit_output(ast.Constant(value=node.value))]

    def _compile_output(self, node: Output) -> list[ast.stmt]:
        """_append(_e(expr)) for {{ }}, _append(_s(expr)) for {!! !!}."""
        return [
            self._emit_output(
                ast.Call(
                    func=ast.Name(id="_e" if node.escape else "_s", ctx=ast.Load()),
                    args=[self._compile_expr(node.expr)],
                    keywords=[],
                )
            )
        ]
