"""Template structure compilation: @yield and @include.

Sections and @extends are handled by the Compiler core, which turns them
into section functions and the ``_extends`` hand-off in ``render``.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wafview.nodes import Expr, Include, Yield


class TemplateStructureMixin:
    """Mixin for compiling @yield and @include."""

    if TYPE_CHECKING:

        def _compile_expr(self, node: Expr) -> ast.expr: ...
        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_yield(self, node: Yield) -> list[ast.stmt]:
        """_append(_yield(_sections, 'name', ctx, 'default'))"""
        return [
            self._emit_output(
                ast.Call(
                    func=ast.Name(id="_yield", ctx=ast.Load()),
                    args=[
                        ast.Name(id="_sections", ctx=ast.Load()),
                        ast.Constant(value=node.name),
                        ast.Name(id="ctx", ctx=ast.Load()),
                        ast.Constant(value=node.default),
                    ],
                    keywords=[],
                )
            )
        ]

    def _compile_include(self, node: Include) -> list[ast.stmt]:
        """_append(_include('name', data)); data defaults to ``{}``."""
        data = (
            self._compile_expr(node.data)
            if node.data is not None
            else ast.Dict(keys=[], values=[])
        )
        return [
            self._emit_output(
                ast.Call(
                    func=ast.Name(id="_include", ctx=ast.Load()),
                    args=[ast.Constant(value=node.template), data],
                    keywords=[],
                )
            )
        ]
