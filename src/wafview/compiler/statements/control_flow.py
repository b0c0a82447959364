"""Control flow compilation: @if, @foreach/@for, @while."""

from __future__ import annotations

import ast
from collections.abc import Sequence
from typing import TYPE_CHECKING

from wafview.compiler.expressions import _target_names

if TYPE_CHECKING:
    from wafview.nodes import Expr, For, If, Node, While


def _references_name(nodes: object, name: str) -> bool:
    """True if any Expr under ``nodes`` loads ``name``."""
    if isinstance(nodes, (list, tuple)):
        return any(_references_name(n, name) for n in nodes)
    if isinstance(nodes, ast.AST):
        return any(
            isinstance(child, ast.Name) and child.id == name for child in ast.walk(nodes)
        )
    if not hasattr(nodes, "__dataclass_fields__"):
        return False
    return any(
        _references_name(getattr(nodes, field_name), name)
        for field_name in nodes.__dataclass_fields__
        if field_name not in ("lineno", "col_offset")
    )


class ControlFlowMixin:
    """Mixin for compiling control flow statements."""

    if TYPE_CHECKING:
        _locals: list[dict[str, str]]
        _block_counter: int

        def _compile_expr(self, node: Expr) -> ast.expr: ...
        def _compile_target(self, node: Expr, frame: dict[str, str]) -> ast.expr: ...
        def _compile_node(self, node: Node) -> list[ast.stmt]: ...
        def _make_line_marker(self, lineno: int) -> ast.stmt: ...

    def _compile_body(self, nodes: Sequence[Node]) -> list[ast.stmt]:
        stmts: list[ast.stmt] = []
        for child in nodes:
            stmts.extend(self._compile_node(child))
        return stmts or [ast.Pass()]

    def _compile_if(self, node: If) -> list[ast.stmt]:
        """Compile @if/@elseif/@else.

        Each @elseif becomes a nested ``else: if`` so its line marker runs
        before its test is evaluated.
        """
        orelse: list[ast.stmt] = self._compile_body(node.else_) if node.else_ else []

        for elif_test, elif_body in reversed(node.elif_):
            orelse = [
                self._make_line_marker(elif_test.lineno),
                ast.If(
                    test=self._compile_expr(elif_test),
                    body=self._compile_body(elif_body),
                    orelse=orelse,
                ),
            ]

        return [
            ast.If(
                test=self._compile_expr(node.test),
                body=self._compile_body(node.body),
                orelse=orelse,
            )
        ]

    def _compile_for(self, node: For) -> list[ast.stmt]:
        """Compile @foreach/@for with an optional LoopContext.

        When the body references ``loop``:
            _loop_N = _LoopContext(_iterable(iterable), <enclosing loop or None>)
            for _lN_item in _loop_N:
                ... body ...

        Otherwise the LoopContext is skipped:
            for _lN_item in _iterable(iterable):
                ... body ...
        """
        iter_expr = ast.Call(
            func=ast.Name(id="_iterable", ctx=ast.Load()),
            args=[self._compile_expr(node.iter)],
            keywords=[],
        )

        self._block_counter += 1
        counter = self._block_counter
        frame: dict[str, str] = {}
        stmts: list[ast.stmt] = []

        if _references_name(node.body, "loop"):
            parent = self._visible_loop_context()
            loop_var = f"_loop_{counter}"
            stmts.append(
                ast.Assign(
                    targets=[ast.Name(id=loop_var, ctx=ast.Store())],
                    value=ast.Call(
                        func=ast.Name(id="_LoopContext", ctx=ast.Load()),
                        args=[
                            iter_expr,
                            ast.Name(id=parent, ctx=ast.Load())
                            if parent
                            else ast.Constant(value=None),
                        ],
                        keywords=[],
                    ),
                )
            )
            frame["loop"] = loop_var
            iter_expr = ast.Name(id=loop_var, ctx=ast.Load())

        for name in _target_names(node.target.tree):
            frame[name] = f"_l{counter}_{name}"
        target = self._compile_target(node.target, frame)

        self._locals.append(frame)
        try:
            body = self._compile_body(node.body)
        finally:
            self._locals.pop()

        stmts.append(ast.For(target=target, iter=iter_expr, body=body, orelse=[]))
        return stmts

    def _visible_loop_context(self) -> str | None:
        for frame in reversed(self._locals):
            local = frame.get("loop")
            if local is not None and local.startswith("_loop_"):
                return local
        return None

    def _compile_while(self, node: While) -> list[ast.stmt]:
        """Compile @while(cond) ... @endwhile.

        The line marker is re-emitted at the end of each iteration so a
        failing re-test is reported at the @while line.
        """
        body = self._compile_body(node.body)
        body.append(self._make_line_marker(node.lineno))
        return [ast.While(test=self._compile_expr(node.test), body=body, orelse=[])]
