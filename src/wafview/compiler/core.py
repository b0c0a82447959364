"""wafview Compiler: node tree → Python ``ast.Module`` → code object.

Design Principles:
1. **AST-to-AST**: Generate `ast.Module`, never source strings
2. **StringBuilder**: Output via `buf.append()`, joined once at the end
3. **Local caching**: `_escape`, `_str` and `buf.append` bound to locals
4. **O(1) dispatch**: Dict-based node type → handler lookup

Layout Inheritance:
A template with `@extends` compiles to one function per section plus a
`render` that registers them and hands off to the layout:

    ```python
    def _section_0(ctx, _sections):
        _e = _escape
        _s = _str
        buf = []
        _append = buf.append
        # section body...
        return ''.join(buf)

    def render(ctx, _sections=None):
        if _sections is None:
            _sections = {}
        _sections.setdefault('content', _bind_section('content', _section_0))
        _get_render_ctx().line = 1
        return _extends('layouts.app', ctx, _sections)
    ```

`setdefault` lets the template furthest down the chain win: it registers
first, and every layout above it only fills the gaps.

"""

from __future__ import annotations

import ast
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from wafview.compiler.expressions import ExpressionCompilationMixin
from wafview.compiler.statements import StatementCompilationMixin

if TYPE_CHECKING:
    import types

    from wafview.nodes import Node, Section
    from wafview.nodes import Template as TemplateNode


def _name(id_: str) -> ast.Name:
    return ast.Name(id=id_, ctx=ast.Load())


def _call(func: str, *args: ast.expr) -> ast.Call:
    return ast.Call(func=_name(func), args=list(args), keywords=[])


def _assign(target: str, value: ast.expr) -> ast.Assign:
    return ast.Assign(targets=[ast.Name(id=target, ctx=ast.Store())], value=value)


class Compiler(ExpressionCompilationMixin, StatementCompilationMixin):
    """Compile a template tree to a code object.

    The code defines ``render(ctx, _sections=None)`` and, for extending
    templates, one ``_section_N(ctx, _sections)`` per section. It expects
    the namespace built by :class:`wafview.template.Template`.

    Line Tracking:
        Nodes that evaluate expressions are preceded by
        ``_get_render_ctx().line = N`` so runtime errors can name the
        template line that failed.

    Example:
            >>> from wafview.lexer import tokenize
            >>> from wafview.parser import Parser
            >>> tree = Parser(tokenize("Hello, {{ name }}!")).parse()
            >>> code = Compiler().compile(tree, name="greeting")
    """

    __slots__ = ("_block_counter", "_filename", "_locals", "_name", "_node_dispatch")

    # Node types that can raise at render time
    _LINE_TRACKED_NODES = frozenset({"Output", "If", "For", "While", "Include", "Yield"})

    def __init__(self) -> None:
        self._name: str | None = None
        self._filename: str | None = None
        # Loop variable frames: template name → Python local
        self._locals: list[dict[str, str]] = []
        # Counter for unique local names in nested loops
        self._block_counter = 0
        self._node_dispatch: dict[str, Callable[[Node], list[ast.stmt]]] = {
            "Data": self._compile_data,
            "Output": self._compile_output,
            "If": self._compile_if,
            "For": self._compile_for,
            "While": self._compile_while,
            "Yield": self._compile_yield,
            "Include": self._compile_include,
        }

    def compile(
        self,
        node: TemplateNode,
        name: str | None = None,
        filename: str | None = None,
    ) -> types.CodeType:
        """Compile a Template node to a code object ready for exec()."""
        self._name = name
        self._filename = filename
        self._locals = []
        self._block_counter = 0

        module = self._compile_template(node)
        ast.fix_missing_locations(module)
        return compile(module, filename or name or "<template>", "exec")

    def _compile_template(self, node: TemplateNode) -> ast.Module:
        body: list[ast.stmt] = []
        if node.extends is None:
            body.append(self._make_render_function(self._make_output_body(node.body)))
            return ast.Module(body=body, type_ignores=[])

        registrations: list[ast.stmt] = []
        for index, section in enumerate(node.body):
            func_name = f"_section_{index}"
            body.append(self._make_section_function(func_name, section))
            registrations.append(self._register_section(section, func_name))

        render_body = [
            *registrations,
            self._make_line_marker(node.extends.lineno),
            ast.Return(
                value=_call(
                    "_extends",
                    ast.Constant(value=node.extends.template),
                    _name("ctx"),
                    _name("_sections"),
                )
            ),
        ]
        body.append(self._make_render_function(render_body))
        return ast.Module(body=body, type_ignores=[])

    def _register_section(self, section: Section, func_name: str) -> ast.stmt:
        """_sections.setdefault('name', _bind_section('name', _section_N))"""
        return ast.Expr(
            value=ast.Call(
                func=ast.Attribute(value=_name("_sections"), attr="setdefault", ctx=ast.Load()),
                args=[
                    ast.Constant(value=section.name),
                    _call("_bind_section", ast.Constant(value=section.name), _name(func_name)),
                ],
                keywords=[],
            )
        )

    def _make_output_body(self, nodes: Sequence[Node]) -> list[ast.stmt]:
        """Buffer setup, compiled nodes, ``return ''.join(buf)``."""
        body: list[ast.stmt] = [
            _assign("_e", _name("_escape")),
            _assign("_s", _name("_str")),
            _assign("buf", ast.List(elts=[], ctx=ast.Load())),
            _assign("_append", ast.Attribute(value=_name("buf"), attr="append", ctx=ast.Load())),
        ]
        for child in nodes:
            body.extend(self._compile_node(child))
        body.append(
            ast.Return(
                value=ast.Call(
                    func=ast.Attribute(value=ast.Constant(value=""), attr="join", ctx=ast.Load()),
                    args=[_name("buf")],
                    keywords=[],
                )
            )
        )
        return body

    def _make_section_function(self, func_name: str, section: Section) -> ast.FunctionDef:
        """_section_N(ctx, _sections) -> str"""
        return ast.FunctionDef(
            name=func_name,
            args=ast.arguments(
                posonlyargs=[],
                args=[ast.arg(arg="ctx"), ast.arg(arg="_sections")],
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[],
            ),
            body=self._make_output_body(section.body),
            decorator_list=[],
            returns=None,
        )

    def _make_render_function(self, body: list[ast.stmt]) -> ast.FunctionDef:
        """render(ctx, _sections=None) -> str"""
        prelude = ast.If(
            test=ast.Compare(
                left=_name("_sections"),
                ops=[ast.Is()],
                comparators=[ast.Constant(value=None)],
            ),
            body=[_assign("_sections", ast.Dict(keys=[], values=[]))],
            orelse=[],
        )
        return ast.FunctionDef(
            name="render",
            args=ast.arguments(
                posonlyargs=[],
                args=[ast.arg(arg="ctx"), ast.arg(arg="_sections")],
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[ast.Constant(value=None)],
            ),
            body=[prelude, *body],
            decorator_list=[],
            returns=None,
        )

    def _emit_output(self, value_expr: ast.expr) -> ast.stmt:
        """_append(value)"""
        return ast.Expr(value=_call("_append", value_expr))

    def _make_line_marker(self, lineno: int) -> ast.stmt:
        """_get_render_ctx().line = lineno"""
        return ast.Assign(
            targets=[
                ast.Attribute(value=_call("_get_render_ctx"), attr="line", ctx=ast.Store())
            ],
            value=ast.Constant(value=lineno),
        )

    def _compile_node(self, node: Node) -> list[ast.stmt]:
        node_type = type(node).__name__
        stmts: list[ast.stmt] = []
        if node_type in self._LINE_TRACKED_NODES:
            stmts.append(self._make_line_marker(node.lineno))
        handler = self._node_dispatch.get(node_type)
        if handler is None:
            raise TypeError(f"Cannot compile node type {node_type}")
        stmts.extend(handler(node))
        return stmts
