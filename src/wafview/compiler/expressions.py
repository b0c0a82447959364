"""Expression compilation for the wafview compiler.

Template expressions arrive as parsed Python trees. Compiling one means
rewriting every name so the generated code never touches a Python global
the template did not ask for:

    ``user``              → ``_lookup(ctx, 'user')``
    ``user.name``         → ``_getattr(_lookup(ctx, 'user'), 'name')``
    loop variable ``item`` → ``_l3_item`` (a local of the render function)
    ``[x for x in xs]``   → ``[_l_x for _l_x in _lookup(ctx, 'xs')]``

Names bound inside the expression (comprehension targets, lambda
parameters) get the ``_l_`` prefix; loop variables of enclosing
@foreach/@for blocks get a per-loop ``_l<N>_`` prefix. Neither can
collide with the helpers the generated code relies on.

"""

from __future__ import annotations

import ast
import copy
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wafview.nodes import Expr


def _comprehension_local(name: str) -> str:
    return f"_l_{name}"


def _target_names(target: ast.expr) -> Iterator[str]:
    """Names bound by an assignment target."""
    for node in ast.walk(target):
        if isinstance(node, ast.Name):
            yield node.id


class _ExpressionRewriter(ast.NodeTransformer):
    """Rewrite one expression tree in place for the render namespace."""

    def __init__(self, locals_: dict[str, str]):
        # template name → Python local bound by an enclosing loop
        self._locals = locals_
        # names bound by enclosing comprehensions/lambdas, innermost last
        self._scopes: list[set[str]] = []

    @contextmanager
    def _scope(self, names: set[str]) -> Iterator[None]:
        self._scopes.append(names)
        try:
            yield
        finally:
            self._scopes.pop()

    def _is_expression_local(self, name: str) -> bool:
        return any(name in scope for scope in self._scopes)

    def visit_Name(self, node: ast.Name) -> ast.expr:
        if self._is_expression_local(node.id):
            return ast.copy_location(
                ast.Name(id=_comprehension_local(node.id), ctx=node.ctx), node
            )
        if isinstance(node.ctx, ast.Load):
            local = self._locals.get(node.id)
            if local is not None:
                return ast.copy_location(ast.Name(id=local, ctx=ast.Load()), node)
            return ast.copy_location(
                ast.Call(
                    func=ast.Name(id="_lookup", ctx=ast.Load()),
                    args=[ast.Name(id="ctx", ctx=ast.Load()), ast.Constant(value=node.id)],
                    keywords=[],
                ),
                node,
            )
        return node

    def visit_Attribute(self, node: ast.Attribute) -> ast.expr:
        value = self.visit(node.value)
        if not isinstance(node.ctx, ast.Load):
            node.value = value
            return node
        return ast.copy_location(
            ast.Call(
                func=ast.Name(id="_getattr", ctx=ast.Load()),
                args=[value, ast.Constant(value=node.attr)],
                keywords=[],
            ),
            node,
        )

    def _visit_generators(self, generators: list[ast.comprehension]) -> set[str]:
        bound: set[str] = set()
        for index, generator in enumerate(generators):
            if index == 0:
                # The first iterable is evaluated in the enclosing scope.
                generator.iter = self.visit(generator.iter)
            else:
                with self._scope(set(bound)):
                    generator.iter = self.visit(generator.iter)
            bound.update(_target_names(generator.target))
            with self._scope(set(bound)):
                generator.target = self.visit(generator.target)
                generator.ifs = [self.visit(test) for test in generator.ifs]
        return bound

    def visit_ListComp(self, node: ast.ListComp) -> ast.expr:
        with self._scope(self._visit_generators(node.generators)):
            node.elt = self.visit(node.elt)
        return node

    visit_SetComp = visit_ListComp
    visit_GeneratorExp = visit_ListComp

    def visit_DictComp(self, node: ast.DictComp) -> ast.expr:
        with self._scope(self._visit_generators(node.generators)):
            node.key = self.visit(node.key)
            node.value = self.visit(node.value)
        return node

    def visit_Lambda(self, node: ast.Lambda) -> ast.expr:
        args = node.args
        args.defaults = [self.visit(d) for d in args.defaults]
        args.kw_defaults = [self.visit(d) if d is not None else None for d in args.kw_defaults]
        params = [*args.posonlyargs, *args.args, *args.kwonlyargs]
        if args.vararg:
            params.append(args.vararg)
        if args.kwarg:
            params.append(args.kwarg)
        names = {param.arg for param in params}
        for param in params:
            param.arg = _comprehension_local(param.arg)
            param.annotation = None
        with self._scope(names):
            node.body = self.visit(node.body)
        return node


class ExpressionCompilationMixin:
    """Mixin for compiling :class:`~wafview.nodes.Expr` trees.

    Host attributes:
        _locals: stack of {template name: Python local} frames pushed by loops
    """

    if TYPE_CHECKING:
        _locals: list[dict[str, str]]

    def _visible_locals(self) -> dict[str, str]:
        merged: dict[str, str] = {}
        for frame in self._locals:
            merged.update(frame)
        return merged

    def _compile_expr(self, node: Expr) -> ast.expr:
        """Return a rewritten copy of ``node.tree``; the parsed tree is never mutated."""
        tree = copy.deepcopy(node.tree)
        return _ExpressionRewriter(self._visible_locals()).visit(tree)

    def _compile_target(self, node: Expr, frame: dict[str, str]) -> ast.expr:
        """Compile a loop target, renaming each bound name to its local in ``frame``."""
        tree = copy.deepcopy(node.tree)
        for child in ast.walk(tree):
            if isinstance(child, ast.Name):
                child.id = frame[child.id]
                child.ctx = ast.Store()
            elif isinstance(child, (ast.Tuple, ast.List)):
                child.ctx = ast.Store()
        return tree
