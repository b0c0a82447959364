"""Expression parsing for the wafview parser.

Directive arguments and interpolation bodies are Python source. They are
parsed with :func:`ast.parse` and checked for constructs that have no
place in a template expression.
"""

from __future__ import annotations

import ast
import re
from typing import TYPE_CHECKING

from wafview._types import Token, TokenType
from wafview.environment.exceptions import ErrorCode
from wafview.nodes import Expr

if TYPE_CHECKING:
    from wafview.environment.exceptions import TemplateSyntaxError

# Last " as " in a loop header: ``items as item``
_AS_SPLIT_RE = re.compile(r"^(?P<iter>.+)\s+as\s+(?P<target>[^\s].*)$", re.DOTALL)

_FORBIDDEN_NODES: dict[type[ast.AST], str] = {
    ast.NamedExpr: "':='",
    ast.Await: "'await'",
    ast.Yield: "'yield'",
    ast.YieldFrom: "'yield from'",
}


class ExpressionParsingMixin:
    """Mixin turning directive argument text into :class:`Expr` nodes.

    Host attributes (from Parser.__init__): ``_name``, ``_filename``, ``_source``.
    """

    if TYPE_CHECKING:

        def _error(
            self,
            message: str,
            token: Token | None = None,
            suggestion: str | None = None,
            code: ErrorCode = ErrorCode.UNEXPECTED_DIRECTIVE,
        ) -> TemplateSyntaxError: ...

    def _validate_expression(self, tree: ast.AST, text: str, token: Token) -> None:
        """Reject dunder attribute access, walrus, await and yield."""
        for node in ast.walk(tree):
            label = _FORBIDDEN_NODES.get(type(node))
            if label is not None:
                raise self._error(
                    f"{label} is not allowed in template expressions: {text.strip()!r}",
                    token,
                    code=ErrorCode.INVALID_EXPRESSION,
                )
            if isinstance(node, ast.Attribute) and node.attr.startswith("__"):
                raise self._error(
                    f"Access to attribute '{node.attr}' is not allowed",
                    token,
                    code=ErrorCode.INVALID_EXPRESSION,
                )

    def _parse_expression(self, text: str | None, token: Token) -> Expr:
        """Parse a single Python expression."""
        if text is None or not text.strip():
            raise self._error(
                f"Expected an expression for @{token.value}"
                if token.type is TokenType.DIRECTIVE
                else "Empty expression",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            )
        try:
            tree = ast.parse(f"({text}\n)", mode="eval").body
        except SyntaxError as e:
            raise self._error(
                f"Invalid expression {text.strip()!r}: {e.msg}",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            ) from None
        self._validate_expression(tree, text, token)
        return Expr(token.lineno, token.col_offset, text.strip(), tree)

    def _parse_call_args(self, token: Token, min_args: int, max_args: int) -> list[Expr]:
        """Parse ``@keyword(a, b)`` arguments as a Python call's positional arguments."""
        text = token.args or ""
        wrapped = f"_({text}\n)"
        try:
            call = ast.parse(wrapped, mode="eval").body
        except SyntaxError as e:
            raise self._error(
                f"Invalid arguments for @{token.value}: {e.msg}",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            ) from None
        assert isinstance(call, ast.Call)
        if call.keywords or any(isinstance(a, ast.Starred) for a in call.args):
            raise self._error(
                f"@{token.value} takes positional arguments only",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            )
        count = len(call.args)
        if not min_args <= count <= max_args:
            expected = str(min_args) if min_args == max_args else f"{min_args} to {max_args}"
            raise self._error(
                f"@{token.value} takes {expected} argument(s), got {count}",
                token,
                code=ErrorCode.INVALID_EXPRESSION,
            )
        exprs = []
        for arg in call.args:
            segment = ast.get_source_segment(wrapped, arg) or ""
            self._validate_expression(arg, segment, token)
            exprs.append(Expr(token.lineno, token.col_offset, segment, arg))
        return exprs

    def _string_literal(self, expr: Expr, token: Token, what: str) -> str:
        """Return the value of a string-literal argument."""
        if not (isinstance(expr.tree, ast.Constant) and isinstance(expr.tree.value, str)):
            raise self._error(
                f"{what} must be a string literal, got {expr.source!r}",
                token,
                suggestion=f"Use quotes: @{token.value}('name')",
                code=ErrorCode.INVALID_EXPRESSION,
            )
        return expr.tree.value

    def _parse_loop_header(self, token: Token) -> tuple[Expr, Expr]:
        """Parse ``target in iterable`` or ``iterable as target``.

        Returns:
            (target, iterable)
        """
        header = (token.args or "").strip()
        if not header:
            raise self._error(
                f"@{token.value} requires a loop header",
                token,
                suggestion=f"@{token.value}(item in items) or @{token.value}(items as item)",
                code=ErrorCode.INVALID_EXPRESSION,
            )

        loop = self._try_parse_for(header)
        if loop is not None:
            stmt, text = loop
            iter_source = ast.get_source_segment(text, stmt.iter) or ""
            target_source = ast.get_source_segment(text, stmt.target) or ""
        else:
            match = _AS_SPLIT_RE.match(header)
            parsed = self._try_parse_for(f"{match['target']} in _") if match else None
            if match is None or parsed is None:
                raise self._error(
                    f"Invalid loop header {header!r}",
                    token,
                    suggestion=f"@{token.value}(item in items) or @{token.value}(items as item)",
                    code=ErrorCode.INVALID_EXPRESSION,
                )
            stmt, text = parsed
            target_source = ast.get_source_segment(text, stmt.target) or ""
            iter_source = match["iter"]

        self._validate_target(stmt.target, token)
        target = Expr(token.lineno, token.col_offset, target_source, stmt.target)
        iterable = self._parse_expression(iter_source, token)
        return target, iterable

    @staticmethod
    def _try_parse_for(header: str) -> tuple[ast.For, str] | None:
        text = f"for {' '.join(header.splitlines())}:\n    pass"
        try:
            module = ast.parse(text)
        except SyntaxError:
            return None
        stmt = module.body[0]
        if not isinstance(stmt, ast.For):
            return None
        return stmt, text

    def _validate_target(self, target: ast.expr, token: Token) -> None:
        stack = [target]
        while stack:
            node = stack.pop()
            if isinstance(node, (ast.Tuple, ast.List)):
                stack.extend(node.elts)
            elif not isinstance(node, ast.Name):
                raise self._error(
                    "Loop targets must be names or tuples of names",
                    token,
                    code=ErrorCode.INVALID_EXPRESSION,
                )
