"""Recursive-descent parser for wafview templates.

Consumes the token stream from :mod:`wafview.lexer` and builds an
immutable node tree. Same-kind directives nest freely; every opener must
be closed by its own end keyword.

For a template that ``@extends`` a layout only the sections survive:
whitespace between them is dropped silently and any other top-level
content is dropped with an :class:`OrphanContentWarning`.

"""

from __future__ import annotations

import warnings
from collections.abc import Sequence

from wafview._types import Token, TokenType
from wafview.environment.exceptions import (
    ErrorCode,
    OrphanContentWarning,
    TemplateSyntaxError,
)
from wafview.nodes import Data, Extends, Node, Output, Section, Template
from wafview.parser.blocks import (
    ControlFlowBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
)
from wafview.parser.expressions import ExpressionParsingMixin


class Parser(
    ControlFlowBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
    ExpressionParsingMixin,
):
    """Build a :class:`~wafview.nodes.Template` from tokens.

    Example:
        >>> from wafview.lexer import tokenize
        >>> source = "@if(user){{ user.name }}@endif"
        >>> tree = Parser(tokenize(source), "greeting", None, source).parse()
        >>> type(tree.body[0]).__name__
        'If'
    """

    _DIRECTIVE_PARSERS = {
        "if": "_parse_if",
        "foreach": "_parse_loop",
        "for": "_parse_loop",
        "while": "_parse_while",
        "section": "_parse_section",
        "yield": "_parse_yield",
        "include": "_parse_include",
    }

    def __init__(
        self,
        tokens: Sequence[Token],
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._tokens = tokens
        self._pos = 0
        self._name = name
        self._filename = filename
        self._source = source
        self._block_stack: list[tuple[str, int, int]] = []
        self._extends: Extends | None = None

    # -- token navigation --------------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
        code: ErrorCode = ErrorCode.UNEXPECTED_DIRECTIVE,
    ) -> TemplateSyntaxError:
        token = token or self._current
        if suggestion:
            message = f"{message}\n  Hint: {suggestion}"
        return TemplateSyntaxError(
            message,
            lineno=token.lineno,
            name=self._name,
            filename=self._filename,
            source=self._source,
            col_offset=token.col_offset,
            code=code,
        )

    # -- parsing -------------------------------------------------------------

    def parse(self) -> Template:
        body = self._parse_body()

        if self._extends is None:
            for node in body:
                if isinstance(node, Section):
                    raise self._error(
                        f"@section('{node.name}') is only allowed in a template that uses @extends",
                        Token(TokenType.DIRECTIVE, "section", node.lineno, node.col_offset),
                        suggestion="Use @include for reusable fragments",
                        code=ErrorCode.INVALID_SECTION,
                    )
            return Template(lineno=1, col_offset=0, body=tuple(body))

        return Template(
            lineno=1,
            col_offset=0,
            body=self._collect_sections(body),
            extends=self._extends,
        )

    def _collect_sections(self, body: list[Node]) -> tuple[Section, ...]:
        sections: dict[str, Section] = {}
        for node in body:
            if isinstance(node, Section):
                sections[node.name] = node
            elif isinstance(node, Data) and not node.value.strip():
                continue
            else:
                warnings.warn(
                    f"{self._name or '<string>'}:{node.lineno}: content outside @section "
                    f"in a template that extends '{self._extends.template}' is ignored",
                    OrphanContentWarning,
                )
        return tuple(sections.values())

    def _parse_body(self, end_keywords: frozenset[str] = frozenset()) -> list[Node]:
        """Parse nodes until EOF or a directive in ``end_keywords``.

        The terminating token is left for the caller to consume.
        """
        nodes: list[Node] = []
        while True:
            token = self._current
            if token.type is TokenType.EOF:
                return nodes
            if token.type is TokenType.DATA:
                self._advance()
                nodes.append(Data(lineno=token.lineno, col_offset=token.col_offset, value=token.value))
            elif token.type in (TokenType.OUTPUT, TokenType.RAW_OUTPUT):
                nodes.append(self._parse_output())
            elif token.value in end_keywords:
                return nodes
            elif token.value == "extends":
                self._parse_extends()
            else:
                method = self._DIRECTIVE_PARSERS.get(token.value)
                if method is None:
                    raise self._unexpected_directive(token)
                nodes.append(getattr(self, method)())

    def _parse_output(self) -> Output:
        token = self._advance()
        expr = self._parse_expression(token.value, token)
        return Output(
            lineno=token.lineno,
            col_offset=token.col_offset,
            expr=expr,
            escape=token.type is TokenType.OUTPUT,
        )
