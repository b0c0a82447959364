"""Token types produced by the wafview lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens emitted by :func:`wafview.lexer.tokenize`.

    DATA:       Literal template text
    OUTPUT:     ``{{ expr }}`` (escaped interpolation)
    RAW_OUTPUT: ``{!! expr !!}`` (unescaped interpolation)
    DIRECTIVE:  ``@keyword`` or ``@keyword(args)``
    EOF:        End of input
    """

    DATA = "data"
    OUTPUT = "output"
    RAW_OUTPUT = "raw_output"
    DIRECTIVE = "directive"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    Attributes:
        type: Token kind
        value: Literal text (DATA), expression source (OUTPUT/RAW_OUTPUT)
            or lowercased keyword (DIRECTIVE)
        lineno: 1-based line of the token start
        col_offset: 0-based column of the token start
        args: Raw text between a directive's parentheses, or None when
            the directive was written without an argument list
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int
    args: str | None = None

    def __repr__(self) -> str:
        if self.type is TokenType.DIRECTIVE:
            suffix = f"({self.args})" if self.args is not None else ""
            return f"Token(@{self.value}{suffix}, {self.lineno}:{self.col_offset})"
        return f"Token({self.type.value}, {self.value!r}, {self.lineno}:{self.col_offset})"
