"""Lexer for wafview templates.

A single left-to-right scan that splits template source into DATA,
OUTPUT, RAW_OUTPUT and DIRECTIVE tokens. Closing delimiters are found
with string-literal and bracket awareness, so ``{{ {'a': 1}['a'] }}``
and ``@if(f(")"))`` are tokenized correctly.

Recognized forms:
    ``{{ expr }}``       escaped output
    ``{!! expr !!}``     raw output
    ``{{-- text --}}``   comment, dropped
    ``@keyword(args)``   directive (keyword is case-insensitive)
    ``@keyword``         directive without arguments

An ``@`` followed by a word that is not a directive keyword is literal
text, and so is an ``@`` preceded by a word character (``user@example.com``)
unless it starts a closer such as ``@endif`` or ``@else``, or directly
follows another directive (``@endif@endforeach``).

"""

from __future__ import annotations

import re
from bisect import bisect_right
from collections.abc import Iterator

from wafview._types import Token, TokenType
from wafview.environment.exceptions import ErrorCode, TemplateSyntaxError

# Directives that require a parenthesized argument list.
ARG_KEYWORDS = frozenset(
    {"extends", "section", "yield", "if", "elseif", "foreach", "for", "while", "include"}
)

# Directives written without arguments.
BARE_KEYWORDS = frozenset(
    {"endsection", "else", "endif", "endforeach", "endfor", "endwhile"}
)

KEYWORDS = ARG_KEYWORDS | BARE_KEYWORDS

_GLUED_ALTERNATION = "|".join(sorted(BARE_KEYWORDS | {"elseif"}, key=len, reverse=True))

# A closer or branch glued to text (``Yes@else``, ``</li>x@endforeach``) is still a
# directive unless it looks like an email domain (``a@else.org``).
_START_RE = re.compile(
    r"\{\{--|\{!!|\{\{|(?<!\w)@([A-Za-z_]\w*)"
    rf"|(?<=\w)@((?i:{_GLUED_ALTERNATION}))\b(?![.\-])"
)

# Any keyword directly after another directive (``@endif@if(x)``).
_ADJACENT_RE = re.compile(r"@([A-Za-z_]\w*)")
_HSPACE_RE = re.compile(r"[ \t]*")

_OPEN_BRACKETS = {"(": ")", "[": "]", "{": "}"}
_CLOSE_BRACKETS = frozenset(")]}")


class Lexer:
    """Tokenize one template source.

    Example:
        >>> [t.type.value for t in Lexer("Hi {{ name }}!").tokenize()]
        ['data', 'output', 'data', 'eof']
    """

    __slots__ = ("_filename", "_line_starts", "_name", "_source")

    def __init__(self, source: str, name: str | None = None, filename: str | None = None):
        self._source = source
        self._name = name
        self._filename = filename
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]

    def _position(self, pos: int) -> tuple[int, int]:
        index = bisect_right(self._line_starts, pos) - 1
        return index + 1, pos - self._line_starts[index]

    def _error(self, message: str, pos: int, code: ErrorCode) -> TemplateSyntaxError:
        lineno, col = self._position(pos)
        return TemplateSyntaxError(
            message,
            lineno=lineno,
            name=self._name,
            filename=self._filename,
            source=self._source,
            col_offset=col,
            code=code,
        )

    def _find_closing(self, pos: int, closer: str) -> int:
        """Index of ``closer`` at bracket depth zero and outside string literals.

        Returns -1 if the source ends first.
        """
        source = self._source
        length = len(source)
        stack: list[str] = []
        quote: str | None = None
        i = pos
        while i < length:
            ch = source[i]
            if quote is not None:
                if ch == "\\":
                    i += 2
                    continue
                if source.startswith(quote, i):
                    i += len(quote)
                    quote = None
                    continue
                i += 1
                continue
            if not stack and source.startswith(closer, i):
                return i
            if ch in "'\"":
                quote = ch * 3 if source.startswith(ch * 3, i) else ch
                i += len(quote)
                continue
            if ch in _OPEN_BRACKETS:
                stack.append(_OPEN_BRACKETS[ch])
            elif ch in _CLOSE_BRACKETS and stack and stack[-1] == ch:
                stack.pop()
            i += 1
        return -1

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens; consecutive literal text is merged into one DATA token."""
        source = self._source
        pos = 0
        data_start: int | None = None
        data_parts: list[str] = []

        def flush() -> Iterator[Token]:
            nonlocal data_start
            if data_parts:
                lineno, col = self._position(data_start or 0)
                yield Token(TokenType.DATA, "".join(data_parts), lineno, col)
                data_parts.clear()
            data_start = None

        def add_data(text: str, start: int) -> None:
            nonlocal data_start
            if not text:
                return
            if data_start is None:
                data_start = start
            data_parts.append(text)

        last_directive_end = -1

        while True:
            match = None
            if pos == last_directive_end:
                match = _ADJACENT_RE.match(source, pos)
                if match is not None and match.group(1).lower() not in KEYWORDS:
                    match = None
            if match is None:
                match = _START_RE.search(source, pos)
            if match is None:
                add_data(source[pos:], pos)
                break

            start = match.start()
            add_data(source[pos:start], pos)
            opener = match.group(0)

            if opener == "{{--":
                end = source.find("--}}", match.end())
                if end < 0:
                    raise self._error("Unclosed comment '{{--'", start, ErrorCode.UNCLOSED_COMMENT)
                pos = end + 4
                continue

            if opener in ("{{", "{!!"):
                closer = "}}" if opener == "{{" else "!!}"
                end = self._find_closing(match.end(), closer)
                if end < 0:
                    raise self._error(
                        f"Unclosed '{opener}': expected '{closer}'",
                        start,
                        ErrorCode.UNCLOSED_OUTPUT,
                    )
                yield from flush()
                lineno, col = self._position(start)
                kind = TokenType.OUTPUT if opener == "{{" else TokenType.RAW_OUTPUT
                yield Token(kind, source[match.end() : end], lineno, col)
                pos = end + len(closer)
                continue

            keyword = match.group(match.lastindex).lower()
            if keyword not in KEYWORDS:
                add_data(opener, start)
                pos = match.end()
                continue

            args: str | None = None
            pos = match.end()
            if keyword in ARG_KEYWORDS:
                paren = _HSPACE_RE.match(source, pos).end()
                if paren >= len(source) or source[paren] != "(":
                    raise self._error(
                        f"@{keyword} requires an argument list: @{keyword}(...)",
                        start,
                        ErrorCode.MISSING_ARGUMENTS,
                    )
                end = self._find_closing(paren + 1, ")")
                if end < 0:
                    raise self._error(
                        f"Unclosed argument list for @{keyword}",
                        paren,
                        ErrorCode.UNCLOSED_ARGUMENTS,
                    )
                args = source[paren + 1 : end]
                pos = end + 1

            yield from flush()
            lineno, col = self._position(start)
            yield Token(TokenType.DIRECTIVE, keyword, lineno, col, args)
            last_directive_end = pos

        yield from flush()
        lineno, col = self._position(len(source))
        yield Token(TokenType.EOF, "", lineno, col)


def tokenize(source: str, name: str | None = None, filename: str | None = None) -> list[Token]:
    """Tokenize ``source`` into a list ending with an EOF token."""
    return list(Lexer(source, name, filename).tokenize())
