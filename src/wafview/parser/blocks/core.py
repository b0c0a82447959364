"""Block stack management shared by the block parsing mixins."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wafview._types import Token, TokenType
from wafview.environment.exceptions import ErrorCode

if TYPE_CHECKING:
    from wafview.environment.exceptions import TemplateSyntaxError

# Closing keyword for every block opener.
END_KEYWORDS = {
    "section": "endsection",
    "if": "endif",
    "foreach": "endforeach",
    "for": "endfor",
    "while": "endwhile",
}


class BlockStackMixin:
    """Track open blocks for nesting checks and error messages.

    Host attributes: ``_block_stack`` (list of (keyword, lineno, col_offset)).
    """

    if TYPE_CHECKING:
        _block_stack: list[tuple[str, int, int]]

        @property
        def _current(self) -> Token: ...
        def _advance(self) -> Token: ...
        def _error(
            self,
            message: str,
            token: Token | None = None,
            suggestion: str | None = None,
            code: ErrorCode = ErrorCode.UNEXPECTED_DIRECTIVE,
        ) -> TemplateSyntaxError: ...

    def _push_block(self, keyword: str, token: Token) -> None:
        self._block_stack.append((keyword, token.lineno, token.col_offset))

    def _pop_block(self) -> None:
        self._block_stack.pop()

    def _unexpected_directive(self, token: Token) -> TemplateSyntaxError:
        """Error for a closer or continuation that does not belong here."""
        if self._block_stack:
            opener, lineno, _ = self._block_stack[-1]
            return self._error(
                f"Unexpected @{token.value}: @{opener} from line {lineno} "
                f"must be closed with @{END_KEYWORDS[opener]}",
                token,
            )
        return self._error(
            f"Unexpected @{token.value} with no open block",
            token,
            suggestion="Remove it or add the matching opening directive",
        )

    def _consume_end_tag(self, opener: str, start: Token) -> Token:
        """Consume the closing directive for ``opener`` and pop the block."""
        end = END_KEYWORDS[opener]
        current = self._current
        if current.type is TokenType.EOF:
            raise self._error(
                f"Unclosed @{opener} (opened at line {start.lineno})",
                start,
                suggestion=f"Add @{end}",
                code=ErrorCode.UNCLOSED_BLOCK,
            )
        if current.value != end:
            raise self._unexpected_directive(current)
        self._pop_block()
        return self._advance()
