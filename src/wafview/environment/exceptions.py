"""Exceptions for the wafview template engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Loader could not resolve an identifier
├── TemplateSyntaxError       # Malformed directive or interpolation
├── TemplateCycleError        # @extends chain loops back on itself
├── TemplateTooDeepError      # @extends/@include nesting limit reached
└── TemplateRenderError       # Expression evaluation failed during render
    └── UndefinedError        # Undefined variable (strict mode)

Warnings:
OrphanContentWarning          # Content outside @section in an extending template

Error Messages:
Syntax and render errors carry the template name, line number and a
source snippet. Render errors raised inside an @include or a section
body also list the chain of templates that led to the failure.

Example:
    ```
    W-RUN-001: Undefined variable 'titl' in home:5
       |
    >  5 | <h1>{{ titl }}</h1>
       |
      Hint: Did you mean 'title'?
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum

from wafview.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes.

    Format: W-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), RUN (runtime), TPL (template loading)
    """

    # Lexer errors (W-LEX-xxx)
    UNCLOSED_OUTPUT = "W-LEX-001"
    UNCLOSED_COMMENT = "W-LEX-002"
    UNCLOSED_ARGUMENTS = "W-LEX-003"
    MISSING_ARGUMENTS = "W-LEX-004"

    # Parser errors (W-PAR-xxx)
    UNEXPECTED_DIRECTIVE = "W-PAR-001"
    UNCLOSED_BLOCK = "W-PAR-002"
    INVALID_EXPRESSION = "W-PAR-003"
    INVALID_SECTION = "W-PAR-004"
    INVALID_EXTENDS = "W-PAR-005"

    # Runtime errors (W-RUN-xxx)
    UNDEFINED_VARIABLE = "W-RUN-001"
    RENDER_ERROR = "W-RUN-002"
    TOO_DEEP = "W-RUN-003"
    EXTENDS_CYCLE = "W-RUN-004"

    # Template loading errors (W-TPL-xxx)
    TEMPLATE_NOT_FOUND = "W-TPL-001"
    SYNTAX_ERROR = "W-TPL-002"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def format_template_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the template call chain for error messages.

    Example:
        >>> print(format_template_stack([("layouts.app", 12), ("partials.nav", 3)]))
        Template stack:
          • layouts.app:12
          • partials.nav:3
    """
    if not stack:
        return ""

    lines = [terminal.dim_text("Template stack:")]
    for template_name, line_num in stack:
        lines.append(f"  • {terminal.location(f'{template_name}:{line_num}')}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around an error.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional 0-based column for a caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
            if lineno == self.error_line and self.column is not None:
                caret = " " * self.column + "^"
                parts.append(f"{terminal.dim_text('     |')} {terminal.colorize(caret, 'bright_red')}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet | None:
    """Build a SourceSnippet, or None when ``error_line`` is outside ``source``."""
    all_lines = source.splitlines()
    if not 0 < error_line <= len(all_lines):
        return None
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateError(Exception):
    """Base exception for all wafview template errors.

        >>> try:
        ...     env.render("home", {"title": "Hi"})
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e)

    Attributes:
        code: ErrorCode identifying the failure class.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error for terminal display, prefixed with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = terminal.format_error_header(self.code.value, header)
        return header


class TemplateNotFoundError(TemplateError):
    """No loader could resolve the template identifier.

    Attributes:
        name: The identifier that was requested.
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, message: str, name: str | None = None):
        self.name = name
        super().__init__(message)


class TemplateSyntaxError(TemplateError):
    """Malformed template source.

    Raised by the lexer and parser before any output is produced. When
    ``source`` and ``lineno`` are known the message includes the offending
    line, with a caret under ``col_offset``.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        self.col_offset = col_offset
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def position(self) -> tuple[int | None, int | None]:
        """``(lineno, col_offset)`` of the error."""
        return (self.lineno, self.col_offset)

    def _location(self) -> str:
        location = self.filename or self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        return location

    def _format_message(self) -> str:
        header = f"Syntax Error: {self.message}\n  --> {self._location()}"
        if self.source and self.lineno:
            snippet = build_source_snippet(
                self.source, self.lineno, context_lines=0, column=self.col_offset
            )
            if snippet is not None:
                return f"{header}\n{snippet.format()}"
        return header

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  --> {terminal.location(self._location())}",
        ]
        if self.source and self.lineno:
            snippet = build_source_snippet(self.source, self.lineno, column=self.col_offset)
            if snippet is not None:
                parts.append(snippet.format())
        return "\n".join(parts)


class TemplateCycleError(TemplateError):
    """An @extends chain refers back to a template already on the chain.

    Attributes:
        chain: Template names in extends order, ending with the repeated name.
    """

    code: ErrorCode | None = ErrorCode.EXTENDS_CYCLE

    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__(f"Cyclic @extends chain: {' -> '.join(self.chain)}")

    @property
    def name(self) -> str | None:
        return self.chain[0] if self.chain else None


class TemplateTooDeepError(TemplateError):
    """@extends/@include nesting reached the environment's ``max_depth``."""

    code: ErrorCode | None = ErrorCode.TOO_DEEP

    def __init__(self, name: str, depth: int, template_stack: list[tuple[str, int]] | None = None):
        self.name = name
        self.depth = depth
        self.template_stack = template_stack or []
        message = f"Maximum template nesting depth ({depth}) exceeded while loading '{name}'"
        if self.template_stack:
            message += "\n\n" + format_template_stack(self.template_stack)
        super().__init__(message)


class TemplateRenderError(TemplateError):
    """Evaluation failed while rendering a template.

    The original exception is available as ``cause`` and is chained as
    ``__cause__``.

    Output Format:
            ```
            Render Error: ZeroDivisionError: division by zero
              Location: home:3
               |
            >  3 | {{ 1 / count }}
               |
            ```

    Attributes:
        message: Error description
        template_name: Template in which evaluation failed
        lineno: Line number in that template's source
        cause: The underlying exception, if any
        source_snippet: Lines around the failure
        template_stack: Chain of (template, line) pairs that led here
    """

    code: ErrorCode | None = ErrorCode.RENDER_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        cause: BaseException | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.cause = cause
        self.source_snippet = source_snippet
        self.template_stack = template_stack or []
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def name(self) -> str | None:
        return self.template_name

    def _location(self) -> str:
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def _headline(self) -> str:
        return f"Render Error: {self.message}"

    def _format_message(self) -> str:
        parts = [self._headline(), f"  Location: {terminal.location(self._location())}"]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class UndefinedError(TemplateRenderError):
    """A template referenced a name missing from the render context.

    Only raised in strict mode (the default). When ``available_names`` is
    given, a close match is offered as a "did you mean" hint.

    Example:
            >>> Environment().render_string("{{ undefined_var }}")
        UndefinedError: Undefined variable 'undefined_var' in <template>:1
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        template: str | None = None,
        lineno: int | None = None,
        available_names: frozenset[str] | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
    ):
        self.variable = name
        suggestion = None
        if available_names:
            matches = get_close_matches(name, available_names, n=1, cutoff=0.6)
            if matches:
                suggestion = f"Did you mean '{terminal.suggestion(matches[0])}'?"
        super().__init__(
            f"Undefined variable '{name}'",
            template_name=template or "<template>",
            lineno=lineno,
            source_snippet=source_snippet,
            template_stack=template_stack,
            suggestion=suggestion,
        )

    def _headline(self) -> str:
        return f"Undefined variable '{self.variable}' in {terminal.location(self._location())}"


class OrphanContentWarning(UserWarning):
    """Content in an extending template sits outside every @section and is dropped."""
