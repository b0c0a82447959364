"""Per-render engine state isolated from the user's data.

The template name, current line, nesting depth and the @extends chain
live in a ``ContextVar`` rather than in the render context dict handed to
template expressions. User data can therefore use any key, and
concurrent renders in different threads or tasks never see each other's
state.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field


@dataclass
class RenderContext:
    """Engine state for one template boundary of a render.

    A new RenderContext is pushed for every @extends hop, every @include
    and every section body rendered on behalf of its owner template.

    Attributes:
        template_name: Current template name for error messages
        filename: Source file path for error messages
        source: Template source for runtime error snippets
        line: Current line number (updated by generated code)
        depth: Number of @extends/@include hops from the top-level render
        max_depth: Maximum allowed depth
        template_stack: (template_name, line) pairs that led here
        extends_chain: Templates on the current @extends chain
    """

    template_name: str | None = None
    filename: str | None = None
    source: str | None = None
    line: int = 0
    depth: int = 0
    max_depth: int = 50
    template_stack: list[tuple[str, int]] = field(default_factory=list)
    extends_chain: list[str] = field(default_factory=list)

    def check_depth(self, template_name: str) -> None:
        """Raise TemplateTooDeepError if another hop would exceed ``max_depth``."""
        if self.depth >= self.max_depth:
            from wafview.environment.exceptions import TemplateTooDeepError

            raise TemplateTooDeepError(
                template_name, self.max_depth, template_stack=self._stack_with_current()
            )

    def check_cycle(self, template_name: str) -> None:
        """Raise TemplateCycleError if ``template_name`` is already being extended."""
        if template_name in self.extends_chain:
            from wafview.environment.exceptions import TemplateCycleError

            raise TemplateCycleError([*self.extends_chain, template_name])

    def _stack_with_current(self) -> list[tuple[str, int]]:
        stack = self.template_stack.copy()
        if self.template_name and self.line > 0:
            stack.append((self.template_name, self.line))
        return stack

    def child_context(
        self,
        template_name: str,
        *,
        filename: str | None = None,
        source: str | None = None,
        extends: bool = False,
    ) -> RenderContext:
        """Create the context for a nested template.

        ``extends=True`` continues the current @extends chain; otherwise
        (an @include) the child starts a chain of its own.
        """
        chain = [*self.extends_chain, template_name] if extends else [template_name]
        return RenderContext(
            template_name=template_name,
            filename=filename,
            source=source,
            line=0,
            depth=self.depth + 1,
            max_depth=self.max_depth,
            template_stack=self._stack_with_current(),
            extends_chain=chain,
        )

    def section_context(
        self, owner_name: str | None, filename: str | None, source: str | None
    ) -> RenderContext:
        """Context for rendering a section body defined by ``owner_name``.

        Depth and the extends chain are unchanged; only the location used
        for error messages moves to the owning template.
        """
        return RenderContext(
            template_name=owner_name,
            filename=filename,
            source=source,
            line=0,
            depth=self.depth,
            max_depth=self.max_depth,
            template_stack=self._stack_with_current(),
            extends_chain=self.extends_chain,
        )


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "wafview_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None outside a render)."""
    return _render_context.get()


def get_render_context_required() -> RenderContext:
    """Get current render context, raise if not in a render.

    Used by generated code for line tracking.
    """
    ctx = _render_context.get()
    if ctx is None:
        raise RuntimeError("Not in a render context")
    return ctx


@contextmanager
def render_context(
    template_name: str | None = None,
    filename: str | None = None,
    source: str | None = None,
    max_depth: int = 50,
) -> Iterator[RenderContext]:
    """Set a fresh top-level RenderContext for the duration of the block.

    Example:
        with render_context(template_name="home") as ctx:
            html = render_func(user_ctx, None)
    """
    ctx = RenderContext(
        template_name=template_name,
        filename=filename,
        source=source,
        max_depth=max_depth,
        extends_chain=[template_name] if template_name else [],
    )
    token = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)


def set_render_context(ctx: RenderContext) -> Token[RenderContext | None]:
    """Set a RenderContext and return the reset token.

    For nested @extends/@include calls that restore the previous context
    manually in a ``finally`` block.
    """
    return _render_context.set(ctx)


def reset_render_context(token: Token[RenderContext | None]) -> None:
    """Reset render context using a token from set_render_context."""
    _render_context.reset(token)
