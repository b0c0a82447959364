"""Pure runtime helpers injected into the template namespace.

These functions are called by compiled template code at render time.
None of them close over Environment state.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

from typing import Any

from wafview.template.loop_context import LoopContext
from wafview.utils.html import html_escape, to_str

# Entries shared by every Template namespace. Copied once per Template.
# Read-only after module load.
STATIC_NAMESPACE: dict[str, Any] = {
    "__builtins__": {"__import__": __import__},
    "_escape": html_escape,
    "_str": to_str,
    "_LoopContext": LoopContext,
}


class _Undefined:
    """Value of an undefined name in lenient mode.

    Renders as an empty string, is falsy, iterates as empty, and any
    attribute or item of it is UNDEFINED again.
    """

    __slots__ = ()

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __len__(self) -> int:
        return 0

    def __iter__(self):
        return iter(())

    def __getattr__(self, name: str) -> _Undefined:
        if name.startswith("__"):
            raise AttributeError(name)
        return self

    def __getitem__(self, key: Any) -> _Undefined:
        return self

    def __call__(self, *args: Any, **kwargs: Any) -> _Undefined:
        return self


UNDEFINED = _Undefined()


def _undefined_error(ctx: dict[str, Any], var_name: str) -> Exception:
    from wafview.environment.exceptions import UndefinedError, build_source_snippet
    from wafview.render_context import get_render_context

    render_ctx = get_render_context()
    template_name = render_ctx.template_name if render_ctx else None
    lineno = render_ctx.line if render_ctx else None
    source = render_ctx.source if render_ctx else None
    snippet = build_source_snippet(source, lineno) if source and lineno else None
    return UndefinedError(
        var_name,
        template_name,
        lineno,
        available_names=frozenset(ctx.keys()),
        source_snippet=snippet,
        template_stack=render_ctx.template_stack if render_ctx else None,
    )


def lookup(ctx: dict[str, Any], var_name: str) -> Any:
    """Look up a variable in strict mode.

    Performance:
        - Fast path (defined var): O(1) dict lookup
        - Error path: Raises UndefinedError with template context
    """
    try:
        return ctx[var_name]
    except KeyError:
        raise _undefined_error(ctx, var_name) from None


def lookup_lenient(ctx: dict[str, Any], var_name: str) -> Any:
    """Look up a variable, returning UNDEFINED when it is missing."""
    return ctx.get(var_name, UNDEFINED)


def safe_getattr(obj: Any, name: str) -> Any:
    """``obj.name`` for template expressions.

    Resolution order:
    - Dicts: subscript first (user data), getattr fallback (methods).
      Keys like ``items`` or ``keys`` resolve to the data, not the method.
    - Objects: getattr first, subscript fallback.

    Raises AttributeError when neither resolves.
    """
    if isinstance(obj, dict):
        try:
            return obj[name]
        except KeyError:
            try:
                return getattr(obj, name)
            except AttributeError:
                raise AttributeError(f"dict has no key or attribute '{name}'") from None
    try:
        return getattr(obj, name)
    except AttributeError as e:
        if hasattr(obj, "__getitem__") and not isinstance(obj, (str, bytes)):
            try:
                return obj[name]
            except (KeyError, IndexError, TypeError):
                pass
        raise e from None


def safe_getattr_lenient(obj: Any, name: str) -> Any:
    """Like :func:`safe_getattr` but missing attributes (and None.x) are UNDEFINED."""
    if obj is None or obj is UNDEFINED:
        return UNDEFINED
    try:
        return safe_getattr(obj, name)
    except AttributeError:
        return UNDEFINED


def iterable(value: Any) -> Any:
    """Loop source for @foreach/@for: ``None`` and UNDEFINED iterate zero times."""
    if value is None or value is UNDEFINED:
        return ()
    return value
