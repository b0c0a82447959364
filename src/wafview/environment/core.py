"""Core Environment class for wafview.

The Environment is the central coordinator: it holds the loader, the
globals every template can see, the shared view data and the rendering
limits, and runs the compilation pipeline for each template request.

There is deliberately no template cache. Every ``get_template()`` call
reads the source again and recompiles it, so edits on disk are picked up
by the next render.

Thread-Safety:
- ``globals`` and ``shared`` are replaced copy-on-write under a lock, so a
  render in another thread always sees a complete mapping.
- Compilation builds only local state and is safe to run concurrently.

"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from wafview.compiler import Compiler
from wafview.environment.exceptions import TemplateNotFoundError
from wafview.environment.loaders import Loader
from wafview.lexer import tokenize
from wafview.parser import Parser
from wafview.template import Template

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 50

# Helper callables available to every template unless overridden.
DEFAULT_GLOBALS: dict[str, Any] = {
    "range": range,
    "len": len,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "list": list,
    "dict": dict,
    "enumerate": enumerate,
    "zip": zip,
    "sorted": sorted,
    "reversed": reversed,
    "min": min,
    "max": max,
    "sum": sum,
    "abs": abs,
    "round": round,
}


class Environment:
    """Central configuration and template management hub.

    Attributes:
        loader: Template source provider (FileSystemLoader, DictLoader, ...)
        max_depth: Maximum number of nested @extends/@include hops
        strict: Raise UndefinedError for undefined names (default True);
            when False they evaluate to an empty ``UNDEFINED`` value
        globals: Names available to every template
        shared: Read-only view of data shared with every render

    Example:
            >>> env = Environment(loader=FileSystemLoader("views/"))
            >>> env.share("app_name", "Demo")
            >>> env.render("home", {"title": "Welcome"})
    """

    def __init__(
        self,
        loader: Loader | None = None,
        globals: Mapping[str, Any] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        strict: bool = True,
    ):
        if loader is not None and not callable(getattr(loader, "get_source", None)):
            raise TypeError(
                f"loader must provide get_source(name), got {type(loader).__name__}"
            )
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {max_depth!r}")

        self.loader = loader
        self.max_depth = max_depth
        self.strict = strict
        self._lock = threading.Lock()
        self._globals: dict[str, Any] = {**DEFAULT_GLOBALS, **(globals or {})}
        self._shared: dict[str, Any] = {}

    @property
    def globals(self) -> Mapping[str, Any]:
        """Read-only view of the template globals."""
        return MappingProxyType(self._globals)

    @property
    def shared(self) -> Mapping[str, Any]:
        """Read-only view of the data shared with every render."""
        return MappingProxyType(self._shared)

    def add_global(self, name: str, value: Any) -> None:
        """Make ``value`` available to every template as ``name``."""
        with self._lock:
            self._globals = {**self._globals, name: value}

    def update_globals(self, mapping: Mapping[str, Any]) -> None:
        with self._lock:
            self._globals = {**self._globals, **mapping}

    def share(self, key: str | Mapping[str, Any], value: Any = None) -> Environment:
        """Share data with every subsequent render.

        Accepts a single key and value, or a mapping of several. Later
        calls overwrite earlier values for the same key. Data passed to a
        render call takes precedence over shared data.

        Returns the environment, so calls can be chained:
            >>> env.share("app_name", "Demo").share({"year": 2024})
        """
        if isinstance(key, Mapping):
            items = dict(key)
        elif isinstance(key, str):
            items = {key: value}
        else:
            raise TypeError(f"share() expects a key or a mapping, got {type(key).__name__}")
        with self._lock:
            self._shared = {**self._shared, **items}
        logger.debug("Shared view data: %s", ", ".join(sorted(items)))
        return self

    def _base_context(self) -> dict[str, Any]:
        """Fresh render context seeded with globals, then shared data."""
        ctx = dict(self._globals)
        ctx.update(self._shared)
        return ctx

    def get_template(self, name: str) -> Template:
        """Load and compile a template by identifier.

        Raises:
            TemplateNotFoundError: If the loader cannot resolve ``name``
            TemplateSyntaxError: If the source is malformed
        """
        if self.loader is None:
            raise TemplateNotFoundError(
                f"Template '{name}' not found: no loader configured", name=name
            )
        source, filename = self.loader.get_source(name)
        return self._compile(source, name, filename)

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Compile a template from a string.

        Example:
            >>> env.from_string("Hello, {{ name }}!").render(name="World")
            'Hello, World!'
        """
        return self._compile(source, name, None)

    def _compile(self, source: str, name: str | None, filename: str | None) -> Template:
        start = time.perf_counter()
        tokens = tokenize(source, name, filename)
        tree = Parser(tokens, name, filename, source).parse()
        code = Compiler().compile(tree, name, filename)
        template = Template(
            self,
            code,
            name,
            filename,
            source,
            extends=tree.extends.template if tree.extends else None,
            sections=tuple(section.name for section in tree.body) if tree.extends else (),
        )
        logger.debug(
            "Compiled template %s in %.2fms",
            name or "<string>",
            (time.perf_counter() - start) * 1000,
        )
        return template

    def render(
        self, name: str, data: Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> str:
        """Load, compile and render the template ``name``.

        Example:
            >>> env.render("home", {"title": "Welcome"})
            >>> env.render("home", title="Welcome")
        """
        return self.get_template(name).render(data, **kwargs)

    def render_string(
        self, source: str, data: Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> str:
        return self.from_string(source).render(data, **kwargs)

    def list_templates(self) -> list[str]:
        """Identifiers the loader can provide (empty if it cannot enumerate)."""
        list_func = getattr(self.loader, "list_templates", None)
        if list_func is None:
            return []
        return sorted(list_func())

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__ if self.loader else None} "
            f"strict={self.strict} max_depth={self.max_depth}>"
        )
