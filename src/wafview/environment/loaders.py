"""Template loaders.

Loaders resolve a template identifier to source text. They implement
`get_source(name)` returning `(source, filename)` and raise
`TemplateNotFoundError` when the identifier cannot be resolved.
`list_templates()` is optional.

Built-in Loaders:
- `FileSystemLoader`: Dotted identifiers under one or more view roots
- `DictLoader`: In-memory mapping (tests, embedded templates)
- `ChoiceLoader`: Try several loaders in order (theme fallback)
- `FunctionLoader`: Wrap a callable as a loader

Nothing is cached: every `get_source()` call reads the source again.

Thread-Safety:
All built-in loaders are safe for concurrent `get_source()` calls.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol, runtime_checkable

from wafview.environment.exceptions import TemplateNotFoundError


@runtime_checkable
class Loader(Protocol):
    """Anything with a ``get_source(name) -> (source, filename)`` method."""

    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load templates addressed by dotted identifiers from view roots.

    ``layouts.app`` resolves to ``<root>/layouts/app.html``. Roots are
    searched in order and the first existing file wins:

        ```python
        loader = FileSystemLoader(["views/custom", "views/default"])
        loader.get_source("layouts.app")
        # views/custom/layouts/app.html if present, else views/default/...
        ```

    Identifiers with empty segments (``a..b``, ``.a``), path separators or
    segments that would leave the root (``..``) never reach the filesystem;
    they are reported as not found.

    Raises:
        TemplateNotFoundError: If no root holds the template
    """

    __slots__ = ("_encoding", "_extension", "_paths")

    def __init__(
        self,
        paths: str | Path | Sequence[str | Path],
        extension: str = ".html",
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        if extension and not extension.startswith("."):
            extension = "." + extension
        self._extension = extension
        self._encoding = encoding

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def _relative_path(self, name: str) -> Path | None:
        parts = name.split(".")
        for part in parts:
            if not part or part in ("..", "~") or "/" in part or "\\" in part:
                return None
        return Path(*parts[:-1], parts[-1] + self._extension)

    def get_source(self, name: str) -> tuple[str, str]:
        """Read the template file for ``name``."""
        relative = self._relative_path(name)
        if relative is not None:
            for base in self._paths:
                root = base.resolve()
                path = (root / relative).resolve()
                if not path.is_relative_to(root):
                    continue
                if path.is_file():
                    return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}",
            name=name,
        )

    def list_templates(self) -> list[str]:
        """List dotted identifiers of every template under the roots."""
        templates: set[str] = set()
        for base in self._paths:
            if not base.is_dir():
                continue
            for path in base.rglob(f"*{self._extension}"):
                relative = path.relative_to(base)
                stem = str(relative)[: -len(self._extension)] if self._extension else str(relative)
                parts = Path(stem).parts
                if all(part and "." not in part for part in parts):
                    templates.add(".".join(parts))
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory mapping of identifier to source.

    Example:
            >>> loader = DictLoader({
            ...     "layouts.app": "<title>@yield('title')</title>",
            ...     "home": "@extends('layouts.app')@section('title', 'Hi')",
            ... })
            >>> Environment(loader=loader).render("home")
            '<title>Hi</title>'

    Raises:
        TemplateNotFoundError: If the identifier is not in the mapping
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg, name=name)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class ChoiceLoader:
    """Resolve views through a chain of loaders.

    Application views usually shadow a package's bundled views: put the
    application loader first and the bundled one last. A miss in every
    loader reports what each of them said.

    Example:
            >>> app_views = DictLoader({"partials.nav": "<nav>App</nav>"})
            >>> bundled = DictLoader({
            ...     "partials.nav": "<nav>Bundled</nav>",
            ...     "partials.footer": "<footer>Bundled</footer>",
            ... })
            >>> env = Environment(loader=ChoiceLoader([app_views, bundled]))
            >>> env.render("partials.nav")
            '<nav>App</nav>'
            >>> env.render("partials.footer")
            '<footer>Bundled</footer>'
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: Sequence[Loader]):
        self._loaders = tuple(loaders)

    def get_source(self, name: str) -> tuple[str, str | None]:
        misses: list[str] = []
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError as e:
                first_line = str(e).partition("\n")[0]
                misses.append(f"{type(loader).__name__}: {first_line}")
        detail = "".join(f"\n  - {miss}" for miss in misses)
        raise TemplateNotFoundError(
            f"View '{name}' not found in {len(self._loaders)} loader(s){detail}",
            name=name,
        )

    def list_templates(self) -> list[str]:
        names: set[str] = set()
        for loader in self._loaders:
            list_templates = getattr(loader, "list_templates", None)
            if callable(list_templates):
                names.update(list_templates())
        return sorted(names)


class FunctionLoader:
    """Adapt a callable ``identifier -> source`` into a loader.

    The callable returns the view source, a ``(source, filename)`` pair
    when error messages should point at a real location, or ``None`` for
    an unknown identifier. Bare sources get the filename ``<function>``.

    Example:
            >>> views = {"greeting": "Hello, {{ name }}!"}
            >>> env = Environment(loader=FunctionLoader(views.get))
            >>> env.render("greeting", name="World")
            'Hello, World!'
    """

    __slots__ = ("_load_func",)

    def __init__(self, load_func: Callable[[str], str | tuple[str, str | None] | None]):
        if not callable(load_func):
            raise TypeError(f"FunctionLoader needs a callable, got {type(load_func).__name__}")
        self._load_func = load_func

    def get_source(self, name: str) -> tuple[str, str | None]:
        result = self._load_func(name)
        if result is None:
            raise TemplateNotFoundError(f"View '{name}' not found", name=name)
        if isinstance(result, str):
            return result, "<function>"
        if isinstance(result, tuple) and len(result) == 2 and isinstance(result[0], str):
            return result
        raise TypeError(
            f"Loader function returned {type(result).__name__} for '{name}'; "
            "expected str, (source, filename) or None"
        )

    def list_templates(self) -> list[str]:
        return []
