"""wafview Template: compiled template object ready for rendering.

Architecture:
    ```
    Template
    ├── _env_ref: WeakRef[Environment]  # Prevents circular refs
    ├── _render_func: callable          # render(ctx, _sections=None)
    └── _name, _filename, _source       # For error messages
    ```

Layout inheritance and inclusion are closures bound into the namespace:

- ``_extends(name, ctx, sections)`` renders the layout with a copy of the
  context and the shared section map, one level deeper on the extends chain
- ``_include(name, data)`` renders a partial with a fresh context built
  from globals, shared data and ``data``, and a fresh section map
- ``_yield(sections, name, ctx, default)`` emits a section or the default
- ``_bind_section(name, func)`` ties a section function to the template
  that defined it, so errors inside it are reported against that template

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (context dict, section map, buffers)
- Engine state lives in a ContextVar (see :mod:`wafview.render_context`)

"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from wafview.environment.exceptions import (
    TemplateError,
    TemplateRenderError,
    build_source_snippet,
)
from wafview.render_context import (
    get_render_context_required,
    render_context,
    reset_render_context,
    set_render_context,
)
from wafview.template.helpers import (
    STATIC_NAMESPACE,
    iterable,
    lookup,
    lookup_lenient,
    safe_getattr,
    safe_getattr_lenient,
)

if TYPE_CHECKING:
    import types

    from wafview.environment import Environment
    from wafview.render_context import RenderContext

SectionFunc = Callable[[dict[str, Any], dict[str, Any]], str]


class BoundSection:
    """A section function together with the template that defined it."""

    __slots__ = ("func", "name", "owner")

    def __init__(self, name: str, func: SectionFunc, owner: Template):
        self.name = name
        self.func = func
        self.owner = owner

    def __call__(self, ctx: dict[str, Any], sections: dict[str, Any]) -> str:
        render_ctx = get_render_context_required()
        owner = self.owner
        section_ctx = render_ctx.section_context(owner.name, owner.filename, owner.source)
        token = set_render_context(section_ctx)
        try:
            return owner._run(self.func, ctx, sections, section_ctx)
        finally:
            reset_render_context(token)

    def __repr__(self) -> str:
        return f"<BoundSection {self.name!r} from {self.owner.name or '(inline)'}>"


class Template:
    """Compiled template ready for rendering.

    Attributes:
        name: Template identifier (for error messages)
        filename: Source file path (for error messages)
        extends: Identifier of the layout this template extends, or None
        sections: Names of the sections this template defines

    Error Enhancement:
        Exceptions raised while evaluating template code become
        :class:`TemplateRenderError` with the template name, line and a
        source snippet; the original exception is chained as ``__cause__``.
        Template errors from nested renders propagate unchanged.

    Example:
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{ name }}!")
            >>> t.render(name="World")
            'Hello, World!'
            >>> t.render({"name": "<World>"})
            'Hello, &lt;World&gt;!'
    """

    __slots__ = (
        "_env_ref",
        "_extends",
        "_filename",
        "_name",
        "_render_func",
        "_sections",
        "_source",
    )

    def __init__(
        self,
        env: Environment,
        code: types.CodeType,
        name: str | None,
        filename: str | None,
        source: str | None = None,
        extends: str | None = None,
        sections: tuple[str, ...] = (),
    ):
        self._env_ref: weakref.ref[Environment] = weakref.ref(env)
        self._name = name
        self._filename = filename
        self._source = source
        self._extends = extends
        self._sections = sections

        env_ref = self._env_ref

        def _get_env(template_name: str) -> Environment:
            _env = env_ref()
            if _env is None:
                raise RuntimeError(
                    f"Environment has been garbage collected while loading '{template_name}'"
                )
            return _env

        def _include(template_name: str, data: Any) -> str:
            if not isinstance(data, Mapping):
                raise TypeError(
                    f"@include data for '{template_name}' must be a mapping, "
                    f"got {type(data).__name__}"
                )
            render_ctx = get_render_context_required()
            render_ctx.check_depth(template_name)
            _env = _get_env(template_name)
            included = _env.get_template(template_name)
            context = _env._base_context()
            context.update(data)
            child_ctx = render_ctx.child_context(
                template_name, filename=included.filename, source=included.source
            )
            token = set_render_context(child_ctx)
            try:
                return included._run(included._render_func, context, None, child_ctx)
            finally:
                reset_render_context(token)

        def _extends(
            template_name: str, context: dict[str, Any], sections: dict[str, Any]
        ) -> str:
            render_ctx = get_render_context_required()
            render_ctx.check_cycle(template_name)
            render_ctx.check_depth(template_name)
            parent = _get_env(template_name).get_template(template_name)
            child_ctx = render_ctx.child_context(
                template_name, filename=parent.filename, source=parent.source, extends=True
            )
            token = set_render_context(child_ctx)
            try:
                return parent._run(parent._render_func, dict(context), sections, child_ctx)
            finally:
                reset_render_context(token)

        def _yield(
            sections: dict[str, Any], section_name: str, context: dict[str, Any], default: str
        ) -> str:
            section = sections.get(section_name)
            if section is None:
                return default
            return section(context, sections)

        def _bind_section(section_name: str, func: SectionFunc) -> BoundSection:
            return BoundSection(section_name, func, self)

        strict = env.strict
        namespace: dict[str, Any] = STATIC_NAMESPACE.copy()
        namespace.update(
            {
                "_lookup": lookup if strict else lookup_lenient,
                "_getattr": safe_getattr if strict else safe_getattr_lenient,
                "_iterable": iterable,
                "_include": _include,
                "_extends": _extends,
                "_yield": _yield,
                "_bind_section": _bind_section,
                "_get_render_ctx": get_render_context_required,
            }
        )
        exec(code, namespace)
        self._render_func = namespace["render"]

    @property
    def _env(self) -> Environment:
        env = self._env_ref()
        if env is None:
            raise RuntimeError(
                f"Environment has been garbage collected (template: {self._name or 'unknown'})"
            )
        return env

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def extends(self) -> str | None:
        """Identifier of the parent layout, or None."""
        return self._extends

    @property
    def sections(self) -> tuple[str, ...]:
        """Names of the sections defined by this template."""
        return self._sections

    def render(self, data: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str:
        """Render the template.

        The render context is ``globals ⊕ shared ⊕ data ⊕ kwargs``; later
        sources win.

        Example:
            >>> t.render({"name": "World"})
            'Hello, World!'
            >>> t.render(name="World")
            'Hello, World!'
        """
        env = self._env
        ctx = env._base_context()
        if data is not None:
            if not isinstance(data, Mapping):
                raise TypeError(
                    f"render() data must be a mapping, got {type(data).__name__}"
                )
            ctx.update(data)
        ctx.update(kwargs)

        with render_context(
            template_name=self._name,
            filename=self._filename,
            source=self._source,
            max_depth=env.max_depth,
        ) as render_ctx:
            return self._run(self._render_func, ctx, None, render_ctx)

    async def render_async(
        self, data: Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> str:
        """Run :meth:`render` in a worker thread."""
        return await asyncio.to_thread(self.render, data, **kwargs)

    def _run(
        self,
        func: Callable[..., str],
        ctx: dict[str, Any],
        sections: dict[str, Any] | None,
        render_ctx: RenderContext,
    ) -> str:
        """Call compiled code, turning stray exceptions into TemplateRenderError."""
        try:
            return func(ctx, sections)
        except TemplateError:
            raise
        except Exception as e:
            raise self._enhance_error(e, render_ctx) from e

    def _enhance_error(self, error: Exception, render_ctx: RenderContext) -> TemplateRenderError:
        lineno = render_ctx.line or None
        message = str(error).strip()
        message = f"{type(error).__name__}: {message}" if message else type(error).__name__
        snippet = None
        if render_ctx.source and lineno:
            snippet = build_source_snippet(render_ctx.source, lineno)
        return TemplateRenderError(
            message,
            template_name=render_ctx.template_name,
            lineno=lineno,
            cause=error,
            source_snippet=snippet,
            template_stack=render_ctx.template_stack,
        )

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
