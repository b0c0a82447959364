"""wafview: Blade-style view templates compiled to Python.

Templates mix markup with ``@directives`` and ``{{ }}`` interpolation.
Expressions inside them are plain Python expressions evaluated against
the render context.

Quickstart:
    >>> from wafview import Environment
    >>> env = Environment()
    >>> env.render_string("Hello, {{ name }}!", name="<World>")
    'Hello, &lt;World&gt;!'

File-based views:
    >>> from wafview import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("views/"))
    >>> env.share("app_name", "Demo")
    >>> env.render("home", {"title": "Welcome"})

Layouts:
    ```
    {{-- views/layouts/app.html --}}
    <title>@yield('title', 'Untitled')</title>
    <main>@yield('content')</main>

    {{-- views/home.html --}}
    @extends('layouts.app')
    @section('title', title)
    @section('content')
      @foreach(items as item)
        <li>{{ item }}</li>
      @endforeach
    @endsection
    ```

Architecture:
Template Source → Lexer → Parser → node tree → Compiler → Python AST → exec()

1. **Lexer**: Scans markup, interpolation markers and directives left to right
2. **Parser**: Builds an immutable node tree, matching each opener to its closer
3. **Compiler**: Transforms the tree to an ``ast.Module`` with one function
   per section and a ``render`` function
4. **Template**: Wraps the compiled code; resolves @extends, @yield and
   @include at render time

Strict Mode (default):
Undefined variables raise ``UndefinedError``. ``Environment(strict=False)``
renders them as empty values instead.

"""

from wafview._types import Token, TokenType
from wafview.environment import (
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    Loader,
    OrphanContentWarning,
    SourceSnippet,
    TemplateCycleError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRenderError,
    TemplateSyntaxError,
    TemplateTooDeepError,
    UndefinedError,
    build_source_snippet,
)
from wafview.render_context import (
    RenderContext,
    get_render_context,
    get_render_context_required,
    render_context,
)
from wafview.template import UNDEFINED, LoopContext, Template
from wafview.utils.html import html_escape

__version__ = "0.1.0"

__all__ = [
    "UNDEFINED",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "Loader",
    "LoopContext",
    "OrphanContentWarning",
    "RenderContext",
    "SourceSnippet",
    "Template",
    "TemplateCycleError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "TemplateSyntaxError",
    "TemplateTooDeepError",
    "Token",
    "TokenType",
    "UndefinedError",
    "__version__",
    "build_source_snippet",
    "get_render_context",
    "get_render_context_required",
    "html_escape",
    "render_context",
]
