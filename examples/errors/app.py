"""Errors -- what wafview reports when a view goes wrong.

Each case renders a broken view and keeps the exception so the tests
can inspect it. Messages carry an error code, the template and line,
a source snippet and, for failures inside partials or layouts, the
chain of templates that led there.

Run:
    python app.py
"""

from wafview import (
    DictLoader,
    Environment,
    TemplateCycleError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UndefinedError,
)
from wafview.environment.terminal import strip_colors

env = Environment(
    loader=DictLoader(
        {
            "layouts.app": "<main>@yield('content')</main>",
            "typo": (
                "@extends('layouts.app')\n"
                "@section('content')\n"
                "<h1>{{ titl }}</h1>\n"
                "@endsection\n"
            ),
            "unclosed": "@if(user)\n<p>{{ user }}</p>\n",
            "missing_layout": "@extends('layouts.admin')",
            "a": "@extends('b')",
            "b": "@extends('a')",
            "page": "<div>@include('partials.broken', {'count': 0})</div>",
            "partials.broken": "<p>\n{{ 10 / count }}\n</p>",
        }
    )
)


def capture(name: str, **data: object) -> TemplateError:
    try:
        env.render(name, data)
    except TemplateError as e:
        return e
    raise AssertionError(f"{name} rendered without error")


undefined = capture("typo", title="Home")
syntax = capture("unclosed")
not_found = capture("missing_layout")
cycle = capture("a")
render_error = capture("page")

errors: dict[str, TemplateError] = {
    "undefined": undefined,
    "syntax": syntax,
    "not_found": not_found,
    "cycle": cycle,
    "render": render_error,
}

assert isinstance(undefined, UndefinedError)
assert isinstance(syntax, TemplateSyntaxError)
assert isinstance(not_found, TemplateNotFoundError)
assert isinstance(cycle, TemplateCycleError)


def main() -> None:
    for label, error in errors.items():
        print(f"=== {label} ({type(error).__name__}) ===")
        print(error)
        print()


def plain(label: str) -> str:
    return strip_colors(str(errors[label]))


if __name__ == "__main__":
    main()
