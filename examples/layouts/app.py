"""Layouts -- a page that extends a shared layout.

Loads views from disk with FileSystemLoader. ``home`` extends
``layouts.app``, fills its ``title`` and ``content`` sections, and the
layout includes ``partials.nav``. Data shared with ``env.share()`` is
visible in every view, layout and partial.

Run:
    python app.py
"""

import datetime
from pathlib import Path

from wafview import Environment, FileSystemLoader

views_dir = Path(__file__).parent / "views"
env = Environment(loader=FileSystemLoader(views_dir))


def url(path: str = "/") -> str:
    return "https://example.test/" + path.lstrip("/")


env.add_global("url", url)
env.add_global("year", datetime.date.today().year)

env.share("app_name", "WAFWork")
env.share("nav_links", {"Home": "/", "Login": "/login", "Register": "/register"})

features = [
    {"title": "Simple & Fast", "text": "Compiled once per render, no runtime parsing."},
    {"title": "Layouts", "text": "@extends, @section and @yield compose pages."},
    {"title": "Escaped by default", "text": "{{ }} escapes; {!! !!} opts out."},
]

home_output = env.render("home", tagline="A lightweight view layer", features=features)

# No title section: the layout's default title is used
about_output = env.render("about", body="<p>Made with <em>wafview</em>.</p>")


def main() -> None:
    print("=== Home ===")
    print(home_output)
    print()
    print("=== About ===")
    print(about_output)


if __name__ == "__main__":
    main()
