"""Tests for template loaders."""

from __future__ import annotations

import pytest

from wafview import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    FunctionLoader,
    Loader,
    TemplateNotFoundError,
)


@pytest.fixture
def views(tmp_path):
    """A small view tree on disk."""
    (tmp_path / "layouts").mkdir()
    (tmp_path / "partials").mkdir()
    (tmp_path / "layouts" / "app.html").write_text(
        "<title>@yield('title', 'Site')</title><main>@yield('content')</main>"
    )
    (tmp_path / "partials" / "nav.html").write_text("<nav>{{ active }}</nav>")
    (tmp_path / "home.html").write_text(
        "@extends('layouts.app')\n"
        "@section('title', 'Home')\n"
        "@section('content')@include('partials.nav', {'active': 'home'})@endsection\n"
    )
    return tmp_path


class TestFileSystemLoader:
    """Dotted identifiers resolved under view roots."""

    def test_dotted_identifier(self, views) -> None:
        source, filename = FileSystemLoader(views).get_source("layouts.app")
        assert source.startswith("<title>")
        assert filename == str((views / "layouts" / "app.html").resolve())

    def test_renders_tree(self, views) -> None:
        env = Environment(loader=FileSystemLoader(str(views)))
        assert env.render("home") == "<title>Home</title><main><nav>home</nav></main>"

    def test_missing_template(self, views) -> None:
        with pytest.raises(TemplateNotFoundError) as exc_info:
            FileSystemLoader(views).get_source("layouts.missing")
        assert exc_info.value.name == "layouts.missing"
        assert str(views) in str(exc_info.value)

    @pytest.mark.parametrize(
        "name",
        ["", "layouts..app", ".home", "home.", "../home", "layouts/app", "~.home"],
    )
    def test_malformed_identifiers_not_found(self, views, name) -> None:
        with pytest.raises(TemplateNotFoundError):
            FileSystemLoader(views).get_source(name)

    def test_symlink_escaping_root_not_found(self, views, tmp_path_factory) -> None:
        outside = tmp_path_factory.mktemp("outside")
        (outside / "secret.html").write_text("secret")
        try:
            (views / "link.html").symlink_to(outside / "secret.html")
        except OSError:
            pytest.skip("symlinks not supported")
        with pytest.raises(TemplateNotFoundError):
            FileSystemLoader(views).get_source("link")

    def test_search_path_order(self, tmp_path) -> None:
        custom = tmp_path / "custom"
        default = tmp_path / "default"
        custom.mkdir()
        default.mkdir()
        (custom / "page.html").write_text("custom")
        (default / "page.html").write_text("default")
        (default / "only.html").write_text("fallback")
        loader = FileSystemLoader([custom, default])
        assert loader.get_source("page")[0] == "custom"
        assert loader.get_source("only")[0] == "fallback"
        assert loader.paths == [custom, default]

    def test_custom_extension(self, tmp_path) -> None:
        (tmp_path / "mail.blade.txt").write_text("x")
        (tmp_path / "note.txt").write_text("plain {{ n }}")
        loader = FileSystemLoader(tmp_path, extension="txt")
        assert loader.get_source("note")[0] == "plain {{ n }}"

    def test_encoding(self, tmp_path) -> None:
        (tmp_path / "latin.html").write_bytes("café".encode("latin-1"))
        loader = FileSystemLoader(tmp_path, encoding="latin-1")
        assert loader.get_source("latin")[0] == "café"

    def test_list_templates(self, views) -> None:
        assert FileSystemLoader(views).list_templates() == [
            "home",
            "layouts.app",
            "partials.nav",
        ]

    def test_no_caching(self, views) -> None:
        env = Environment(loader=FileSystemLoader(views))
        assert env.render("partials.nav", active="a") == "<nav>a</nav>"
        (views / "partials" / "nav.html").write_text("<ul>{{ active }}</ul>")
        assert env.render("partials.nav", active="a") == "<ul>a</ul>"


class TestDictLoader:
    """In-memory templates."""

    def test_get_source(self) -> None:
        assert DictLoader({"a": "A"}).get_source("a") == ("A", None)

    def test_did_you_mean(self) -> None:
        with pytest.raises(TemplateNotFoundError, match="Did you mean 'layouts.app'"):
            DictLoader({"layouts.app": ""}).get_source("layouts.ap")

    def test_lists_available(self) -> None:
        with pytest.raises(TemplateNotFoundError, match="Available: x, y"):
            DictLoader({"x": "", "y": ""}).get_source("completely-different")

    def test_list_templates(self) -> None:
        assert DictLoader({"b": "", "a": ""}).list_templates() == ["a", "b"]


class TestChoiceLoader:
    """First loader that finds the template wins."""

    def test_fallback(self) -> None:
        loader = ChoiceLoader(
            [DictLoader({"nav": "custom"}), DictLoader({"nav": "default", "footer": "f"})]
        )
        assert loader.get_source("nav")[0] == "custom"
        assert loader.get_source("footer")[0] == "f"
        assert loader.list_templates() == ["footer", "nav"]

    def test_not_found_anywhere(self) -> None:
        loader = ChoiceLoader([DictLoader({}), DictLoader({})])
        with pytest.raises(TemplateNotFoundError) as exc_info:
            loader.get_source("x")
        assert exc_info.value.name == "x"

    def test_not_found_lists_each_loader(self) -> None:
        loader = ChoiceLoader([DictLoader({"home": "h"}), FunctionLoader(lambda name: None)])
        with pytest.raises(TemplateNotFoundError) as exc_info:
            loader.get_source("hom")
        message = str(exc_info.value)
        assert "2 loader(s)" in message
        assert "- DictLoader:" in message
        assert "- FunctionLoader: View 'hom' not found" in message


class TestFunctionLoader:
    """Callables as loaders."""

    def test_string_result(self) -> None:
        loader = FunctionLoader(lambda name: "src" if name == "a" else None)
        assert loader.get_source("a") == ("src", "<function>")

    def test_tuple_result(self) -> None:
        loader = FunctionLoader(lambda name: ("src", f"/views/{name}.html"))
        assert loader.get_source("a") == ("src", "/views/a.html")

    def test_none_is_not_found(self) -> None:
        with pytest.raises(TemplateNotFoundError):
            FunctionLoader(lambda name: None).get_source("a")

    def test_invalid_result_type(self) -> None:
        with pytest.raises(TypeError, match="expected str"):
            FunctionLoader(lambda name: 42).get_source("a")

    def test_requires_callable(self) -> None:
        with pytest.raises(TypeError, match="callable"):
            FunctionLoader({"a": "src"})  # type: ignore[arg-type]


class TestLoaderProtocol:
    """Any object with get_source is a loader."""

    def test_builtin_loaders_satisfy_protocol(self, tmp_path) -> None:
        for loader in (
            FileSystemLoader(tmp_path),
            DictLoader({}),
            ChoiceLoader([]),
            FunctionLoader(lambda name: None),
        ):
            assert isinstance(loader, Loader)

    def test_custom_loader(self) -> None:
        class UpperLoader:
            def get_source(self, name):
                return f"{name.upper()} {{{{ x }}}}", None

        env = Environment(loader=UpperLoader())
        assert env.render("hi", x=1) == "HI 1"
        assert env.list_templates() == []
