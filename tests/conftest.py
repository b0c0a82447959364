"""Pytest configuration and fixtures for wafview tests."""

import pytest

from wafview import DictLoader, Environment


@pytest.fixture
def env():
    """Create a basic wafview Environment."""
    return Environment()


@pytest.fixture
def env_lenient():
    """Create an Environment that renders undefined names as empty values."""
    return Environment(strict=False)


@pytest.fixture
def env_with_loader():
    """Create an Environment with DictLoader and a small layout hierarchy."""
    loader = DictLoader(
        {
            "layouts.app": (
                "<title>@yield('title', 'Untitled')</title>"
                "<main>@yield('content')</main>"
            ),
            "home": (
                "@extends('layouts.app')\n"
                "@section('title', 'Welcome')\n"
                "@section('content')<h1>Hello {{ name }}</h1>@endsection\n"
            ),
            "partials.greeting": "<p>Hi {{ name }}</p>",
        }
    )
    return Environment(loader=loader)


@pytest.fixture
def make_env():
    """Factory for an Environment over an in-memory template mapping."""

    def _make(templates: dict[str, str], **kwargs) -> Environment:
        return Environment(loader=DictLoader(templates), **kwargs)

    return _make


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace.

    Args:
        template_result: The actual template rendering result.
        expected: The expected output.
    """
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts."""
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
