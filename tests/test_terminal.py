"""Tests for terminal color helpers used in error messages."""

from __future__ import annotations

import pytest

from wafview.environment import terminal


class TestColorDetection:
    """Color support switch."""

    def test_disabled_returns_plain_text(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert not terminal.supports_color()
        assert terminal.colorize("Error", "red", "bold") == "Error"

    def test_enabled_wraps_in_codes(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.colorize("Error", "red", "bold")
        assert result == "\033[31m\033[1mError\033[0m"

    def test_no_styles_is_noop(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.colorize("plain") == "plain"

    @pytest.mark.parametrize(
        ("force", "no_color", "expected"),
        [("1", None, True), ("1", "1", True), (None, "1", False)],
    )
    def test_environment_variables(self, monkeypatch, force, no_color, expected) -> None:
        for key, value in (("FORCE_COLOR", force), ("NO_COLOR", no_color)):
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)
        assert terminal._detect_colors() is expected


class TestFormatting:
    """Semantic helpers and line formatting."""

    def test_strip_colors(self) -> None:
        assert terminal.strip_colors("\033[91m\033[1mW-RUN-001\033[0m: boom") == "W-RUN-001: boom"

    def test_error_header_with_code(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        header = terminal.format_error_header("W-TPL-001", "missing")
        assert "\033[91m" in header
        assert terminal.strip_colors(header) == "W-TPL-001: missing"

    def test_error_header_without_code(self) -> None:
        assert terminal.format_error_header(None, "missing") == "missing"

    def test_error_source_line(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.format_source_line(3, "{{ x }}", is_error=True) == ">  3 | {{ x }}"
        assert terminal.format_source_line(12, "text") == "  12 | text"

    def test_helpers_plain_without_color(self, monkeypatch) -> None:
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        for helper in (terminal.error_code, terminal.location, terminal.hint, terminal.suggestion):
            assert helper("x") == "x"
