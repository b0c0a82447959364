"""Utility helpers shared by the wafview runtime."""

from wafview.utils.html import html_escape, to_str

__all__ = ["html_escape", "to_str"]
