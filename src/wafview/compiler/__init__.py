"""Compiler for wafview templates: node tree → Python code object."""

from wafview.compiler.core import Compiler

__all__ = ["Compiler"]
