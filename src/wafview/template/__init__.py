"""wafview Template package: compiled template objects ready for rendering."""

from wafview.template.core import BoundSection, Template
from wafview.template.helpers import UNDEFINED
from wafview.template.loop_context import LoopContext

__all__ = [
    "UNDEFINED",
    "BoundSection",
    "LoopContext",
    "Template",
]
