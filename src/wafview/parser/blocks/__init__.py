"""Block parsing mixins for the wafview parser."""

from wafview.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from wafview.parser.blocks.core import END_KEYWORDS, BlockStackMixin
from wafview.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

__all__ = [
    "END_KEYWORDS",
    "BlockStackMixin",
    "ControlFlowBlockParsingMixin",
    "TemplateStructureBlockParsingMixin",
]
