"""Template tree nodes produced by the parser and consumed by the compiler.

Node Hierarchy:
    Node (base)
    ├── Template          # root
    ├── Data, Output      # literal text and interpolation
    ├── If, For, While    # control flow
    ├── Extends, Section, Yield, Include
    └── Expr              # Python expression

"""

from wafview.nodes.base import Node
from wafview.nodes.control_flow import For, If, While
from wafview.nodes.expressions import Expr
from wafview.nodes.output import Data, Output
from wafview.nodes.structure import Extends, Include, Section, Template, Yield

__all__ = [
    "Data",
    "Expr",
    "Extends",
    "For",
    "If",
    "Include",
    "Node",
    "Output",
    "Section",
    "Template",
    "While",
    "Yield",
]
