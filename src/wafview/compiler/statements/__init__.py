"""Statement compilation mixins.

- basic: literal text and interpolation
- control_flow: @if, @foreach/@for, @while
- template_structure: @yield, @include

"""

from __future__ import annotations

from wafview.compiler.statements.basic import BasicStatementMixin
from wafview.compiler.statements.control_flow import ControlFlowMixin
from wafview.compiler.statements.template_structure import TemplateStructureMixin


class StatementCompilationMixin(
    BasicStatementMixin,
    ControlFlowMixin,
    TemplateStructureMixin,
):
    """Combined mixin for compiling all statement types."""
