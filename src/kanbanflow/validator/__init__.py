"""Board invariant validator."""
from __future__ import annotations

from kanbanflow.validator.diagnostics import Diagnostic, DiagnosticSeverity
from kanbanflow.validator.rules import DEFAULT_RULES, Rule
from kanbanflow.validator.validator import BoardValidator, is_valid, validate_board

__all__ = [
    "BoardValidator",
    "DEFAULT_RULES",
    "Diagnostic",
    "DiagnosticSeverity",
    "Rule",
    "is_valid",
    "validate_board",
]
