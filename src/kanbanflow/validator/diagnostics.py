"""Diagnostic types for the board invariant validator.

A ``Diagnostic`` is a single finding attached to a location inside a
``BoardState``, written as a dotted path such as ``"columns.todo"`` or
``"cards.card-3"``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = auto()
    WARNING = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single invariant finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"KF001"``.
    message:
        Human-readable description of the problem.
    location:
        Dotted path of the offending entry inside the board.
    rule:
        The rule name that produced this diagnostic.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    location: str = ""
    rule: str = field(default="")

    def __str__(self) -> str:
        where = f" at {self.location}" if self.location else ""
        return f"[{self.code}] {self.severity.name}{where}: {self.message}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic marks the board as invalid."""
        return self.severity == DiagnosticSeverity.ERROR
