"""Board validator: invariant checks over a ``BoardState``.

The ``BoardValidator`` runs a configurable set of rules and returns a
list of ``Diagnostic`` objects.  It is used wherever a board enters the
process from outside: structured import, persistence loads and the
``validate`` CLI command.

Usage
-----
::

    from kanbanflow.validator import BoardValidator

    diagnostics = BoardValidator().validate(board)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

from kanbanflow.model.entities import BoardState
from kanbanflow.validator.diagnostics import Diagnostic, DiagnosticSeverity
from kanbanflow.validator.rules import DEFAULT_RULES, Rule


class BoardValidator:
    """Invariant validator for board values.

    Parameters
    ----------
    rules:
        The rules to run.  Defaults to all built-in rules
        (``DEFAULT_RULES``).
    """

    def __init__(self, rules: list[Rule] | None = None) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)

    def validate(self, board: BoardState) -> list[Diagnostic]:
        """Run all rules against *board* and return the collected diagnostics.

        Returns
        -------
        list[Diagnostic]
            All findings, sorted by code then location.  Empty when the
            board satisfies every invariant.
        """
        all_diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            try:
                all_diagnostics.extend(rule(board))
            except Exception as exc:  # noqa: BLE001
                # A broken rule must not hide the other findings.
                all_diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.ERROR,
                        code="KF999",
                        message=f"Internal validator error in rule {rule.__name__!r}: {exc}",
                        rule=rule.__name__,
                    )
                )

        all_diagnostics.sort(key=lambda d: (d.code, d.location))
        return all_diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        """Return the number of rules currently registered."""
        return len(self._rules)


def validate_board(board: BoardState) -> list[Diagnostic]:
    """Validate *board* with the default rules."""
    return BoardValidator().validate(board)


def is_valid(board: BoardState) -> bool:
    """Return True if *board* has no ERROR-level diagnostics."""
    return not any(d.is_error for d in validate_board(board))
