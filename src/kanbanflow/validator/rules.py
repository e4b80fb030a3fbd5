"""Individual invariant rules for the board validator.

Each rule is a callable that accepts a ``BoardState`` and returns a list
of ``Diagnostic`` objects.  Rule codes use the ``KF`` prefix:

    KF001  Column references a card id missing from the card map
    KF002  Card id listed more than once (same or different columns)
    KF003  Column order is not a permutation of the column keys
    KF004  Column stored under a key different from its id
    KF005  Card stored under a key different from its id
    KF006  Card with a blank title
"""
from __future__ import annotations

from collections import Counter
from typing import Callable

from kanbanflow.model.entities import BoardState
from kanbanflow.validator.diagnostics import Diagnostic, DiagnosticSeverity

Rule = Callable[[BoardState], list[Diagnostic]]


def _error(code: str, message: str, location: str, rule: str) -> Diagnostic:
    return Diagnostic(
        severity=DiagnosticSeverity.ERROR,
        code=code,
        message=message,
        location=location,
        rule=rule,
    )


def check_dangling_card_ids(board: BoardState) -> list[Diagnostic]:
    """KF001: every id in a column's ``card_ids`` resolves in ``cards``."""
    diagnostics: list[Diagnostic] = []
    for column_id, column in board.columns.items():
        for card_id in column.card_ids:
            if card_id not in board.cards:
                diagnostics.append(
                    _error(
                        "KF001",
                        f"Column {column_id!r} references unknown card {card_id!r}",
                        f"columns.{column_id}",
                        "check_dangling_card_ids",
                    )
                )
    return diagnostics


def check_single_location(board: BoardState) -> list[Diagnostic]:
    """KF002: a card id appears at most once across all columns."""
    counts: Counter[str] = Counter()
    for column in board.columns.values():
        counts.update(column.card_ids)
    return [
        _error(
            "KF002",
            f"Card {card_id!r} is listed {count} times across columns",
            f"cards.{card_id}",
            "check_single_location",
        )
        for card_id, count in counts.items()
        if count > 1
    ]


def check_column_order(board: BoardState) -> list[Diagnostic]:
    """KF003: ``column_order`` is exactly the set of column keys, once each."""
    diagnostics: list[Diagnostic] = []
    order_counts = Counter(board.column_order)
    for column_id, count in order_counts.items():
        if count > 1:
            diagnostics.append(
                _error(
                    "KF003",
                    f"Column {column_id!r} appears {count} times in the column order",
                    "columnOrder",
                    "check_column_order",
                )
            )
        if column_id not in board.columns:
            diagnostics.append(
                _error(
                    "KF003",
                    f"Column order names unknown column {column_id!r}",
                    "columnOrder",
                    "check_column_order",
                )
            )
    for column_id in board.columns:
        if column_id not in order_counts:
            diagnostics.append(
                _error(
                    "KF003",
                    f"Column {column_id!r} is missing from the column order",
                    "columnOrder",
                    "check_column_order",
                )
            )
    return diagnostics


def check_column_keys(board: BoardState) -> list[Diagnostic]:
    """KF004: each column is stored under its own id."""
    return [
        _error(
            "KF004",
            f"Column stored under {key!r} has id {column.id!r}",
            f"columns.{key}",
            "check_column_keys",
        )
        for key, column in board.columns.items()
        if column.id != key
    ]


def check_card_keys(board: BoardState) -> list[Diagnostic]:
    """KF005: each card is stored under its own id."""
    return [
        _error(
            "KF005",
            f"Card stored under {key!r} has id {card.id!r}",
            f"cards.{key}",
            "check_card_keys",
        )
        for key, card in board.cards.items()
        if card.id != key
    ]


def check_titles(board: BoardState) -> list[Diagnostic]:
    """KF006: no card has a blank title.

    ``Card`` already refuses blank titles at construction; this rule
    catches values built with ``object.__setattr__`` or foreign objects.
    """
    return [
        _error(
            "KF006",
            f"Card {key!r} has a blank title",
            f"cards.{key}",
            "check_titles",
        )
        for key, card in board.cards.items()
        if not isinstance(card.title, str) or not card.title.strip()
    ]


DEFAULT_RULES: tuple[Rule, ...] = (
    check_dangling_card_ids,
    check_single_location,
    check_column_order,
    check_column_keys,
    check_card_keys,
    check_titles,
)
