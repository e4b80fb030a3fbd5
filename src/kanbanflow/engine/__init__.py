"""Board state engine: pure operations that return a new ``BoardState``.

- :mod:`~kanbanflow.engine.moves` — reorder and cross-column moves.
- :mod:`~kanbanflow.engine.filters` — read-only filtered projection.
- :mod:`~kanbanflow.engine.mutations` — create, edit, delete, bulk insert.
"""
from __future__ import annotations

from kanbanflow.engine.filters import BoardQuery, filter_board
from kanbanflow.engine.moves import MoveIntent, apply_move, locate_card, move
from kanbanflow.engine.mutations import (
    bulk_insert,
    clear_column,
    create_card,
    delete_card,
    update_card,
)

__all__ = [
    "BoardQuery",
    "filter_board",
    "MoveIntent",
    "apply_move",
    "locate_card",
    "move",
    "bulk_insert",
    "clear_column",
    "create_card",
    "delete_card",
    "update_card",
]
