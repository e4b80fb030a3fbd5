"""kanbanflow — kanban board-state engine with AI-assisted task capture.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import kanbanflow

    board = kanbanflow.default_board()
    board = kanbanflow.create_card(board, "todo", kanbanflow.CardDraft("Write docs"))
    card_id = board.columns["todo"].card_ids[0]
    board = kanbanflow.move(board, "todo", 0, "done", 0, card_id)

    text = kanbanflow.export_json(board)
    assert kanbanflow.import_json(text) == board

    kanbanflow.__version__
    '0.1.0'
"""
from __future__ import annotations

from kanbanflow.codec.structured import export_json, import_json
from kanbanflow.codec.tabular import export_csv, import_csv
from kanbanflow.convenience import KanbanBoard
from kanbanflow.engine.filters import BoardQuery, filter_board
from kanbanflow.engine.moves import MoveIntent, apply_move, move
from kanbanflow.engine.mutations import (
    bulk_insert,
    clear_column,
    create_card,
    delete_card,
    update_card,
)
from kanbanflow.errors import (
    CardNotFoundError,
    ColumnNotFoundError,
    ImportFormatError,
    InvalidMoveError,
    KanbanError,
    ValidationError,
)
from kanbanflow.model import (
    BoardState,
    Card,
    CardDraft,
    Column,
    Priority,
    Tag,
    default_board,
    sample_board,
)
from kanbanflow.validator.diagnostics import Diagnostic
from kanbanflow.validator.validator import validate_board as validate

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    "BoardState",
    "Card",
    "CardDraft",
    "Column",
    "Priority",
    "Tag",
    "BoardQuery",
    "MoveIntent",
    "Diagnostic",
    "KanbanBoard",
    "KanbanError",
    "ValidationError",
    "InvalidMoveError",
    "ImportFormatError",
    "CardNotFoundError",
    "ColumnNotFoundError",
    "default_board",
    "sample_board",
    "move",
    "apply_move",
    "filter_board",
    "create_card",
    "update_card",
    "delete_card",
    "clear_column",
    "bulk_insert",
    "validate",
    "export_json",
    "import_json",
    "export_csv",
    "import_csv",
]
