"""Tabular (CSV) board export and import.

The tabular format is deliberately lossy: one row per card, no column
membership, no ordering, no timestamps::

    ID,Title,Description,Priority,Tag,Due Date
    card-1,"Fix login","Button ""Sign in"" broken",High,Bug,2025-11-01

Title and description are always double-quoted with embedded quotes
doubled.  Importing rebuilds the fixed four-column skeleton and places
every card in the backlog column in row order, replacing the board.
"""
from __future__ import annotations

import csv
import io
import logging

from kanbanflow.errors import ImportFormatError, ValidationError
from kanbanflow.model.defaults import DEFAULT_COLUMN_ID, default_board
from kanbanflow.model.entities import BoardState, Card, Priority, Tag, utc_now

logger = logging.getLogger(__name__)

CSV_HEADER: tuple[str, ...] = ("ID", "Title", "Description", "Priority", "Tag", "Due Date")


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def export_csv(board: BoardState) -> str:
    """Serialize every card of *board* to CSV text, one row per card."""
    lines = [",".join(CSV_HEADER)]
    for card in board.cards.values():
        lines.append(
            ",".join(
                [
                    card.id,
                    _quote(card.title),
                    _quote(card.description),
                    card.priority.value,
                    card.tag.value,
                    card.due_date,
                ]
            )
        )
    return "\n".join(lines) + "\n"


def import_csv(text: str, *, now: str | None = None) -> BoardState:
    """Build a fresh board from CSV *text*.

    Parameters
    ----------
    text:
        CSV document whose first row is the ``CSV_HEADER``.
    now:
        Timestamp used for every imported card's ``created_at`` and its
        ``moved_to`` backlog entry.  Defaults to ``utc_now()``.

    Returns
    -------
    BoardState
        The default four-column board with all cards in the backlog.

    Raises
    ------
    ImportFormatError
        If the document is empty or the header row does not match.
    """
    rows = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    rows = [row for row in rows if any(cell.strip() for cell in row)]
    if not rows:
        raise ImportFormatError("document is empty", "csv")

    header = tuple(cell.strip().lower() for cell in rows[0])
    if header[: len(CSV_HEADER)] != tuple(h.lower() for h in CSV_HEADER):
        raise ImportFormatError(
            f"expected header {','.join(CSV_HEADER)!r}, got {','.join(rows[0])!r}", "csv"
        )

    stamp = now if now is not None else utc_now()
    cards: dict[str, Card] = {}
    for line_no, row in enumerate(rows[1:], start=2):
        if len(row) < len(CSV_HEADER):
            logger.warning("Skipping CSV row %d: expected 6 fields, got %d", line_no, len(row))
            continue
        card_id, title, description, priority, tag, due_date = (cell.strip() for cell in row[:6])
        if not card_id:
            logger.warning("Skipping CSV row %d: empty ID", line_no)
            continue
        try:
            card = Card(
                id=card_id,
                title=title,
                description=description,
                priority=Priority.parse(priority, Priority.MEDIUM),
                tag=Tag.parse(tag, Tag.FEATURE),
                due_date=due_date,
                created_at=stamp,
                moved_to={DEFAULT_COLUMN_ID: stamp},
            )
        except ValidationError as exc:
            logger.warning("Skipping CSV row %d: %s", line_no, exc)
            continue
        # A repeated id keeps the later row but its first position.
        cards[card_id] = card

    board = default_board()
    backlog = board.columns[DEFAULT_COLUMN_ID]
    columns = dict(board.columns)
    columns[DEFAULT_COLUMN_ID] = backlog.with_card_ids(list(cards))
    return BoardState(columns=columns, cards=cards, column_order=board.column_order)


__all__ = ["CSV_HEADER", "export_csv", "import_csv"]
