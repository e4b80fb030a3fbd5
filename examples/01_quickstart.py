#!/usr/bin/env python3
"""Example: Quickstart — kanbanflow

Minimal working example: start from the demo board, move a card,
filter, validate, and export to JSON and CSV.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install kanbanflow
"""
from __future__ import annotations

import kanbanflow
from kanbanflow.engine.filters import BoardQuery


def main() -> None:
    print(f"kanbanflow version: {kanbanflow.__version__}")

    # Step 1: Start from the seeded demo board
    board = kanbanflow.sample_board()
    for column in board.ordered_columns():
        print(f"  {column.title:<12} {len(column)} card(s)")

    # Step 2: Drag the first backlog card to the top of "To Do"
    card_id = board.columns["backlog"].card_ids[0]
    board = kanbanflow.move(board, "backlog", 0, "todo", 0, card_id)
    print(f"\nMoved {card_id}; history: {dict(board.cards[card_id].moved_to)}")

    # Step 3: Add a card and search
    board = kanbanflow.create_card(
        board, "todo", kanbanflow.CardDraft("Review pull request", priority=kanbanflow.Priority.HIGH)
    )
    hits = kanbanflow.filter_board(board, BoardQuery(priority=kanbanflow.Priority.HIGH))
    print(f"High-priority cards: {[card.title for card in hits.cards.values()]}")

    # Step 4: Validate and export
    print(f"Diagnostics: {kanbanflow.validate(board)}")
    print(f"\nJSON export: {len(kanbanflow.export_json(board))} chars")
    print(kanbanflow.export_csv(board).splitlines()[0])


if __name__ == "__main__":
    main()
