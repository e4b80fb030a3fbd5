#!/usr/bin/env python3
"""Example: Smart Add without a network connection

Shows the extraction pipeline end to end with a ``StaticTransport``
standing in for the provider, so no API key or network is needed.
Swap in ``RequestsTransport`` (the default) and a real key to call
Gemini or Zhipu.

Usage:
    python examples/02_smart_add_offline.py

Requirements:
    pip install kanbanflow
"""
from __future__ import annotations

import json

from kanbanflow import KanbanBoard
from kanbanflow.config import AppSettings, GeminiSettings
from kanbanflow.extract import ExtractionError, ProviderResponse, StaticTransport, TaskExtractor

NOTES = "Login is broken for SSO users, fix asap. Also we should write onboarding docs at some point."

CANNED_TASKS = [
    {"title": "Fix SSO login", "description": "SSO users cannot sign in", "priority": "Urgent", "tag": "Bug"},
    {"title": "Write onboarding docs", "priority": "Low", "tag": "Learning"},
]


def main() -> None:
    settings = AppSettings().with_settings(GeminiSettings(api_key="demo-key"))
    reply = ProviderResponse.from_payload(
        {"candidates": [{"content": {"parts": [{"text": json.dumps(CANNED_TASKS)}]}}]}
    )
    transport = StaticTransport([reply])
    extractor = TaskExtractor(settings, transport)

    board = KanbanBoard()
    added = board.smart_add(extractor, NOTES)
    print(f"{extractor.provider_name} extracted {added} task(s):")
    for card in board.state.cards_in("backlog"):
        print(f"  [{card.priority.value:<6}] {card.title} ({card.tag.value})")
    print(f"Request sent to: {transport.requests[0].url}")

    # A failed extraction leaves the board as it was
    broken = TaskExtractor(settings, StaticTransport([ProviderResponse(status=401, body="Unauthorized")]))
    try:
        board.smart_add(broken, NOTES)
    except ExtractionError as exc:
        print(f"\n{exc.kind.value}: {exc.message}")
    print(f"Cards on board: {len(board)}")


if __name__ == "__main__":
    main()
