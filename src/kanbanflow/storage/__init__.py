"""Board persistence."""
from __future__ import annotations

from kanbanflow.storage.store import DEFAULT_BOARD_KEY, BoardStore

__all__ = ["DEFAULT_BOARD_KEY", "BoardStore"]
