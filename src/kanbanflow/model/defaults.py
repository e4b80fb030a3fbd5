"""Built-in boards: the empty four-column skeleton and the demo board."""
from __future__ import annotations

from kanbanflow.model.entities import BoardState, Card, Column, Priority, Tag

DEFAULT_COLUMN_ID = "backlog"

# (id, title) in display order.
DEFAULT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("backlog", "Backlog"),
    ("todo", "To Do"),
    ("inProgress", "In Progress"),
    ("done", "Done"),
)


def default_board() -> BoardState:
    """Return the fixed four-column skeleton with no cards."""
    return BoardState(
        columns={cid: Column(id=cid, title=title) for cid, title in DEFAULT_COLUMNS},
        cards={},
        column_order=tuple(cid for cid, _ in DEFAULT_COLUMNS),
    )


def _day(date: str) -> str:
    return f"{date}T00:00:00.000Z"


def sample_board() -> BoardState:
    """Return the seeded demo board shown on first run."""
    cards = [
        Card(
            id="card-1",
            title="Research React 19 Server Components",
            description="Deep dive into the new RSC architecture and how it integrates with Vite.",
            priority=Priority.LOW,
            tag=Tag.LEARNING,
            due_date="2025-12-25",
            created_at=_day("2025-01-20"),
            moved_to={"backlog": _day("2025-01-20"), "todo": _day("2025-01-21")},
        ),
        Card(
            id="card-2",
            title="Optimize image loading",
            description=(
                "Implement lazy loading and WebP conversion for all dashboard "
                "images to improve LCP."
            ),
            priority=Priority.MEDIUM,
            tag=Tag.ENHANCEMENT,
            created_at=_day("2025-01-18"),
            moved_to={"backlog": _day("2025-01-18")},
        ),
        Card(
            id="card-3",
            title="Fix mobile navigation menu",
            description=(
                "Hamburger menu does not close when clicking outside the drawer "
                "on iOS devices."
            ),
            priority=Priority.URGENT,
            tag=Tag.BUG,
            due_date="2025-10-30",
            created_at=_day("2025-01-19"),
            moved_to={"backlog": _day("2025-01-19"), "todo": _day("2025-01-19")},
        ),
        Card(
            id="card-4",
            title="Dark Mode Implementation",
            description="Add system preference detection and manual toggle for dark/light themes.",
            priority=Priority.HIGH,
            tag=Tag.FEATURE,
            due_date="2025-11-05",
            created_at=_day("2025-01-17"),
            moved_to={
                "backlog": _day("2025-01-17"),
                "todo": _day("2025-01-17"),
                "inProgress": _day("2025-01-20"),
            },
        ),
        Card(
            id="card-5",
            title="User Profile Settings",
            description=(
                "Allow users to update avatar, change password, and manage "
                "email notifications."
            ),
            priority=Priority.HIGH,
            tag=Tag.FEATURE,
            due_date="2025-11-15",
            created_at=_day("2025-01-16"),
            moved_to={
                "backlog": _day("2025-01-16"),
                "todo": _day("2025-01-16"),
                "inProgress": _day("2025-01-18"),
                "done": _day("2025-01-21"),
            },
        ),
        Card(
            id="card-6",
            title="Initial Project Setup",
            description="Set up Vite, TypeScript, Tailwind CSS, and folder structure.",
            priority=Priority.NONE,
            tag=Tag.ENHANCEMENT,
            due_date="2025-10-01",
            created_at=_day("2025-01-15"),
            moved_to={
                "backlog": _day("2025-01-15"),
                "todo": _day("2025-01-15"),
                "inProgress": _day("2025-01-15"),
                "done": _day("2025-01-16"),
            },
        ),
        Card(
            id="card-7",
            title="AI Auto-categorization",
            description=(
                "Explore using Gemini API to automatically tag incoming tasks "
                "based on description."
            ),
            priority=Priority.MEDIUM,
            tag=Tag.IDEA,
            created_at=_day("2025-01-22"),
            moved_to={"backlog": _day("2025-01-22")},
        ),
    ]
    placement = {
        "backlog": ("card-1", "card-2", "card-7"),
        "todo": ("card-3", "card-4"),
        "inProgress": ("card-5",),
        "done": ("card-6",),
    }
    return BoardState(
        columns={
            cid: Column(id=cid, title=title, card_ids=placement[cid])
            for cid, title in DEFAULT_COLUMNS
        },
        cards={card.id: card for card in cards},
        column_order=tuple(cid for cid, _ in DEFAULT_COLUMNS),
    )


__all__ = ["DEFAULT_COLUMN_ID", "DEFAULT_COLUMNS", "default_board", "sample_board"]
