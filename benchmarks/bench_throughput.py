"""Benchmark: move and filter throughput.

Measures how many card moves and filtered projections complete per
second on a board of a few hundred cards, using the public engine API.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

import kanbanflow
from kanbanflow.engine.filters import BoardQuery
from kanbanflow.model.entities import BoardState, CardDraft, Priority, Tag

_ITERATIONS: int = 5_000
_FILTER_ITERATIONS: int = 2_000
_NOW = "2025-01-20T09:15:00.000Z"


def build_board(cards_per_column: int = 100) -> BoardState:
    """Return the default board with *cards_per_column* cards in every column."""
    board = kanbanflow.default_board()
    priorities = list(Priority)
    tags = list(Tag)
    for column_id in board.column_order:
        drafts = [
            CardDraft(
                title=f"{column_id} task {i}",
                description="benchmark card" if i % 3 else "needs review",
                priority=priorities[i % len(priorities)],
                tag=tags[i % len(tags)],
            )
            for i in range(cards_per_column)
        ]
        board = kanbanflow.bulk_insert(board, column_id, drafts, now=_NOW)
    return board


def _report(operation: str, iterations: int, total: float) -> dict[str, object]:
    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1) if total else 0.0,
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_move_throughput(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark cross-column moves, bouncing one card between two columns.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    board = build_board()
    card_id = board.columns["todo"].card_ids[0]
    columns = ("todo", "inProgress")

    start = time.perf_counter()
    for i in range(iterations):
        source, dest = columns[i % 2], columns[(i + 1) % 2]
        board = kanbanflow.move(board, source, 0, dest, 0, card_id, now=_NOW)
    total = time.perf_counter() - start
    return _report("kanban_move_throughput", iterations, total)


def bench_filter_throughput(iterations: int = _FILTER_ITERATIONS) -> dict[str, object]:
    """Benchmark filtered projections combining text, priority and tag."""
    board = build_board()
    query = BoardQuery(text="review", priority=Priority.HIGH, tag=Tag.BUG)

    start = time.perf_counter()
    for _ in range(iterations):
        kanbanflow.filter_board(board, query)
    total = time.perf_counter() - start
    return _report("kanban_filter_throughput", iterations, total)


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_move_throughput, "move_throughput_baseline.json"),
        (bench_filter_throughput, "filter_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
