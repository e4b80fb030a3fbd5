"""Benchmark: structured export/import latency (p50/p95/mean).

Measures per-call latency of a JSON round trip, including the invariant
check performed on import.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

import kanbanflow
from bench_throughput import build_board

_WARMUP: int = 20
_ITERATIONS: int = 500


def bench_codec_latency(iterations: int = _ITERATIONS, cards_per_column: int = 50) -> dict[str, object]:
    """Benchmark ``export_json`` followed by ``import_json``.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    board = build_board(cards_per_column)
    for _ in range(min(_WARMUP, iterations)):
        kanbanflow.import_json(kanbanflow.export_json(board))

    latencies_ms: list[float] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        kanbanflow.import_json(kanbanflow.export_json(board))
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": f"kanban_json_roundtrip_{board.card_count}_cards",
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1) if total else 0.0,
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


if __name__ == "__main__":
    result = bench_codec_latency()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
