"""Print a summary table of saved kanbanflow benchmark results."""
from __future__ import annotations

import json
from pathlib import Path

RESULT_FILES = (
    "move_throughput_baseline.json",
    "filter_throughput_baseline.json",
    "latency_baseline.json",
)


def _load(path: Path) -> dict[str, object] | None:
    if not path.exists():
        return None
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)  # type: ignore[return-value]


def main(results_dir: Path | None = None) -> None:
    results_dir = results_dir or Path(__file__).parent / "results"

    print(f"\n{'=' * 72}")
    print("  kanbanflow Benchmark Results")
    print(f"{'=' * 72}")
    print(f"{'Operation':<40} {'Ops/sec':>14} {'Avg Latency':>14}")
    print("-" * 72)

    for fname in RESULT_FILES:
        data = _load(results_dir / fname)
        if data is None:
            print(f"  (no results for {fname}; run the benchmark first)")
            continue
        operation = str(data.get("operation", fname))
        ops_sec = float(data.get("ops_per_second", 0))  # type: ignore[arg-type]
        avg_lat = float(data.get("avg_latency_ms", 0))  # type: ignore[arg-type]
        ops_str = f"{ops_sec:,.0f}" if ops_sec > 0 else "n/a"
        lat_str = f"{avg_lat:.3f}ms" if avg_lat > 0 else "n/a"
        print(f"{operation:<40} {ops_str:>14} {lat_str:>14}")

    print(f"{'=' * 72}")
    print("  Run all benchmarks:")
    print("    python benchmarks/bench_throughput.py")
    print("    python benchmarks/bench_latency.py")
    print(f"{'=' * 72}")


if __name__ == "__main__":
    main()
