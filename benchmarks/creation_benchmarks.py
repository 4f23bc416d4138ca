"""Time array creation, seeded draws, and indexed access at a few sizes."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable

from _bench_utils import host_metadata, sample_ms, summarize_ms

import ndjax
from ndjax.random import Generator


@dataclass(frozen=True)
class BenchCase:
    name: str
    note: str
    build: Callable[[int], Callable[[], object]]


@dataclass(frozen=True)
class BenchRow:
    case: str
    size: int
    mean_ms: float
    p50_ms: float
    p90_ms: float


def _literal(n: int) -> Callable[[], object]:
    literal = [[float(i * n + j) for j in range(n)] for i in range(n)]
    return lambda: ndjax.array(literal)


def _zeros(n: int) -> Callable[[], object]:
    return lambda: ndjax.zeros((n, n))


def _arange(n: int) -> Callable[[], object]:
    return lambda: ndjax.arange(0, n * n, 1)


def _uniform(n: int) -> Callable[[], object]:
    gen = Generator(0)
    return lambda: gen.random((n, n))


def _indexed_writes(n: int) -> Callable[[], object]:
    arr = ndjax.zeros((n, n))

    def run() -> object:
        for i in range(n):
            arr[i, -1 - i] = i
        return arr

    return run


CASES: tuple[BenchCase, ...] = (
    BenchCase("array_literal", "nested list -> float64 array", _literal),
    BenchCase("zeros", "fill rule", _zeros),
    BenchCase("arange", "half-open range of n*n values", _arange),
    BenchCase("uniform", "seeded uniform draw", _uniform),
    BenchCase("indexed_writes", "n writes along the anti-diagonal", _indexed_writes),
)


def run(sizes: list[int], *, repeats: int, warmup: int, samples: int) -> list[BenchRow]:
    rows: list[BenchRow] = []
    for case in CASES:
        for size in sizes:
            timings = sample_ms(case.build(size), repeats=repeats, warmup=warmup, samples=samples)
            rows.append(BenchRow(case=case.name, size=size, **summarize_ms(timings)))
    return rows


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--sizes", default="8,32,128", help="comma-separated square extents")
    parser.add_argument("--repeats", type=int, default=5)
    parser.add_argument("--warmup", type=int, default=2)
    parser.add_argument("--samples", type=int, default=5)
    parser.add_argument("--json-out", default="", help="optional path for machine-readable results")
    args = parser.parse_args()

    sizes = [int(s) for s in args.sizes.split(",") if s.strip()]
    rows = run(sizes, repeats=args.repeats, warmup=args.warmup, samples=args.samples)

    print("| Case | Size | Mean ms | p50 ms | p90 ms |")
    print("|---|---:|---:|---:|---:|")
    for row in rows:
        print(f"| `{row.case}` | {row.size} | {row.mean_ms:.3f} | {row.p50_ms:.3f} | {row.p90_ms:.3f} |")

    if args.json_out:
        out = Path(args.json_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        payload = {"host": host_metadata(), "rows": [asdict(row) for row in rows]}
        out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
