"""Timing and host reporting shared by the ndjax benchmarks."""

from __future__ import annotations

from dataclasses import asdict
import platform
import statistics
import time
from typing import Any

import jax
import jax.numpy as jnp

from ndjax.config import CONFIG


def host_metadata() -> dict[str, Any]:
    """Where the numbers came from: interpreter, JAX backend and engine settings."""
    return {
        "python": platform.python_version(),
        "jax": jax.__version__,
        "backend": jax.default_backend(),
        "default_int": jnp.asarray(0).dtype.name,
        "engine": asdict(CONFIG),
    }


def block_until_ready(value: object) -> None:
    buffer = getattr(value, "buffer", value)
    if hasattr(buffer, "block_until_ready"):
        buffer.block_until_ready()


def summarize_ms(timings: list[float]) -> dict[str, float]:
    """Mean, median and 90th percentile of per-call timings."""
    if len(timings) == 1:
        only = timings[0]
        return {"mean_ms": only, "p50_ms": only, "p90_ms": only}
    deciles = statistics.quantiles(timings, n=10, method="inclusive")
    return {
        "mean_ms": statistics.fmean(timings),
        "p50_ms": statistics.median(timings),
        "p90_ms": deciles[-1],
    }


def sample_ms(fn, *, repeats: int, warmup: int, samples: int) -> list[float]:
    """Average milliseconds per call of ``fn``, one entry per sample."""
    for _ in range(max(0, warmup)):
        block_until_ready(fn())

    rows: list[float] = []
    for _ in range(samples):
        start_ns = time.perf_counter_ns()
        for _ in range(repeats):
            block_until_ready(fn())
        elapsed_ns = time.perf_counter_ns() - start_ns
        rows.append((elapsed_ns / repeats) / 1e6)
    return rows
