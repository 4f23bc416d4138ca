"""Environment-driven engine settings and JAX backend setup."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
import sys
from typing import Final

import jax

ENV_DEFAULT_SEED: Final[str] = "NDJAX_DEFAULT_SEED"
ENV_MAX_ALLOCATION_BYTES: Final[str] = "NDJAX_MAX_ALLOCATION_BYTES"
ENV_PRINT_THRESHOLD: Final[str] = "NDJAX_PRINT_THRESHOLD"


def _int_setting(environ: Mapping[str, str], name: str, default: int, *, minimum: int) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class EngineConfig:
    default_seed: int = 0
    max_allocation_bytes: int = sys.maxsize
    print_threshold: int = 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        return cls(
            default_seed=_int_setting(env, ENV_DEFAULT_SEED, 0, minimum=0),
            max_allocation_bytes=_int_setting(env, ENV_MAX_ALLOCATION_BYTES, sys.maxsize, minimum=0),
            print_threshold=_int_setting(env, ENV_PRINT_THRESHOLD, 1000, minimum=1),
        )


CONFIG: Final[EngineConfig] = EngineConfig.from_env()


def configure_jax() -> None:
    # 64-bit kinds keep their width only with x64 enabled.
    jax.config.update("jax_enable_x64", True)
