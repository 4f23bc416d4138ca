"""Seedable pseudo-random array generation on top of ``jax.random``.

A :class:`Generator` owns one JAX PRNG key and splits it on every draw, so a
seed plus a sequence of calls fully determines every value produced. The
module-level functions share one process-wide default generator. Nothing
here locks: serialize draws from a shared generator, or give each thread
its own.
"""

from __future__ import annotations

import logging
import numbers

import jax
import jax.numpy as jnp
import numpy as np

from . import dtypes
from .array import Array, check_allocation
from .config import CONFIG
from .errors import InvalidRangeError, UnknownTypeError
from .indexing import as_shape, shape_size

logger = logging.getLogger(__name__)

_MAX_SEED = 2**63 - 1


def _as_seed(seed: object) -> int:
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral):
        raise TypeError(f"seed must be an integer, got {seed!r}")
    if seed < 0 or seed > _MAX_SEED:
        raise InvalidRangeError(f"seed must be in [0, {_MAX_SEED}], got {seed}")
    return int(seed)


def _require(dtype, predicate, *, where: str) -> dtypes.ElementType:
    target = dtypes.resolve(dtype)
    if not predicate(target):
        raise UnknownTypeError(f"{where} does not support dtype {target.name}")
    return target


def _draw_integers(key, dims: tuple[int, ...], low: int, high: int, dtype: dtypes.ElementType) -> jnp.ndarray:
    lo, hi = dtypes.integer_bounds(dtype)
    kind = dtype.jax_dtype
    if high <= hi:
        return jax.random.randint(key, dims, np.asarray(low, dtype=kind), np.asarray(high, dtype=kind), dtype=kind)
    # high is one past the top of the kind and has no representation.
    if low > lo:
        shifted = jax.random.randint(key, dims, np.asarray(low - 1, dtype=kind), np.asarray(hi, dtype=kind), dtype=kind)
        return shifted + 1
    unsigned = jnp.dtype(f"uint{dtype.bits}")
    return jax.lax.bitcast_convert_type(jax.random.bits(key, dims, dtype=unsigned), kind)


class Generator:
    """Explicitly seeded source of uniform, normal, and integer draws."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed(CONFIG.default_seed if seed is None else seed)

    @property
    def draws(self) -> int:
        return self._draws

    @property
    def initial_seed(self) -> int:
        return self._seed

    def seed(self, seed: int) -> None:
        self._seed = _as_seed(seed)
        self._key = jax.random.PRNGKey(self._seed)
        self._draws = 0
        logger.debug("generator %#x seeded with %d", id(self), self._seed)

    def _next_key(self):
        self._key, subkey = jax.random.split(self._key)
        self._draws += 1
        return subkey

    def _wrap(self, shape: tuple[int, ...], dtype: dtypes.ElementType, values: jnp.ndarray) -> Array:
        return Array(shape, dtype, buffer=jnp.ravel(values))

    def random(self, shape=1, *, dtype=dtypes.float64) -> Array:
        """Uniform floats in ``[0, 1)``."""
        dims = as_shape(shape)
        target = _require(dtype, lambda t: t.is_floating, where="random()")
        check_allocation(shape_size(dims), target)
        values = jax.random.uniform(self._next_key(), dims, dtype=target.jax_dtype, minval=0.0, maxval=1.0)
        return self._wrap(dims, target, values)

    def normal(self, loc=0.0, scale=1.0, shape=1, *, dtype=dtypes.float64) -> Array:
        """Normal draws with mean ``loc`` and standard deviation ``scale``."""
        if scale < 0:
            raise InvalidRangeError(f"normal scale must be non-negative, got {scale}")
        dims = as_shape(shape)
        target = _require(dtype, lambda t: t.is_floating, where="normal()")
        check_allocation(shape_size(dims), target)
        values = jax.random.normal(self._next_key(), dims, dtype=target.jax_dtype)
        return self._wrap(dims, target, values * scale + loc)

    def integers(self, low, high=None, shape=1, *, dtype=dtypes.int64) -> Array:
        """Uniform integers in the half-open interval ``[low, high)``.

        ``integers(n)`` draws from ``[0, n)``.
        """
        if high is None:
            low, high = 0, low
        for name, bound in (("low", low), ("high", high)):
            if isinstance(bound, bool) or not isinstance(bound, numbers.Integral):
                raise TypeError(f"integers() {name} must be an integer, got {bound!r}")
        if high <= low:
            raise InvalidRangeError(f"integers() needs low < high, got [{low}, {high})")
        dims = as_shape(shape)
        target = _require(dtype, lambda t: t.is_integer, where="integers()")
        lo, hi = dtypes.integer_bounds(target)
        if low < lo or high - 1 > hi:
            raise InvalidRangeError(
                f"integers() interval [{low}, {high}) does not fit dtype {target.name} [{lo}, {hi}]"
            )
        check_allocation(shape_size(dims), target)
        values = _draw_integers(self._next_key(), dims, int(low), int(high), target)
        return self._wrap(dims, target, values)

    def __repr__(self) -> str:
        return f"Generator(seed={self._seed}, draws={self._draws})"


_DEFAULT_GENERATOR = Generator()


def default_generator() -> Generator:
    return _DEFAULT_GENERATOR


def seed(value: int) -> None:
    _DEFAULT_GENERATOR.seed(value)


def random(shape=1, *, dtype=dtypes.float64) -> Array:
    return _DEFAULT_GENERATOR.random(shape, dtype=dtype)


def normal(loc=0.0, scale=1.0, shape=1, *, dtype=dtypes.float64) -> Array:
    return _DEFAULT_GENERATOR.normal(loc, scale, shape, dtype=dtype)


def integers(low, high=None, shape=1, *, dtype=dtypes.int64) -> Array:
    return _DEFAULT_GENERATOR.integers(low, high, shape, dtype=dtype)


def rand(*dims: int):
    """Uniform ``[0, 1)`` array of shape ``dims``; a float when no dims are given."""
    if not dims:
        return _DEFAULT_GENERATOR.random(1)[0]
    return _DEFAULT_GENERATOR.random(dims)


def randn(*dims: int):
    """Standard-normal array of shape ``dims``; a float when no dims are given."""
    if not dims:
        return _DEFAULT_GENERATOR.normal(0.0, 1.0, 1)[0]
    return _DEFAULT_GENERATOR.normal(0.0, 1.0, dims)


def randint(low, high=None, size=1) -> Array:
    return _DEFAULT_GENERATOR.integers(low, high, size)
