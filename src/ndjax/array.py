"""Typed multidimensional array over a flat JAX buffer."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
import logging

import jax
import jax.numpy as jnp
import numpy as np

from . import dtypes
from .config import CONFIG
from .dtypes import ElementType, coerce_scalar
from .errors import AllocationError, ShapeMismatchError
from .indexing import as_coordinates, as_shape, resolve_offset, row_major_strides, shape_size

logger = logging.getLogger(__name__)

_SUMMARY_EDGE_ITEMS = 3


def check_allocation(size: int, dtype: ElementType) -> int:
    """Return the byte count of a ``size``-element buffer or raise AllocationError."""
    nbytes = size * dtype.itemsize
    if nbytes > CONFIG.max_allocation_bytes:
        raise AllocationError(
            f"cannot allocate {size} elements of {dtype.name} ({nbytes} bytes); "
            f"limit is {CONFIG.max_allocation_bytes} bytes"
        )
    return nbytes


def backed_buffer(build: Callable[[], jnp.ndarray], size: int, dtype: ElementType) -> jnp.ndarray:
    """Run a buffer-building call, reporting out-of-memory as AllocationError."""
    nbytes = check_allocation(size, dtype)
    logger.debug("allocating %d x %s (%d bytes)", size, dtype.name, nbytes)
    try:
        return build().block_until_ready()
    except MemoryError as exc:
        raise AllocationError(f"cannot allocate {nbytes} bytes for {size} x {dtype.name}") from exc
    except jax.errors.JaxRuntimeError as exc:
        if "RESOURCE_EXHAUSTED" not in str(exc):
            raise
        raise AllocationError(f"cannot allocate {nbytes} bytes for {size} x {dtype.name}") from exc


def allocate(size: int, dtype: ElementType) -> jnp.ndarray:
    """Allocate a flat buffer whose contents are unspecified."""
    return backed_buffer(lambda: jnp.empty((size,), dtype=dtype.jax_dtype), size, dtype)


def filled_buffer(size: int, value: object, dtype: ElementType) -> jnp.ndarray:
    # NumPy holds uint64 values past 2**63 that JAX rejects as Python ints.
    scalar = np.asarray(value, dtype=dtype.jax_dtype)
    return backed_buffer(lambda: jnp.full((size,), scalar, dtype=dtype.jax_dtype), size, dtype)


def buffer_from_values(values: Iterable[object], dtype: ElementType, *, strict: bool = False) -> jnp.ndarray:
    """Coerce each value into ``dtype`` and pack them into a flat buffer.

    ``strict`` rejects integers outside the kind's range instead of wrapping.
    """
    coerced = [coerce_scalar(v, dtype, strict=strict) for v in values]
    size = len(coerced)
    return backed_buffer(
        lambda: jnp.asarray(np.asarray(coerced, dtype=dtype.jax_dtype).reshape((size,))), size, dtype
    )


def _nest(flat: list[object], shape: tuple[int, ...]) -> list[object]:
    if len(shape) == 1:
        return list(flat)
    step = shape_size(shape[1:])
    return [_nest(flat[i * step : (i + 1) * step], shape[1:]) for i in range(shape[0])]


def _format_nested(value: object, *, summarize: bool) -> str:
    if not isinstance(value, list):
        return repr(value)
    items = value
    if summarize and len(items) > 2 * _SUMMARY_EDGE_ITEMS:
        head = [_format_nested(v, summarize=True) for v in items[:_SUMMARY_EDGE_ITEMS]]
        tail = [_format_nested(v, summarize=True) for v in items[-_SUMMARY_EDGE_ITEMS:]]
        return "[" + ", ".join([*head, "...", *tail]) + "]"
    return "[" + ", ".join(_format_nested(v, summarize=summarize) for v in items) + "]"


class Array:
    """Homogeneous row-major array with a fixed shape and element type.

    Shape and dtype never change after construction. Elements change only
    through indexed writes (``arr[i, j] = v``) or :meth:`fill`. Each write
    swaps in an updated JAX buffer, so buffers handed out by :attr:`buffer`
    or :meth:`to_jax` are snapshots.
    """

    __slots__ = ("_shape", "_dtype", "_strides", "_buffer")

    def __init__(self, shape, dtype=dtypes.float64, *, buffer=None) -> None:
        self._shape = as_shape(shape)
        self._dtype = dtypes.resolve(dtype)
        self._strides = row_major_strides(self._shape)
        size = shape_size(self._shape)
        if buffer is None:
            self._buffer = allocate(size, self._dtype)
            return

        flat = jnp.ravel(jnp.asarray(buffer))
        if int(flat.shape[0]) != size:
            raise ShapeMismatchError(
                f"buffer holds {int(flat.shape[0])} elements but shape {self._shape} needs {size}"
            )
        check_allocation(size, self._dtype)
        if flat.dtype != self._dtype.jax_dtype:
            flat = flat.astype(self._dtype.jax_dtype)
        self._buffer = flat

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def size(self) -> int:
        return shape_size(self._shape)

    @property
    def dtype(self) -> ElementType:
        return self._dtype

    @property
    def itemsize(self) -> int:
        return self._dtype.itemsize

    @property
    def nbytes(self) -> int:
        return self.itemsize * self.size

    @property
    def strides(self) -> tuple[int, ...]:
        """Row-major strides counted in elements, not bytes."""
        return self._strides

    @property
    def buffer(self) -> jnp.ndarray:
        return self._buffer

    @property
    def flat(self) -> Iterator[object]:
        return iter(self._buffer.tolist())

    def offset_of(self, *coords: int) -> int:
        return resolve_offset(self._shape, as_coordinates(coords), self._strides)

    def __getitem__(self, key):
        offset = resolve_offset(self._shape, as_coordinates(key), self._strides)
        return self._buffer[offset].item()

    def __setitem__(self, key, value) -> None:
        offset = resolve_offset(self._shape, as_coordinates(key), self._strides)
        scalar = np.asarray(coerce_scalar(value, self._dtype), dtype=self._dtype.jax_dtype)
        self._buffer = self._buffer.at[offset].set(scalar)

    def item(self, *coords: int):
        return self[coords]

    def fill(self, value) -> None:
        scalar = coerce_scalar(value, self._dtype)
        self._buffer = filled_buffer(self.size, scalar, self._dtype)

    def tolist(self) -> list[object]:
        return _nest(self._buffer.tolist(), self._shape)

    def to_jax(self) -> jnp.ndarray:
        return jnp.reshape(self._buffer, self._shape)

    def copy(self) -> "Array":
        # JAX buffers are immutable, so sharing one is safe.
        return Array(self._shape, self._dtype, buffer=self._buffer)

    def astype(self, dtype) -> "Array":
        target = dtypes.resolve(dtype)
        if target == self._dtype:
            return self.copy()
        return Array(self._shape, target, buffer=buffer_from_values(self._buffer.tolist(), target))

    def __len__(self) -> int:
        return self._shape[0]

    def __iter__(self) -> Iterator[object]:
        return iter(self.tolist())

    def __repr__(self) -> str:
        summarize = self.size > CONFIG.print_threshold
        body = _format_nested(self.tolist(), summarize=summarize)
        return f"Array({body}, dtype={self._dtype.name})"

    def __str__(self) -> str:
        return _format_nested(self.tolist(), summarize=self.size > CONFIG.print_threshold)
