"""Array creation: nested literals, fill rules, ranges, identity, uninitialized."""

from __future__ import annotations

from collections.abc import Sequence
import logging
import math
import numbers

import jax.numpy as jnp

from . import dtypes
from .array import Array, buffer_from_values, check_allocation, filled_buffer
from .dtypes import ElementType, coerce_scalar, promote_types, scalar_type
from .errors import InvalidRangeError, InvalidShapeError, ShapeMismatchError
from .indexing import as_shape, shape_size

logger = logging.getLogger(__name__)


def _is_nested(value: object) -> bool:
    if isinstance(value, (str, bytes)):
        return False
    if isinstance(value, (Sequence, Array)):
        return True
    return hasattr(value, "tolist") and getattr(value, "ndim", 0) > 0


def _children(value: object) -> list[object]:
    if isinstance(value, Array):
        return value.tolist()
    if hasattr(value, "tolist") and not isinstance(value, Sequence):
        return value.tolist()
    return list(value)


def _leading_shape(obj: object) -> tuple[int, ...]:
    dims: list[int] = []
    node = obj
    while _is_nested(node):
        items = _children(node)
        dims.append(len(items))
        if not items:
            break
        node = items[0]
    return tuple(dims)


def _collect(node: object, shape: tuple[int, ...], depth: int, path: tuple[int, ...], out: list[object]) -> None:
    where = "input" if not path else "input" + "".join(f"[{i}]" for i in path)
    if depth == len(shape):
        if _is_nested(node):
            raise ShapeMismatchError(f"{where} is a sequence where a scalar was expected at depth {depth}")
        out.append(node)
        return
    if not _is_nested(node):
        raise ShapeMismatchError(f"{where} is a scalar where a sequence of length {shape[depth]} was expected")
    items = _children(node)
    if len(items) != shape[depth]:
        raise ShapeMismatchError(f"{where} has length {len(items)}, expected {shape[depth]} at depth {depth}")
    for i, item in enumerate(items):
        _collect(item, shape, depth + 1, path + (i,), out)


def flatten_nested(obj: object) -> tuple[tuple[int, ...], list[object]]:
    """Split rectangular nested input into its shape and row-major scalars."""
    if not _is_nested(obj):
        raise InvalidShapeError("zero-dimensional arrays are not supported; wrap scalars in a sequence")
    shape = _leading_shape(obj)
    flat: list[object] = []
    _collect(obj, shape, 0, (), flat)
    return shape, flat


def array(obj, dtype=None) -> Array:
    """Build an Array from nested sequences.

    Without ``dtype`` the element type is the promotion of every scalar's
    kind (``float64`` for empty input). With ``dtype`` every value is coerced,
    truncating toward zero on float-to-integer narrowing.
    """
    shape, flat = flatten_nested(obj)
    if dtype is not None:
        target = dtypes.resolve(dtype)
    elif isinstance(obj, Array):
        target = obj.dtype
    elif getattr(obj, "dtype", None) is not None:
        target = dtypes.resolve(obj.dtype)
    elif flat:
        target = promote_types(*(scalar_type(v) for v in flat))
    else:
        target = dtypes.float64
    return Array(shape, target, buffer=buffer_from_values(flat, target, strict=dtype is None))


def asarray(obj, dtype=None) -> Array:
    if isinstance(obj, Array) and (dtype is None or dtypes.resolve(dtype) == obj.dtype):
        return obj
    return array(obj, dtype=dtype)


def empty(shape, dtype=dtypes.float64) -> Array:
    """Array whose contents are unspecified."""
    return Array(shape, dtype)


def full(shape, fill_value, dtype=None) -> Array:
    dims = as_shape(shape)
    target = scalar_type(fill_value) if dtype is None else dtypes.resolve(dtype)
    value = coerce_scalar(fill_value, target, strict=dtype is None)
    return Array(dims, target, buffer=filled_buffer(shape_size(dims), value, target))


def zeros(shape, dtype=dtypes.float64) -> Array:
    return full(shape, 0, dtype=dtype)


def ones(shape, dtype=dtypes.float64) -> Array:
    return full(shape, 1, dtype=dtype)


def empty_like(prototype: Array, dtype=None) -> Array:
    return empty(prototype.shape, prototype.dtype if dtype is None else dtype)


def zeros_like(prototype: Array, dtype=None) -> Array:
    return zeros(prototype.shape, prototype.dtype if dtype is None else dtype)


def ones_like(prototype: Array, dtype=None) -> Array:
    return ones(prototype.shape, prototype.dtype if dtype is None else dtype)


def full_like(prototype: Array, fill_value, dtype=None) -> Array:
    return full(prototype.shape, fill_value, prototype.dtype if dtype is None else dtype)


def _range_length(start, stop, step) -> int:
    if all(isinstance(v, numbers.Integral) for v in (start, stop, step)):
        span = int(stop) - int(start)
        return max(0, -(-span // int(step)))
    length = math.ceil((stop - start) / step)
    return max(0, int(length))


def arange(start, stop=None, step=1, *, dtype=None) -> Array:
    """Evenly stepped values over the half-open interval ``[start, stop)``.

    ``arange(stop)`` counts from zero. ``step`` may be negative but not zero.
    """
    if stop is None:
        start, stop = 0, start
    for name, value in (("start", start), ("stop", stop), ("step", step)):
        if isinstance(value, numbers.Complex) and not isinstance(value, numbers.Real):
            raise InvalidRangeError(f"arange {name} must be real, got {value!r}")
    if step == 0:
        raise InvalidRangeError("arange step must be non-zero")
    for name, value in (("start", start), ("stop", stop), ("step", step)):
        if not isinstance(value, numbers.Integral) and not math.isfinite(value):
            raise InvalidRangeError(f"arange {name} must be finite, got {value!r}")

    inferred = promote_types(scalar_type(start), scalar_type(stop), scalar_type(step))
    target = inferred if dtype is None else dtypes.resolve(dtype)
    length = _range_length(start, stop, step)
    check_allocation(length, target)
    logger.debug("arange(%r, %r, %r) -> %d x %s", start, stop, step, length, target.name)
    values = [start + i * step for i in range(length)]
    return Array((length,), target, buffer=buffer_from_values(values, target, strict=dtype is None))


def linspace(start, stop, num: int = 50, *, endpoint: bool = True, dtype=None) -> Array:
    """``num`` evenly spaced values from ``start`` to ``stop``.

    With ``endpoint`` (the default) the interval is closed and the last value
    is exactly ``stop``; ``num == 1`` yields ``[start]``.
    """
    if isinstance(num, bool) or not isinstance(num, numbers.Integral):
        raise InvalidRangeError(f"linspace num must be an integer, got {num!r}")
    if num < 0:
        raise InvalidRangeError(f"linspace num must be non-negative, got {num}")

    inferred = promote_types(dtypes.float64, scalar_type(start), scalar_type(stop))
    target = inferred if dtype is None else dtypes.resolve(dtype)
    count = int(num)
    check_allocation(count, target)
    divisor = (count - 1) if endpoint else count
    if count == 0:
        values: list[object] = []
    elif divisor == 0:
        values = [start]
    else:
        delta = (stop - start) / divisor
        values = [start + i * delta for i in range(count)]
        if endpoint:
            values[-1] = stop
    return Array((count,), target, buffer=buffer_from_values(values, target))


def eye(n: int, m: int | None = None, k: int = 0, dtype=dtypes.float64) -> Array:
    """2-D array with ones on diagonal ``k`` and zeros elsewhere."""
    rows = as_shape(n)[0]
    cols = rows if m is None else as_shape(m)[0]
    target: ElementType = dtypes.resolve(dtype)
    out = zeros((rows, cols), dtype=target)
    one = coerce_scalar(1, target)
    indices = [(i, i + k) for i in range(rows) if 0 <= i + k < cols]
    if indices:
        offsets = jnp.asarray([i * cols + j for i, j in indices])
        flat = out.buffer.at[offsets].set(one)
        out = Array((rows, cols), target, buffer=flat)
    return out


def identity(n: int, dtype=dtypes.float64) -> Array:
    """Square ``n x n`` array with the multiplicative identity on the diagonal."""
    return eye(n, dtype=dtype)
