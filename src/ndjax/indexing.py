"""Row-major layout helpers and coordinate-to-offset resolution."""

from __future__ import annotations

from collections.abc import Sequence
import numbers

from .errors import IndexOutOfRangeError, InvalidShapeError, RankMismatchError


def _as_extent(dim: object) -> int:
    if isinstance(dim, bool) or not isinstance(dim, numbers.Integral):
        raise InvalidShapeError(f"shape extents must be integers, got {dim!r}")
    extent = int(dim)
    if extent < 0:
        raise InvalidShapeError(f"shape extents must be non-negative, got {extent}")
    return extent


def as_shape(shape: object) -> tuple[int, ...]:
    """Normalize an int or a sequence of ints into a shape tuple."""
    if isinstance(shape, numbers.Integral) and not isinstance(shape, bool):
        return (_as_extent(shape),)
    if not isinstance(shape, Sequence) or isinstance(shape, str):
        raise InvalidShapeError(f"shape must be an int or a sequence of ints, got {shape!r}")
    if len(shape) == 0:
        raise InvalidShapeError("zero-dimensional arrays are not supported")
    return tuple(_as_extent(dim) for dim in shape)


def shape_size(shape: tuple[int, ...]) -> int:
    size = 1
    for dim in shape:
        size *= int(dim)
    return size


def row_major_strides(shape: tuple[int, ...]) -> tuple[int, ...]:
    """Elements to skip per unit step along each axis."""
    strides = [1] * len(shape)
    for axis in range(len(shape) - 2, -1, -1):
        strides[axis] = strides[axis + 1] * shape[axis + 1]
    return tuple(strides)


def _to_coordinate(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        if hasattr(value, "item") and getattr(value, "ndim", None) == 0:
            return _to_coordinate(value.item())
        raise TypeError(f"array coordinates must be integers, got {value!r}")
    return int(value)


def as_coordinates(key: object) -> tuple[int, ...]:
    if isinstance(key, tuple):
        return tuple(_to_coordinate(k) for k in key)
    return (_to_coordinate(key),)


def normalize_coordinate(index: int, extent: int, *, axis: int) -> int:
    resolved = extent + index if index < 0 else index
    if resolved < 0 or resolved >= extent:
        raise IndexOutOfRangeError(axis=axis, index=index, extent=extent)
    return resolved


def resolve_offset(
    shape: tuple[int, ...],
    coords: tuple[int, ...],
    strides: tuple[int, ...] | None = None,
) -> int:
    """Resolve one coordinate per axis to a linear buffer offset."""
    if len(coords) != len(shape):
        raise RankMismatchError(expected=len(shape), got=len(coords))
    if strides is None:
        strides = row_major_strides(shape)
    offset = 0
    for axis, (index, extent, stride) in enumerate(zip(coords, shape, strides)):
        offset += normalize_coordinate(index, extent, axis=axis) * stride
    return offset
