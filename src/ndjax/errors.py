"""Structured error types for dtype, shape, index, and allocation failures."""

from __future__ import annotations

from dataclasses import dataclass


class NDError(Exception):
    """Base class for structured ndjax errors."""


class NDTypeError(NDError):
    """Element-type resolution or conversion failure."""


class UnknownTypeError(NDTypeError):
    """A dtype designator or literal value that maps to no registered kind."""


class CoercionError(NDTypeError):
    """A value that cannot be stored in the requested kind (e.g. nan into an integer)."""


class NDShapeError(NDError):
    """Shape construction or compatibility failure."""


class ShapeMismatchError(NDShapeError):
    """Nested input whose sequences disagree in length or depth."""


class InvalidShapeError(NDShapeError):
    """Shape descriptor that is empty, negative, or not made of integers."""


class InvalidRangeError(NDError, ValueError):
    """Degenerate range or distribution parameters."""


class AllocationError(NDError, MemoryError):
    """Requested buffer cannot be allocated."""


class NDIndexError(NDError, IndexError):
    """Coordinate resolution failure."""


@dataclass(frozen=True)
class IndexOutOfRangeError(NDIndexError):
    """Coordinate outside its dimension after negative-index remapping."""

    axis: int
    index: int
    extent: int

    def __str__(self) -> str:
        return f"index {self.index} is out of bounds for axis {self.axis} with extent {self.extent}"


@dataclass(frozen=True)
class RankMismatchError(NDIndexError):
    """Coordinate tuple whose arity differs from the array rank."""

    expected: int
    got: int

    def __str__(self) -> str:
        noun = "coordinate" if self.expected == 1 else "coordinates"
        return f"array of rank {self.expected} needs {self.expected} {noun}, got {self.got}"
