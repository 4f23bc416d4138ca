"""ndjax public API."""

import logging

from .config import configure_jax

configure_jax()

from . import random
from .array import Array
from .creation import (
    arange,
    array,
    asarray,
    empty,
    empty_like,
    eye,
    full,
    full_like,
    identity,
    linspace,
    ones,
    ones_like,
    zeros,
    zeros_like,
)
from .dtypes import (
    ElementType,
    bool_,
    complex64,
    complex128,
    complex_,
    float16,
    float32,
    float64,
    float_,
    int8,
    int16,
    int32,
    int64,
    int_,
    promote,
    promote_types,
    resolve as dtype,
    uint,
    uint8,
    uint16,
    uint32,
    uint64,
)
from .errors import (
    AllocationError,
    CoercionError,
    IndexOutOfRangeError,
    InvalidRangeError,
    InvalidShapeError,
    NDError,
    NDIndexError,
    NDShapeError,
    NDTypeError,
    RankMismatchError,
    ShapeMismatchError,
    UnknownTypeError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Array",
    "array",
    "asarray",
    "empty",
    "empty_like",
    "zeros",
    "zeros_like",
    "ones",
    "ones_like",
    "full",
    "full_like",
    "arange",
    "linspace",
    "eye",
    "identity",
    "random",
    "dtype",
    "ElementType",
    "promote",
    "promote_types",
    "bool_",
    "int8",
    "int16",
    "int32",
    "int64",
    "int_",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uint",
    "float16",
    "float32",
    "float64",
    "float_",
    "complex64",
    "complex128",
    "complex_",
    "NDError",
    "NDTypeError",
    "NDShapeError",
    "NDIndexError",
    "UnknownTypeError",
    "CoercionError",
    "ShapeMismatchError",
    "InvalidShapeError",
    "InvalidRangeError",
    "AllocationError",
    "IndexOutOfRangeError",
    "RankMismatchError",
]
