"""Closed element-type registry with promotion and scalar coercion rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import reduce
import logging
import math
import numbers
from typing import Final

import jax.numpy as jnp

from .errors import CoercionError, UnknownTypeError

logger = logging.getLogger(__name__)


class Category(str, Enum):
    BOOL = "bool"
    INTEGER = "integer"
    FLOATING = "floating"
    COMPLEX = "complex"


_CATEGORY_RANK: Final[dict[Category, int]] = {
    Category.BOOL: 0,
    Category.INTEGER: 1,
    Category.FLOATING: 2,
    Category.COMPLEX: 3,
}


@dataclass(frozen=True)
class ElementType:
    """One registered scalar kind."""

    name: str
    category: Category
    itemsize: int
    signed: bool = True

    @property
    def bits(self) -> int:
        return self.itemsize * 8

    @property
    def rank(self) -> tuple[int, int, int]:
        """Promotion key; a total order over the registry."""
        return (_CATEGORY_RANK[self.category], self.itemsize, int(self.signed))

    @property
    def jax_dtype(self) -> jnp.dtype:
        return jnp.dtype(self.name)

    @property
    def is_integer(self) -> bool:
        return self.category is Category.INTEGER

    @property
    def is_floating(self) -> bool:
        return self.category is Category.FLOATING

    @property
    def is_complex(self) -> bool:
        return self.category is Category.COMPLEX

    def __repr__(self) -> str:
        return f"dtype({self.name!r})"

    def __str__(self) -> str:
        return self.name


bool_ = ElementType("bool", Category.BOOL, 1, signed=False)
int8 = ElementType("int8", Category.INTEGER, 1)
int16 = ElementType("int16", Category.INTEGER, 2)
int32 = ElementType("int32", Category.INTEGER, 4)
int64 = ElementType("int64", Category.INTEGER, 8)
uint8 = ElementType("uint8", Category.INTEGER, 1, signed=False)
uint16 = ElementType("uint16", Category.INTEGER, 2, signed=False)
uint32 = ElementType("uint32", Category.INTEGER, 4, signed=False)
uint64 = ElementType("uint64", Category.INTEGER, 8, signed=False)
float16 = ElementType("float16", Category.FLOATING, 2)
float32 = ElementType("float32", Category.FLOATING, 4)
float64 = ElementType("float64", Category.FLOATING, 8)
complex64 = ElementType("complex64", Category.COMPLEX, 8)
complex128 = ElementType("complex128", Category.COMPLEX, 16)

# Platform defaults.
int_ = int64
uint = uint64
float_ = float64
complex_ = complex128

ALL_TYPES: Final[tuple[ElementType, ...]] = (
    bool_,
    int8,
    int16,
    int32,
    int64,
    uint8,
    uint16,
    uint32,
    uint64,
    float16,
    float32,
    float64,
    complex64,
    complex128,
)

_BY_NAME: Final[dict[str, ElementType]] = {t.name: t for t in ALL_TYPES}

_ALIASES: Final[dict[str, ElementType]] = {
    "bool_": bool_,
    "?": bool_,
    "b1": bool_,
    "int": int_,
    "int_": int_,
    "long": int_,
    "i1": int8,
    "i2": int16,
    "i4": int32,
    "i8": int64,
    "uint": uint,
    "u1": uint8,
    "u2": uint16,
    "u4": uint32,
    "u8": uint64,
    "float": float_,
    "float_": float_,
    "half": float16,
    "single": float32,
    "double": float64,
    "f2": float16,
    "f4": float32,
    "f8": float64,
    "complex": complex_,
    "complex_": complex_,
    "csingle": complex64,
    "cdouble": complex128,
    "c8": complex64,
    "c16": complex128,
}

_PYTHON_TYPES: Final[dict[type, ElementType]] = {
    bool: bool_,
    int: int_,
    float: float_,
    complex: complex_,
}


def resolve(designator: object) -> ElementType:
    """Map a dtype designator onto its registered ElementType.

    Accepted designators: an ElementType, a name or short code (``"int32"``,
    ``"double"``, ``"f8"``), one of the builtin types ``bool``/``int``/
    ``float``/``complex``, or a JAX/NumPy dtype (or object carrying one).
    """
    if isinstance(designator, ElementType):
        return designator
    if isinstance(designator, str):
        key = designator.strip().lower()
        found = _BY_NAME.get(key) or _ALIASES.get(key)
        if found is None:
            raise UnknownTypeError(f"unknown dtype designator {designator!r}")
        return found
    if isinstance(designator, type) and designator in _PYTHON_TYPES:
        return _PYTHON_TYPES[designator]
    if designator is None:
        raise UnknownTypeError("dtype designator must not be None")
    try:
        name = jnp.dtype(designator).name
    except (TypeError, ValueError):
        raise UnknownTypeError(f"unknown dtype designator {designator!r}") from None
    found = _BY_NAME.get(name)
    if found is None:
        raise UnknownTypeError(f"dtype {name!r} has no registered element type")
    return found


def promote(a: ElementType, b: ElementType) -> ElementType:
    """Return the higher-ranked of two kinds; the left operand wins exact ties.

    Mixed signedness resolves to the wider kind, signed at equal width, so
    ``uint64`` with a signed kind stays ``uint64`` and cannot hold negatives,
    and ``int64`` with ``uint64`` cannot hold values from ``2**63`` up.
    Literal inference stores through ``strict`` coercion, which reports such
    values with CoercionError rather than wrapping them.
    """
    return b if b.rank > a.rank else a


def promote_types(*types: object) -> ElementType:
    if not types:
        raise TypeError("promote_types() needs at least one element type")
    return reduce(promote, (resolve(t) for t in types))


def integer_bounds(dtype: ElementType) -> tuple[int, int]:
    """Inclusive ``(min, max)`` of an integer kind."""
    if not dtype.is_integer:
        raise UnknownTypeError(f"{dtype.name} is not an integer dtype")
    if dtype.signed:
        half = 1 << (dtype.bits - 1)
        return -half, half - 1
    return 0, (1 << dtype.bits) - 1


def _integer_literal_type(value: int) -> ElementType:
    for kind in (int64, uint64):
        lo, hi = integer_bounds(kind)
        if lo <= value <= hi:
            return kind
    raise CoercionError(f"integer literal {value} does not fit int64 or uint64")


def scalar_type(value: object) -> ElementType:
    """Infer the kind a scalar literal stores as.

    Python ints infer ``int64``, or ``uint64`` in ``[2**63, 2**64)``; larger
    magnitudes raise CoercionError.
    """
    dtype = getattr(value, "dtype", None)
    if dtype is not None and getattr(value, "ndim", 0) == 0:
        return resolve(dtype)
    if isinstance(value, bool):
        return bool_
    if isinstance(value, numbers.Integral):
        return _integer_literal_type(int(value))
    if isinstance(value, numbers.Real):
        return float_
    if isinstance(value, numbers.Complex):
        return complex_
    raise UnknownTypeError(f"unsupported element {value!r} of type {type(value).__name__}")


def _store_integer(value: int, dtype: ElementType, *, strict: bool) -> int:
    lo, hi = integer_bounds(dtype)
    if lo <= value <= hi:
        return value
    if strict:
        raise CoercionError(f"{value} does not fit dtype {dtype.name} [{lo}, {hi}]")
    modulus = 1 << dtype.bits
    wrapped = value % modulus
    if dtype.signed and wrapped > hi:
        wrapped -= modulus
    return wrapped


def _real_part(value: object, dtype: ElementType) -> object:
    if isinstance(value, numbers.Real):
        return value
    if isinstance(value, numbers.Complex):
        if value.imag != 0:
            logger.debug("discarding imaginary part of %r stored as %s", value, dtype.name)
        return value.real
    return value


def coerce_scalar(value: object, dtype: ElementType, *, strict: bool = False):
    """Convert one value into the Python scalar stored by ``dtype``.

    Floats truncate toward zero into integer kinds and complex values keep
    only their real part in real kinds. Out-of-range integers wrap modulo the
    kind's width, unless ``strict`` is set, in which case they raise
    CoercionError. Values too large for a Python float raise CoercionError.
    """
    if hasattr(value, "item") and getattr(value, "ndim", 0) == 0:
        value = value.item()
    if not isinstance(value, numbers.Number):
        raise UnknownTypeError(f"unsupported element {value!r} of type {type(value).__name__}")

    if dtype.category is Category.BOOL:
        return bool(value)
    try:
        if dtype.category is Category.COMPLEX:
            return complex(value)
        real = _real_part(value, dtype)
        if dtype.category is Category.FLOATING:
            return float(real)
    except OverflowError:
        raise CoercionError(f"{value!r} is too large for dtype {dtype.name}") from None

    if isinstance(real, numbers.Integral):
        return _store_integer(int(real), dtype, strict=strict)
    as_float = float(real)
    if not math.isfinite(as_float):
        raise CoercionError(f"cannot store {as_float!r} in integer dtype {dtype.name}")
    return _store_integer(math.trunc(as_float), dtype, strict=strict)
