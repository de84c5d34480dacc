"""Type tags and core protocols for boxmatch.

A TypeTag is the type-identity token carried by every Box. Tags are
explicit structural values, compared field by field:

- ScalarTag covers builtin scalars, numpy fixed-width scalars and any
  other Python class
- ArrayTag covers fixed-shape numpy arrays (element tag + shape)
- TupleTag covers heterogeneous tuples (one tag per position)

The tag name is only used for diagnostics, never for comparison.
"""

from __future__ import annotations

import builtins
import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from boxmatch._box import Box


class Kind(enum.Enum):
    """Numeric strategy selector for a payload type."""

    INTEGRAL = "integral"
    FLOATING = "floating"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ScalarTag:
    """Identity of a single, non-container value type."""

    name: str
    pytype: type

    @property
    def kind(self) -> Kind:
        if issubclass(self.pytype, (bool, np.bool_)):
            return Kind.OTHER
        if issubclass(self.pytype, (int, np.integer)):
            return Kind.INTEGRAL
        if issubclass(self.pytype, (float, np.floating)):
            return Kind.FLOATING
        return Kind.OTHER

    def coerce(self, value: Any) -> Any:
        """Convert value to this tag's type (no-op if already exact)."""
        if type(value) is self.pytype:
            return value
        return self.pytype(value)

    def zero(self) -> Any:
        return self.coerce(0)


@dataclass(frozen=True, slots=True)
class ArrayTag:
    """Identity of a fixed-shape array.

    The shape is part of the identity: ``uint8[10]`` is neither ``uint8[9]``
    nor ``int64[10]`` nor a bare ``uint8``.
    """

    element: ScalarTag
    shape: tuple[int, ...]

    @property
    def name(self) -> str:
        dims = "".join(f"[{n}]" for n in self.shape)
        return f"{self.element.name}{dims}"

    @property
    def kind(self) -> Kind:
        return Kind.OTHER

    def coerce(self, value: Any) -> np.ndarray:
        array = fixed_array(value, self.element.pytype)
        if array.shape != self.shape:
            msg = f"expected shape {self.shape} for {self.name}, got {array.shape}"
            raise ValueError(msg)
        return array


@dataclass(frozen=True, slots=True)
class TupleTag:
    """Identity of a heterogeneous tuple, position by position."""

    elements: tuple[TypeTag, ...]

    @property
    def name(self) -> str:
        return "tuple<" + ", ".join(e.name for e in self.elements) + ">"

    @property
    def kind(self) -> Kind:
        return Kind.OTHER

    def coerce(self, value: Any) -> tuple[Any, ...]:
        items = tuple(value)
        if len(items) != len(self.elements):
            msg = f"expected {len(self.elements)} items for {self.name}, got {len(items)}"
            raise ValueError(msg)
        return tuple(tag.coerce(item) for tag, item in zip(self.elements, items, strict=True))


type TypeTag = ScalarTag | ArrayTag | TupleTag


@runtime_checkable
class Predicate(Protocol):
    """A boolean test over a Box.

    Implementations are immutable; execute() is a pure function of the
    box content (emitting diagnostics is allowed).
    """

    def execute(self, box: Box, /) -> bool: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Tag construction
# ═══════════════════════════════════════════════════════════════════════════════


def scalar_tag(pytype: type) -> ScalarTag:
    """Build the ScalarTag for a Python or numpy scalar type."""
    if issubclass(pytype, np.generic):
        canonical = np.dtype(pytype).type
        return ScalarTag(np.dtype(canonical).name, canonical)
    if getattr(builtins, pytype.__name__, None) is pytype:
        return ScalarTag(pytype.__name__, pytype)
    return ScalarTag(f"{pytype.__module__}.{pytype.__qualname__}", pytype)


def tag_of(value: Any) -> TypeTag:
    """Infer the tag of a value.

    Lists are treated as the fixed-length array they encapsulate to.
    String arrays are tagged by element kind only, not by their width.
    """
    if isinstance(value, np.ndarray):
        return ArrayTag(scalar_tag(fixed_array(value).dtype.type), value.shape)
    if isinstance(value, list):
        return tag_of(fixed_array(value))
    if isinstance(value, tuple):
        return TupleTag(tuple(tag_of(item) for item in value))
    return scalar_tag(type(value))


def fixed_array(value: Any, dtype: Any = None) -> np.ndarray:
    """Convert to an ndarray whose elements have a fixed-width dtype.

    Raises:
        TypeError: the elements only fit an object array (big ints, None,
            arbitrary objects), or a list mixes strings with other values.
    """
    array = np.asarray(value, dtype=dtype)
    if array.dtype.hasobject:
        msg = f"array elements need a fixed-width type, got {array.dtype}"
        raise TypeError(msg)
    if dtype is None and isinstance(value, list) and array.dtype.kind in "US":
        expected = str if array.dtype.kind == "U" else bytes
        leaves = np.asarray(value, dtype=object).ravel()
        if not all(isinstance(item, expected) for item in leaves):
            msg = f"array elements must all be {expected.__name__}, got a mixed list"
            raise TypeError(msg)
    return array


def resolve_tag(spec: Any) -> TypeTag:
    """Resolve a tag spec: a TypeTag, a Python/numpy type, or a numpy dtype."""
    match spec:
        case ScalarTag() | ArrayTag() | TupleTag():
            return spec
        case np.dtype():
            return scalar_tag(spec.type)
        case type():
            return scalar_tag(spec)
    msg = f"cannot resolve a type tag from {spec!r}"
    raise TypeError(msg)


def array_of(element: Any, shape: int | tuple[int, ...]) -> ArrayTag:
    """Tag for a fixed-shape array, e.g. ``array_of(np.uint8, 10)``."""
    tag = resolve_tag(element)
    if not isinstance(tag, ScalarTag):
        msg = f"array elements must be scalar, got {tag.name}"
        raise TypeError(msg)
    if not issubclass(tag.pytype, (np.generic, int, float, complex, str, bytes)) or issubclass(
        tag.pytype, np.object_
    ):
        msg = f"array elements need a fixed-width type, got {tag.name}"
        raise TypeError(msg)
    dims = (shape,) if isinstance(shape, int) else tuple(shape)
    return ArrayTag(tag, dims)


def tuple_of(*elements: Any) -> TupleTag:
    """Tag for a tuple, e.g. ``tuple_of(int, int)``."""
    return TupleTag(tuple(resolve_tag(e) for e in elements))


# Builtin scalars
INT = scalar_tag(int)
FLOAT = scalar_tag(float)
BOOL = scalar_tag(bool)
STR = scalar_tag(str)
BYTES = scalar_tag(bytes)

# numpy fixed-width scalars
INT8 = scalar_tag(np.int8)
INT16 = scalar_tag(np.int16)
INT32 = scalar_tag(np.int32)
INT64 = scalar_tag(np.int64)
UINT8 = scalar_tag(np.uint8)
UINT16 = scalar_tag(np.uint16)
UINT32 = scalar_tag(np.uint32)
UINT64 = scalar_tag(np.uint64)
FLOAT16 = scalar_tag(np.float16)
FLOAT32 = scalar_tag(np.float32)
FLOAT64 = scalar_tag(np.float64)
LONGDOUBLE = scalar_tag(np.longdouble)
