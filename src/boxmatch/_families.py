"""Parameterized predicate families.

Each family is one generic predicate class parameterized by the payload
TypeTag. Families that need a remainder delegate it to an explicit
numeric strategy chosen from the tag's kind:

- IntegralArithmetic: truncated remainder (sign follows the dividend)
- FloatingArithmetic: ``fmod`` in the payload's own precision
  (``math.fmod`` for Python floats, ``np.fmod`` for numpy widths)

Odd/even/divisibility compare that remainder exactly against 1 or 0, for
floating payloads too. The exact comparison is deliberate: 102.3 is
neither odd nor even.

Parameterless classifiers (is_odd, is_zero, ...) are shared: one handle
per (family, tag) per arena generation. Every other factory call owns a
fresh arena slot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from boxmatch._arena import resolve_arena
from boxmatch._box import decapsulate, freeze
from boxmatch._diagnostics import check, format_value
from boxmatch._types import Kind, ScalarTag, resolve_tag, tag_of

if TYPE_CHECKING:
    from collections.abc import Callable

    from boxmatch._arena import Arena, Handle
    from boxmatch._box import Box
    from boxmatch._types import TypeTag

# ═══════════════════════════════════════════════════════════════════════════════
# Numeric strategies
# ═══════════════════════════════════════════════════════════════════════════════


class Arithmetic(Protocol):
    def remainder(self, value: Any, divisor: Any) -> Any: ...


@dataclass(frozen=True, slots=True)
class IntegralArithmetic:
    """Remainder with C semantics: -7 rem 2 is -1, not 1."""

    def remainder(self, value: Any, divisor: Any) -> int:
        value, divisor = int(value), int(divisor)
        rem = abs(value) % abs(divisor)
        return -rem if value < 0 else rem


@dataclass(frozen=True, slots=True)
class FloatingArithmetic:
    """Floating remainder computed at the payload's precision."""

    tag: ScalarTag

    def remainder(self, value: Any, divisor: Any) -> Any:
        if self.tag.pytype is float:
            return math.fmod(value, divisor)
        return np.fmod(self.tag.coerce(value), self.tag.coerce(divisor))


def arithmetic_for(tag: TypeTag, family: str) -> Arithmetic:
    """Pick the numeric strategy for a payload tag.

    Raises:
        TypeError: the payload type is not integral or floating.
    """
    match tag.kind:
        case Kind.INTEGRAL:
            return IntegralArithmetic()
        case Kind.FLOATING if isinstance(tag, ScalarTag):
            return FloatingArithmetic(tag)
    msg = f"{family} requires a numeric payload type, got '{tag.name}'"
    raise TypeError(msg)


# ═══════════════════════════════════════════════════════════════════════════════
# Family predicates
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True, eq=False)
class _Family:
    """Decapsulate as ``tag``, then test the value.

    A tag mismatch fails before accepts() ever sees the value.
    """

    tag: TypeTag

    def execute(self, box: Box) -> bool:
        matched, value = decapsulate(box, self.tag)
        if not matched:
            return False
        return check(self.accepts(value), lambda: self._failure(value))

    def accepts(self, value: Any) -> bool:
        raise NotImplementedError

    def params(self) -> tuple[Any, ...]:
        return ()

    def _failure(self, value: Any) -> str:
        params = ", ".join(format_value(p) for p in self.params())
        return (
            f"Predicate {type(self).__name__}({params}) failed "
            f"for value {format_value(value)}"
        )


@dataclass(frozen=True, slots=True, eq=False)
class IsEqual(_Family):
    """Equality with a fixed value.

    Scalars and tuples use ``==``. Numeric arrays compare their raw bytes,
    after the tag check has already pinned element type and shape. String
    arrays compare element by element, since ``<U2`` and ``<U3`` hold the
    same text in different bytes.
    """

    expected: Any

    def accepts(self, value: Any) -> bool:
        return _same(self.expected, value)

    def params(self) -> tuple[Any, ...]:
        return (self.expected,)


@dataclass(frozen=True, slots=True)
class IsOdd(_Family):
    arithmetic: Arithmetic = field(repr=False)

    def accepts(self, value: Any) -> bool:
        return bool(self.arithmetic.remainder(value, 2) == 1)


@dataclass(frozen=True, slots=True)
class IsEven(_Family):
    arithmetic: Arithmetic = field(repr=False)

    def accepts(self, value: Any) -> bool:
        return bool(self.arithmetic.remainder(value, 2) == 0)


@dataclass(frozen=True, slots=True)
class IsZero(_Family):
    def accepts(self, value: Any) -> bool:
        return bool(value == self.tag.zero())


@dataclass(frozen=True, slots=True)
class IsNonZero(_Family):
    def accepts(self, value: Any) -> bool:
        return bool(value != self.tag.zero())


@dataclass(frozen=True, slots=True)
class IsPositive(_Family):
    def accepts(self, value: Any) -> bool:
        return bool(value > self.tag.zero())


@dataclass(frozen=True, slots=True)
class IsNegative(_Family):
    def accepts(self, value: Any) -> bool:
        return bool(value < self.tag.zero())


@dataclass(frozen=True, slots=True)
class IsDivisibleBy(_Family):
    divisor: Any
    arithmetic: Arithmetic = field(repr=False)

    def accepts(self, value: Any) -> bool:
        return bool(self.arithmetic.remainder(value, self.divisor) == 0)

    def params(self) -> tuple[Any, ...]:
        return (self.divisor,)


@dataclass(frozen=True, slots=True)
class IsLesserThan(_Family):
    bound: Any

    def accepts(self, value: Any) -> bool:
        return bool(value < self.bound)

    def params(self) -> tuple[Any, ...]:
        return (self.bound,)


@dataclass(frozen=True, slots=True)
class IsLesserEq(_Family):
    bound: Any

    def accepts(self, value: Any) -> bool:
        return bool(value <= self.bound)

    def params(self) -> tuple[Any, ...]:
        return (self.bound,)


@dataclass(frozen=True, slots=True)
class IsGreaterThan(_Family):
    bound: Any

    def accepts(self, value: Any) -> bool:
        return bool(value > self.bound)

    def params(self) -> tuple[Any, ...]:
        return (self.bound,)


@dataclass(frozen=True, slots=True)
class IsGreaterEq(_Family):
    bound: Any

    def accepts(self, value: Any) -> bool:
        return bool(value >= self.bound)

    def params(self) -> tuple[Any, ...]:
        return (self.bound,)


@dataclass(frozen=True, slots=True)
class InBetween(_Family):
    """``low <= value <= high``; both bounds belong to the range."""

    low: Any
    high: Any

    def accepts(self, value: Any) -> bool:
        return bool(self.low <= value <= self.high)

    def params(self) -> tuple[Any, ...]:
        return (self.low, self.high)


@dataclass(frozen=True, slots=True)
class Outside(_Family):
    """``value < low or value > high``; the complement of InBetween."""

    low: Any
    high: Any

    def accepts(self, value: Any) -> bool:
        return bool(value < self.low or value > self.high)

    def params(self) -> tuple[Any, ...]:
        return (self.low, self.high)


@dataclass(frozen=True, slots=True)
class IsEqualEpsilon(_Family):
    """``|value - target| <= epsilon``, inclusive.

    The difference is always taken larger-minus-smaller. Integral payloads
    subtract as Python ints, so no fixed width can wrap around.
    """

    target: Any
    epsilon: Any

    def accepts(self, value: Any) -> bool:
        target, epsilon = self.target, self.epsilon
        if self.tag.kind is Kind.INTEGRAL:
            value, target, epsilon = int(value), int(target), int(epsilon)
        if value >= target:
            return bool(value - target <= epsilon)
        return bool(target - value <= epsilon)

    def params(self) -> tuple[Any, ...]:
        return (self.target, self.epsilon)


# ═══════════════════════════════════════════════════════════════════════════════
# Factories
# ═══════════════════════════════════════════════════════════════════════════════


def is_equal(value: Any, as_type: Any = None, *, arena: Arena | None = None) -> Handle:
    """Equality with ``value``; lists and arrays compare byte-wise."""
    tag = _payload_tag(value, as_type)
    expected = tag.coerce(value) if as_type is not None else value
    return resolve_arena(arena).own(IsEqual(tag, freeze(expected)))


def is_odd(as_type: Any, *, arena: Arena | None = None) -> Handle:
    return _classifier(IsOdd, as_type, arena)


def is_even(as_type: Any, *, arena: Arena | None = None) -> Handle:
    return _classifier(IsEven, as_type, arena)


def is_zero(as_type: Any, *, arena: Arena | None = None) -> Handle:
    return _classifier(IsZero, as_type, arena)


def is_non_zero(as_type: Any, *, arena: Arena | None = None) -> Handle:
    return _classifier(IsNonZero, as_type, arena)


def is_positive(as_type: Any, *, arena: Arena | None = None) -> Handle:
    return _classifier(IsPositive, as_type, arena)


def is_negative(as_type: Any, *, arena: Arena | None = None) -> Handle:
    return _classifier(IsNegative, as_type, arena)


def is_divisible_by(
    divisor: Any, as_type: Any = None, *, arena: Arena | None = None
) -> Handle:
    """Remainder of the value by ``divisor`` is zero.

    Raises:
        ValueError: divisor is zero.
    """
    tag = _payload_tag(divisor, as_type)
    arithmetic = arithmetic_for(tag, "IsDivisibleBy")
    divisor = tag.coerce(divisor)
    if divisor == 0:
        msg = "IsDivisibleBy requires a non-zero divisor"
        raise ValueError(msg)
    return resolve_arena(arena).own(IsDivisibleBy(tag, divisor, arithmetic))


def is_lesser_than(bound: Any, as_type: Any = None, *, arena: Arena | None = None) -> Handle:
    tag = _payload_tag(bound, as_type)
    return resolve_arena(arena).own(IsLesserThan(tag, tag.coerce(bound)))


def is_lesser_eq(bound: Any, as_type: Any = None, *, arena: Arena | None = None) -> Handle:
    tag = _payload_tag(bound, as_type)
    return resolve_arena(arena).own(IsLesserEq(tag, tag.coerce(bound)))


def is_greater_than(bound: Any, as_type: Any = None, *, arena: Arena | None = None) -> Handle:
    tag = _payload_tag(bound, as_type)
    return resolve_arena(arena).own(IsGreaterThan(tag, tag.coerce(bound)))


def is_greater_eq(bound: Any, as_type: Any = None, *, arena: Arena | None = None) -> Handle:
    tag = _payload_tag(bound, as_type)
    return resolve_arena(arena).own(IsGreaterEq(tag, tag.coerce(bound)))


def in_between(
    low: Any, high: Any, as_type: Any = None, *, arena: Arena | None = None
) -> Handle:
    """Inclusive range check; the payload type is taken from ``low``."""
    tag = _payload_tag(low, as_type)
    high = _fit(tag, high, as_type, "InBetween")
    return resolve_arena(arena).own(InBetween(tag, tag.coerce(low), high))


def outside(
    low: Any, high: Any, as_type: Any = None, *, arena: Arena | None = None
) -> Handle:
    """Strictly below ``low`` or strictly above ``high``."""
    tag = _payload_tag(low, as_type)
    high = _fit(tag, high, as_type, "Outside")
    return resolve_arena(arena).own(Outside(tag, tag.coerce(low), high))


def is_equal_epsilon(
    target: Any, epsilon: Any, as_type: Any = None, *, arena: Arena | None = None
) -> Handle:
    """Within ``epsilon`` of ``target``, boundary included."""
    tag = _payload_tag(target, as_type)
    arithmetic_for(tag, "IsEqualEpsilon")
    return resolve_arena(arena).own(
        IsEqualEpsilon(tag, tag.coerce(target), _fit(tag, epsilon, as_type, "IsEqualEpsilon"))
    )


# Lookup tables for config-driven construction.
CLASSIFIERS: MappingProxyType[str, Callable[..., Handle]] = MappingProxyType(
    {
        "is_odd": is_odd,
        "is_even": is_even,
        "is_zero": is_zero,
        "is_non_zero": is_non_zero,
        "is_positive": is_positive,
        "is_negative": is_negative,
    }
)

FAMILIES: MappingProxyType[str, Callable[..., Handle]] = MappingProxyType(
    {
        **CLASSIFIERS,
        "is_equal": is_equal,
        "is_divisible_by": is_divisible_by,
        "is_lesser_than": is_lesser_than,
        "is_lesser_eq": is_lesser_eq,
        "is_greater_than": is_greater_than,
        "is_greater_eq": is_greater_eq,
        "in_between": in_between,
        "outside": outside,
        "is_equal_epsilon": is_equal_epsilon,
    }
)


def _classifier(
    family: type[_Family], as_type: Any, arena: Arena | None
) -> Handle:
    tag = resolve_tag(as_type)
    arithmetic = arithmetic_for(tag, family.__name__)

    def build() -> _Family:
        if issubclass(family, (IsOdd, IsEven)):
            return family(tag, arithmetic)
        return family(tag)

    return resolve_arena(arena).shared((family, tag), build)


def _payload_tag(value: Any, as_type: Any) -> TypeTag:
    return resolve_tag(as_type) if as_type is not None else tag_of(value)


def _fit(tag: TypeTag, value: Any, as_type: Any, family: str) -> Any:
    """Coerce a secondary parameter to the payload type.

    When the type was inferred from the first parameter, the conversion
    must not lose anything: ``in_between(10, 20.5)`` is rejected rather
    than silently becoming ``[10, 20]``.

    Raises:
        ValueError: the inferred type cannot represent ``value`` exactly.
    """
    fitted = tag.coerce(value)
    if as_type is None and fitted != value:
        msg = (
            f"{family} parameter {value!r} does not fit payload type "
            f"'{tag.name}' inferred from the first parameter; pass as_type"
        )
        raise ValueError(msg)
    return fitted


def _same(expected: Any, actual: Any) -> bool:
    """Numeric arrays compare raw bytes; string arrays compare elements.

    Tuples compare position by position.
    """
    if isinstance(expected, np.ndarray):
        if expected.dtype.kind in "US":
            return bool(np.array_equal(expected, actual))
        return expected.tobytes() == actual.tobytes()
    if isinstance(expected, tuple):
        return all(_same(e, a) for e, a in zip(expected, actual, strict=True))
    return bool(expected == actual)
