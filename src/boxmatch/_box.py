"""Type-erased value box.

encapsulate() wraps any value together with its TypeTag. decapsulate()
hands the value back only when the caller's expected tag equals the
stored one; a mismatch yields ``Unboxed(False, None)`` plus a diagnostic,
never an exception and never the value under the wrong type.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, NamedTuple

import numpy as np

from boxmatch._diagnostics import check
from boxmatch._types import TypeTag, fixed_array, resolve_tag, tag_of


@dataclass(frozen=True, slots=True)
class Box:
    """A value plus its type-identity token. Never stored in an Arena."""

    value: Any
    tag: TypeTag


class Unboxed(NamedTuple):
    """Result of decapsulate(): the tag check outcome and the value."""

    matched: bool
    value: Any


def encapsulate(value: Any, as_type: Any = None) -> Box:
    """Box a value.

    Without ``as_type`` the tag is inferred from the value. With it, the
    value is first converted to that type, e.g.
    ``encapsulate(42, np.uint8)`` or ``encapsulate([1, 2], array_of(np.int32, 2))``.
    """
    if as_type is not None:
        tag = resolve_tag(as_type)
        value = tag.coerce(value)
    else:
        tag = tag_of(value)
    return Box(value=freeze(value), tag=tag)


def decapsulate(box: Box, expected: Any) -> Unboxed:
    """Extract the boxed value if its tag equals ``expected``.

    ``expected`` is anything resolve_tag() accepts; use array_of() for
    fixed-shape arrays and tuple_of() for tuples.
    """
    tag = resolve_tag(expected)
    matched = check(
        box.tag == tag,
        lambda: (
            f"The actual value has type '{box.tag.name}' "
            f"while the expected was '{tag.name}'"
        ),
    )
    if not matched:
        return Unboxed(False, None)
    return Unboxed(True, box.value)


def freeze(value: Any) -> Any:
    """Copy the value so the box does not alias caller-owned storage.

    Arrays become read-only copies; anything else is deep-copied.
    """
    if isinstance(value, np.ndarray):
        frozen = fixed_array(value).copy()
        frozen.setflags(write=False)
        return frozen
    if isinstance(value, list):
        return freeze(fixed_array(value))
    if isinstance(value, tuple):
        return tuple(freeze(item) for item in value)
    return copy.deepcopy(value)
