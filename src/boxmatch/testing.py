"""Test utilities for boxmatch.

Provides a recording diagnostic sink and a handful of sample test
functions over ``int`` payloads. These exist to reduce boilerplate in
tests and examples; real callers write test functions for their own
payload types.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from boxmatch._box import decapsulate
from boxmatch._types import INT, tuple_of

if TYPE_CHECKING:
    from collections.abc import Iterator

    from boxmatch._box import Box
    from boxmatch._registry import RegistryBuilder


@dataclass(slots=True)
class RecordingSink:
    """Diagnostic sink that keeps every message it receives.

    >>> from boxmatch import install_sink
    >>> from boxmatch.testing import RecordingSink
    >>> sink = RecordingSink()
    >>> install_sink(sink)
    """

    messages: list[str] = field(default_factory=list)

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()


def truth_table(n: int) -> Iterator[tuple[bool, ...]]:
    """Every combination of ``n`` booleans, all-False first."""
    return itertools.product((False, True), repeat=n)


# ═══════════════════════════════════════════════════════════════════════════════
# Sample test functions
# ═══════════════════════════════════════════════════════════════════════════════


def is_forty_two(box: Box) -> bool:
    matched, value = decapsulate(box, INT)
    return matched and value == 42


def is_greater_than_ten(box: Box) -> bool:
    matched, value = decapsulate(box, INT)
    return matched and value > 10


def is_between(box: Box, low: int, high: int) -> bool:
    """Three-argument test, meant to be bound with with_args()."""
    matched, value = decapsulate(box, INT)
    return matched and low <= value <= high


def sum_is_fifteen(box: Box) -> bool:
    matched, value = decapsulate(box, tuple_of(int, int))
    return matched and value[0] + value[1] == 15


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the sample functions.

    Names: is42, isgt10, isbetween (with_args), sum15.
    """
    return (
        builder.function("is42", is_forty_two)
        .function("isgt10", is_greater_than_ten)
        .function("isbetween", is_between)
        .function("sum15", sum_is_fifteen)
    )
