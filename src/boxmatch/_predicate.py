"""Sub-tests and polarity wrappers.

A sub-test is one element of a wrapper's or combinator's test list. The
three sources are kept apart by an explicit tagged union:

- FunctionTest: a plain module-level function ``fn(box) -> bool``
- ClosureTest: any other callable (lambda, closure, partial, object)
- NestedTest: a Handle to an Arena-owned predicate

Obey passes a sub-test's result through; Resist inverts it.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from boxmatch._arena import Handle, resolve_arena
from boxmatch._diagnostics import check, format_value

if TYPE_CHECKING:
    from collections.abc import Callable

    from boxmatch._arena import Arena
    from boxmatch._box import Box


@dataclass(frozen=True, slots=True)
class FunctionTest:
    """A plain function test."""

    fn: Callable[[Box], bool]


@dataclass(frozen=True, slots=True)
class ClosureTest:
    """A closure or other callable test."""

    fn: Callable[[Box], bool]


@dataclass(frozen=True, slots=True)
class NestedTest:
    """A previously issued predicate handle."""

    handle: Handle


type SubTest = FunctionTest | ClosureTest | NestedTest


def as_subtest(test: Any) -> SubTest:
    """Tag a test with its source kind.

    Raises:
        TypeError: test is neither a Handle, a SubTest nor callable.
    """
    match test:
        case FunctionTest() | ClosureTest() | NestedTest():
            return test
        case Handle():
            return NestedTest(test)
    if _is_plain_function(test):
        return FunctionTest(test)
    if callable(test):
        return ClosureTest(test)
    msg = f"expected a callable or a Handle, got {type(test).__name__}"
    raise TypeError(msg)


def run_subtest(test: SubTest, box: Box) -> bool:
    match test:
        case FunctionTest(fn=fn) | ClosureTest(fn=fn):
            return bool(fn(box))
        case NestedTest(handle=handle):
            return handle.execute(box)
    msg = f"unknown sub-test type: {type(test).__name__}"  # pragma: no cover
    raise TypeError(msg)  # pragma: no cover


def describe_subtest(test: SubTest) -> str:
    """Short human-readable name used in failure messages."""
    match test:
        case FunctionTest(fn=fn):
            return fn.__qualname__
        case ClosureTest(fn=fn):
            return getattr(fn, "__qualname__", None) or repr(fn)
        case NestedTest(handle=handle):
            return f"#{handle.index}"
    return repr(test)  # pragma: no cover


def _is_plain_function(test: Any) -> bool:
    return (
        inspect.isfunction(test)
        and test.__closure__ is None
        and test.__name__ != "<lambda>"
    )


@dataclass(frozen=True, slots=True)
class Obey:
    """Succeeds iff the wrapped test succeeds.

    Silent on failure: the wrapped test reports its own diagnostics.
    """

    test: SubTest

    def execute(self, box: Box) -> bool:
        return run_subtest(self.test, box)


@dataclass(frozen=True, slots=True)
class Resist:
    """Succeeds iff the wrapped test fails."""

    test: SubTest

    def execute(self, box: Box) -> bool:
        return check(
            not run_subtest(self.test, box),
            lambda: (
                f"Predicate Resist({describe_subtest(self.test)}) failed "
                f"for value {format_value(box.value)}"
            ),
        )


def obey(test: Any, *, arena: Arena | None = None) -> Handle:
    """Wrap a function, closure or handle; succeeds when it returns True."""
    return resolve_arena(arena).own(Obey(as_subtest(test)))


def resist(test: Any, *, arena: Arena | None = None) -> Handle:
    """Wrap a function, closure or handle; succeeds when it returns False."""
    return resolve_arena(arena).own(Resist(as_subtest(test)))
