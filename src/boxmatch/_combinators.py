"""Logical combinators — All, Any, One, None over a fixed list of sub-tests.

Unlike short-circuiting boolean operators, a combinator evaluates every
sub-test against the box before aggregating, so each failing sub-test
gets the chance to report its own diagnostics.

| Combinator | True iff                    |
|------------|-----------------------------|
| MatchAll   | every sub-test is true      |
| MatchAny   | at least one is true        |
| MatchOne   | exactly one is true         |
| MatchNone  | no sub-test is true         |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from boxmatch._arena import PredicateError, resolve_arena
from boxmatch._diagnostics import check, format_value
from boxmatch._predicate import as_subtest, describe_subtest, run_subtest

if TYPE_CHECKING:
    from boxmatch._arena import Arena, Handle
    from boxmatch._box import Box
    from boxmatch._predicate import SubTest


class EmptyCombinatorError(PredicateError):
    """A combinator was constructed without any sub-test."""

    def __init__(self, combinator: str) -> None:
        self.combinator = combinator
        super().__init__(f"{combinator} requires at least one test")


@dataclass(frozen=True, slots=True)
class _Combinator:
    tests: tuple[SubTest, ...]

    def __post_init__(self) -> None:
        if not self.tests:
            raise EmptyCombinatorError(type(self).__name__)

    def execute(self, box: Box) -> bool:
        results = tuple(run_subtest(test, box) for test in self.tests)
        return check(self.aggregate(results), lambda: self._failure(results, box))

    @staticmethod
    def aggregate(results: tuple[bool, ...]) -> bool:
        raise NotImplementedError

    def _failure(self, results: tuple[bool, ...], box: Box) -> str:
        names = ", ".join(describe_subtest(test) for test in self.tests)
        outcome = ", ".join(str(r) for r in results)
        return (
            f"Predicate {type(self).__name__}({names}) failed for value "
            f"{format_value(box.value)} with results ({outcome})"
        )


@dataclass(frozen=True, slots=True)
class MatchAll(_Combinator):
    """Logical AND of all sub-test results."""

    @staticmethod
    def aggregate(results: tuple[bool, ...]) -> bool:
        return all(results)


@dataclass(frozen=True, slots=True)
class MatchAny(_Combinator):
    """Logical OR of all sub-test results."""

    @staticmethod
    def aggregate(results: tuple[bool, ...]) -> bool:
        return any(results)


@dataclass(frozen=True, slots=True)
class MatchOne(_Combinator):
    """Exactly one sub-test result is true.

    Zero trues and two-or-more trues both fail.
    """

    @staticmethod
    def aggregate(results: tuple[bool, ...]) -> bool:
        return results.count(True) == 1


@dataclass(frozen=True, slots=True)
class MatchNone(_Combinator):
    """Logical NOR of all sub-test results."""

    @staticmethod
    def aggregate(results: tuple[bool, ...]) -> bool:
        return not any(results)


def match_all(*tests: Any, arena: Arena | None = None) -> Handle:
    """Succeeds when every test succeeds."""
    return resolve_arena(arena).own(MatchAll(_subtests(tests)))


def match_any(*tests: Any, arena: Arena | None = None) -> Handle:
    """Succeeds when at least one test succeeds."""
    return resolve_arena(arena).own(MatchAny(_subtests(tests)))


def match_one(*tests: Any, arena: Arena | None = None) -> Handle:
    """Succeeds when exactly one test succeeds."""
    return resolve_arena(arena).own(MatchOne(_subtests(tests)))


def match_none(*tests: Any, arena: Arena | None = None) -> Handle:
    """Succeeds when no test succeeds."""
    return resolve_arena(arena).own(MatchNone(_subtests(tests)))


def _subtests(tests: tuple[Any, ...]) -> tuple[SubTest, ...]:
    return tuple(as_subtest(test) for test in tests)
