"""Tests for logical combinators (boxmatch._combinators)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from boxmatch import (
    EmptyCombinatorError,
    Handle,
    PredicateError,
    encapsulate,
    execute,
    is_even,
    match_all,
    match_any,
    match_none,
    match_one,
    obey,
    resist,
)
from boxmatch.testing import RecordingSink, is_greater_than_ten, truth_table

if TYPE_CHECKING:
    from collections.abc import Callable

    from boxmatch import Box

# Every combination of 2 and 3 sub-results
ROWS = [*truth_table(2), *truth_table(3)]

AGGREGATES: dict[str, tuple[Callable[..., Handle], Callable[[tuple[bool, ...]], bool]]] = {
    "all": (match_all, all),
    "any": (match_any, any),
    "one": (match_one, lambda row: row.count(True) == 1),
    "none": (match_none, lambda row: not any(row)),
}


def _constant(result: bool) -> Callable[[Box], bool]:
    return lambda box: result


def _row_id(row: tuple[bool, ...]) -> str:
    return "".join("T" if r else "F" for r in row)


class TestTruthTables:
    @pytest.mark.parametrize("name", sorted(AGGREGATES))
    @pytest.mark.parametrize("row", ROWS, ids=_row_id)
    def test_closures(self, name: str, row: tuple[bool, ...]) -> None:
        factory, expected = AGGREGATES[name]
        handle = factory(*(_constant(r) for r in row))
        assert execute(handle, encapsulate(0)) is expected(row)

    @pytest.mark.parametrize("name", sorted(AGGREGATES))
    @pytest.mark.parametrize("row", ROWS, ids=_row_id)
    def test_nested_handles(self, name: str, row: tuple[bool, ...]) -> None:
        factory, expected = AGGREGATES[name]
        handle = factory(*(obey(_constant(r)) for r in row))
        assert execute(handle, encapsulate(0)) is expected(row)


class TestScenarios:
    """isgt10 combined with IsEven<int> against 42, 43, 8 and 7."""

    @pytest.mark.parametrize(
        ("value", "expected"), [(42, True), (43, False), (8, False), (7, False)]
    )
    def test_match_all(self, value: int, expected: bool) -> None:
        handle = match_all(is_greater_than_ten, is_even(int))
        assert execute(handle, encapsulate(value)) is expected

    @pytest.mark.parametrize(
        ("value", "expected"), [(8, True), (7, False), (43, True), (42, False)]
    )
    def test_match_one(self, value: int, expected: bool) -> None:
        handle = match_one(is_greater_than_ten, is_even(int))
        assert execute(handle, encapsulate(value)) is expected

    @pytest.mark.parametrize(
        ("value", "expected"), [(8, True), (7, False), (43, True), (42, True)]
    )
    def test_match_any(self, value: int, expected: bool) -> None:
        handle = match_any(is_greater_than_ten, is_even(int))
        assert execute(handle, encapsulate(value)) is expected

    @pytest.mark.parametrize(
        ("value", "expected"), [(8, False), (7, True), (43, False), (42, False)]
    )
    def test_match_none(self, value: int, expected: bool) -> None:
        handle = match_none(is_greater_than_ten, is_even(int))
        assert execute(handle, encapsulate(value)) is expected

    def test_nested_combinators(self) -> None:
        even_and_big = match_all(is_greater_than_ten, is_even(int))
        handle = match_any(even_and_big, resist(is_greater_than_ten))
        assert execute(handle, encapsulate(42))
        assert execute(handle, encapsulate(3))
        assert not execute(handle, encapsulate(43))


class TestEvaluation:
    def test_no_short_circuit(self) -> None:
        calls: list[str] = []

        def record(name: str, result: bool) -> Callable[[Box], bool]:
            def test(box: Box) -> bool:
                calls.append(name)
                return result

            return test

        handle = match_all(record("a", False), record("b", True), record("c", False))
        assert not execute(handle, encapsulate(0))
        assert calls == ["a", "b", "c"]

    def test_single_subtest(self) -> None:
        assert execute(match_one(_constant(True)), encapsulate(0))
        assert not execute(match_none(_constant(True)), encapsulate(0))


class TestEmpty:
    @pytest.mark.parametrize(
        ("factory", "name"),
        [
            (match_all, "MatchAll"),
            (match_any, "MatchAny"),
            (match_one, "MatchOne"),
            (match_none, "MatchNone"),
        ],
    )
    def test_empty_rejected(self, factory: Callable[..., Handle], name: str) -> None:
        with pytest.raises(EmptyCombinatorError) as exc_info:
            factory()
        assert exc_info.value.combinator == name
        assert isinstance(exc_info.value, PredicateError)

    def test_non_callable_rejected(self) -> None:
        with pytest.raises(TypeError):
            match_all(is_greater_than_ten, "isgt10")


class TestDiagnostics:
    def test_subtests_report_before_combinator(self, sink: RecordingSink) -> None:
        even = is_even(int)
        handle = match_all(is_greater_than_ten, even)
        execute(handle, encapsulate(7))
        assert sink.messages == [
            "Predicate IsEven() failed for value 7",
            f"Predicate MatchAll(is_greater_than_ten, #{even.index}) failed "
            "for value 7 with results (False, False)",
        ]

    def test_success_is_silent(self, sink: RecordingSink) -> None:
        execute(match_any(is_greater_than_ten, is_even(int)), encapsulate(42))
        assert sink.messages == []
