"""Tests for sub-tests and polarity wrappers (boxmatch._predicate)."""

from __future__ import annotations

import functools

import numpy as np
import pytest

from boxmatch import (
    Box,
    ClosureTest,
    FunctionTest,
    NestedTest,
    as_subtest,
    decapsulate,
    encapsulate,
    execute,
    is_odd,
    obey,
    resist,
)
from boxmatch.testing import RecordingSink, is_between, is_forty_two, sum_is_fifteen


def always_true(box: Box) -> bool:
    return True


class TestAsSubtest:
    def test_module_function(self) -> None:
        assert as_subtest(is_forty_two) == FunctionTest(is_forty_two)

    def test_lambda_is_closure(self) -> None:
        test = lambda box: True  # noqa: E731
        assert isinstance(as_subtest(test), ClosureTest)

    def test_capturing_function_is_closure(self) -> None:
        expected = 42

        def equals(box: Box) -> bool:
            return box.value == expected

        assert isinstance(as_subtest(equals), ClosureTest)

    def test_partial_is_closure(self) -> None:
        test = functools.partial(is_between, low=10, high=20)
        assert isinstance(as_subtest(test), ClosureTest)

    def test_handle_is_nested(self) -> None:
        handle = is_odd(int)
        assert as_subtest(handle) == NestedTest(handle)

    def test_tagged_subtest_passes_through(self) -> None:
        test = FunctionTest(always_true)
        assert as_subtest(test) is test

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError, match="expected a callable or a Handle"):
            as_subtest(42)


class TestObey:
    @pytest.mark.parametrize(("value", "expected"), [(41, False), (42, True), (43, False)])
    def test_function(self, value: int, expected: bool) -> None:
        assert execute(obey(is_forty_two), encapsulate(value)) is expected

    def test_type_mismatch_fails(self, sink: RecordingSink) -> None:
        assert not execute(obey(is_forty_two), encapsulate(42, np.uint8))
        assert not execute(obey(is_forty_two), encapsulate(41, np.uint8))
        assert sink.messages == [
            "The actual value has type 'uint8' while the expected was 'int'",
        ] * 2

    def test_nested_handle(self) -> None:
        handle = obey(is_odd(int))
        assert execute(handle, encapsulate(13))
        assert not execute(handle, encapsulate(42))

    def test_lambda(self) -> None:
        assert execute(obey(lambda box: True), encapsulate(13))
        assert not execute(obey(lambda box: False), encapsulate(13))

    def test_lambda_decapsulating(self) -> None:
        def is_42(box: Box) -> bool:
            matched, value = decapsulate(box, int)
            return matched and value == 42

        handle = obey(lambda box: is_42(box))
        assert execute(handle, encapsulate(42))
        assert not execute(handle, encapsulate(13))

    @pytest.mark.parametrize(
        ("value", "expected"),
        [((7, 8), True), ((8, 7), True), ((8, 8), False), ((7, 7), False)],
    )
    def test_tuple_payload(self, value: tuple[int, int], expected: bool) -> None:
        assert execute(obey(sum_is_fifteen), encapsulate(value)) is expected

    def test_tuple_payload_checks_types_and_arity(self) -> None:
        handle = obey(sum_is_fifteen)
        assert not execute(handle, encapsulate((np.uint32(7), 8)))
        assert not execute(handle, encapsulate((7, 8, 9)))

    def test_obey_is_silent(self, sink: RecordingSink) -> None:
        execute(obey(is_forty_two), encapsulate(41))
        assert sink.messages == []


class TestResist:
    @pytest.mark.parametrize(("value", "expected"), [(41, True), (42, False), (43, True)])
    def test_function(self, value: int, expected: bool) -> None:
        assert execute(resist(is_forty_two), encapsulate(value)) is expected

    def test_nested_handle(self) -> None:
        handle = resist(is_odd(int))
        assert not execute(handle, encapsulate(13))
        assert execute(handle, encapsulate(42))

    def test_failure_reported(self, sink: RecordingSink) -> None:
        execute(resist(is_forty_two), encapsulate(42))
        assert sink.messages == ["Predicate Resist(is_forty_two) failed for value 42"]

    def test_nested_failure_names_handle(self, sink: RecordingSink) -> None:
        inner = is_odd(int)
        execute(resist(inner), encapsulate(13))
        assert sink.messages == [f"Predicate Resist(#{inner.index}) failed for value 13"]
