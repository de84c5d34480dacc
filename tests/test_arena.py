"""Tests for the predicate arena (boxmatch._arena)."""

from __future__ import annotations

import logging

import pytest

from boxmatch import (
    Arena,
    Handle,
    StaleHandleError,
    default_arena,
    encapsulate,
    execute,
    is_equal,
    is_even,
    is_odd,
    match_all,
    obey,
    reset_arena,
)
from boxmatch.testing import is_greater_than_ten


class TestOwnership:
    def test_own_returns_sequential_handles(self) -> None:
        arena = Arena()
        first = is_equal(1, arena=arena)
        second = is_equal(2, arena=arena)
        assert (first.index, second.index) == (0, 1)
        assert first.arena is arena
        assert len(arena) == 2

    def test_factories_default_to_process_arena(self) -> None:
        handle = is_equal(42)
        assert handle.arena is default_arena()
        assert len(default_arena()) == 1

    def test_resolve_returns_owned_predicate(self) -> None:
        arena = Arena()
        handle = is_equal(42, arena=arena)
        assert arena.resolve(handle).execute(encapsulate(42))

    def test_handle_repr(self) -> None:
        handle = Handle(Arena(), 3, 1)
        assert repr(handle) == "Handle(index=3, generation=1)"


class TestReset:
    def test_reset_bumps_generation_and_drops_predicates(self) -> None:
        arena = Arena()
        is_equal(1, arena=arena)
        arena.reset()
        assert arena.generation == 1
        assert len(arena) == 0

    def test_stale_handle_raises(self) -> None:
        arena = Arena()
        handle = is_equal(42, arena=arena)
        arena.reset()
        with pytest.raises(StaleHandleError) as exc_info:
            execute(handle, encapsulate(42))
        assert exc_info.value.generation == 0
        assert exc_info.value.current == 1
        assert exc_info.value.index == 0

    def test_handle_from_other_arena_is_stale(self) -> None:
        handle = is_equal(42, arena=Arena())
        with pytest.raises(StaleHandleError):
            default_arena().resolve(handle)

    def test_is_valid(self) -> None:
        arena = Arena()
        handle = is_equal(42, arena=arena)
        assert arena.is_valid(handle)
        arena.reset()
        assert not arena.is_valid(handle)

    def test_rebuild_after_reset_behaves_identically(self) -> None:
        def build() -> Handle:
            return match_all(is_greater_than_ten, is_even(int))

        before = [execute(build(), encapsulate(v)) for v in (42, 43, 8, 7)]
        reset_arena()
        after = [execute(build(), encapsulate(v)) for v in (42, 43, 8, 7)]
        assert before == after == [True, False, False, False]

    def test_reset_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        arena = Arena()
        obey(is_greater_than_ten, arena=arena)
        with caplog.at_level(logging.DEBUG, logger="boxmatch._arena"):
            arena.reset()
        assert "Resetting arena generation 0 (1 predicates)" in caplog.text


class TestShared:
    def test_same_key_returns_same_handle(self) -> None:
        assert is_odd(int) is is_odd(int)
        assert len(default_arena()) == 1

    def test_distinct_keys(self) -> None:
        assert is_odd(int) != is_even(int)
        assert is_odd(int) != is_odd(float)

    def test_shared_per_arena(self) -> None:
        arena = Arena()
        assert is_odd(int, arena=arena).arena is arena
        assert is_odd(int, arena=arena) is not is_odd(int)

    def test_reset_drops_shared_entries(self) -> None:
        before = is_odd(int)
        reset_arena()
        after = is_odd(int)
        assert after.generation == before.generation + 1
        assert execute(after, encapsulate(13))


class TestContextManager:
    def test_exit_resets(self) -> None:
        with Arena() as arena:
            handle = is_equal(42, arena=arena)
            assert execute(handle, encapsulate(42))
        assert arena.generation == 1
        assert not arena.is_valid(handle)
