"""Predicate arena — ownership of every constructed predicate.

Factories append predicates to an Arena and hand back a Handle. A handle
is (arena, index, generation): reset() bumps the generation, so a handle
issued before a reset fails resolution with StaleHandleError instead of
reaching a dropped predicate.

INV: reset() is the only way predicates are released. There is no
per-predicate disposal.

Arenas are not thread-safe; callers sharing one across threads must
serialize construction, evaluation and reset themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from boxmatch._box import Box
    from boxmatch._types import Predicate

logger = logging.getLogger(__name__)


class PredicateError(Exception):
    """Base class for boxmatch construction and handle errors."""


class StaleHandleError(PredicateError):
    """A handle was used after its arena was reset, or with another arena."""

    def __init__(self, handle: Handle, current: int) -> None:
        self.index = handle.index
        self.generation = handle.generation
        self.current = current
        super().__init__(
            f"stale handle #{handle.index} from generation {handle.generation} "
            f"(arena is at generation {current})"
        )


@dataclass(frozen=True, slots=True)
class Handle:
    """Non-owning reference to an Arena-owned predicate."""

    arena: Arena
    index: int
    generation: int

    def execute(self, box: Box) -> bool:
        return self.arena.resolve(self).execute(box)

    def __repr__(self) -> str:
        return f"Handle(index={self.index}, generation={self.generation})"


class Arena:
    """Owner of predicates; issues generation-checked handles.

    Usable as a context manager: leaving the block resets the arena.
    """

    def __init__(self) -> None:
        self._owned: list[Predicate] = []
        self._shared: dict[Hashable, Handle] = {}
        self._generation = 0

    def own(self, predicate: Predicate) -> Handle:
        """Take ownership of a predicate and return its handle."""
        self._owned.append(predicate)
        return Handle(self, len(self._owned) - 1, self._generation)

    def shared(self, key: Hashable, build: Callable[[], Predicate]) -> Handle:
        """Return the handle for ``key``, building the predicate on first use.

        Shared entries live in the current generation like any other
        predicate and are dropped by reset().
        """
        handle = self._shared.get(key)
        if handle is None:
            handle = self.own(build())
            self._shared[key] = handle
        return handle

    def resolve(self, handle: Handle) -> Predicate:
        """Look up the predicate behind a handle.

        Raises:
            StaleHandleError: handle from another arena, an earlier
                generation, or outside the owned range.
        """
        if not self.is_valid(handle):
            raise StaleHandleError(handle, self._generation)
        return self._owned[handle.index]

    def reset(self) -> None:
        """Release every owned predicate; all issued handles become stale."""
        logger.debug(
            "Resetting arena generation %d (%d predicates)",
            self._generation,
            len(self._owned),
        )
        self._owned.clear()
        self._shared.clear()
        self._generation += 1

    @property
    def generation(self) -> int:
        return self._generation

    def is_valid(self, handle: Handle) -> bool:
        return (
            handle.arena is self
            and handle.generation == self._generation
            and handle.index < len(self._owned)
        )

    def __len__(self) -> int:
        return len(self._owned)

    def __enter__(self) -> Arena:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.reset()


_default_arena = Arena()


def default_arena() -> Arena:
    """The process-wide arena used when a factory gets no ``arena=``."""
    return _default_arena


def resolve_arena(arena: Arena | None) -> Arena:
    return _default_arena if arena is None else arena


def reset_arena() -> None:
    """Reset the process-wide arena."""
    _default_arena.reset()


def execute(handle: Handle, box: Box) -> bool:
    """Run the predicate behind ``handle`` against ``box``."""
    return handle.execute(box)
