"""WithArgs — bind fixed extra arguments to a multi-argument test function."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from boxmatch._arena import resolve_arena

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from boxmatch._arena import Arena, Handle
    from boxmatch._box import Box


@dataclass(frozen=True, slots=True, eq=False)
class WithArgs:
    """Calls ``function(box, *args, **kwargs)``."""

    function: Callable[..., bool]
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def execute(self, box: Box) -> bool:
        return bool(self.function(box, *self.args, **self.kwargs))


def with_args(
    function: Callable[..., bool],
    *args: Any,
    arena: Arena | None = None,
    **kwargs: Any,
) -> Handle:
    """Adapt ``function(box, *args, **kwargs)`` into a single-box predicate.

    >>> between = with_args(is_between, 10, 20)

    Raises:
        TypeError: function is not callable.
    """
    if not callable(function):
        msg = f"with_args expects a callable, got {type(function).__name__}"
        raise TypeError(msg)
    predicate = WithArgs(function, tuple(args), MappingProxyType(dict(kwargs)))
    return resolve_arena(arena).own(predicate)
