"""Registry for config-driven predicate construction.

Configs name test functions and payload types by string; the registry
maps those names to real callables and TypeTags and compiles a
TestConfig into arena handles.

- RegistryBuilder → .build() → Registry (immutable)
- Registry.load() walks the config tree and calls the public factories

Example::

    builder = RegistryBuilder()
    register_core_types(builder)
    builder.function("isgt10", isgt10)
    registry = builder.build()

    config = parse_test_config(yaml.safe_load(text))
    handle = registry.load(config)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from boxmatch import _types
from boxmatch._arena import PredicateError
from boxmatch._bind import with_args
from boxmatch._combinators import match_all, match_any, match_none, match_one
from boxmatch._config import (
    AllConfig,
    AnyConfig,
    FamilyConfig,
    FunctionConfig,
    NoneConfig,
    ObeyConfig,
    OneConfig,
    ResistConfig,
    WithArgsConfig,
    config_depth,
)
from boxmatch._families import CLASSIFIERS, FAMILIES
from boxmatch._predicate import obey, resist
from boxmatch._types import resolve_tag

if TYPE_CHECKING:
    from collections.abc import Callable

    from boxmatch._arena import Arena, Handle
    from boxmatch._config import TestConfig
    from boxmatch._types import TypeTag

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_TESTS_PER_COMBINATOR = 256
MAX_DEPTH = 32

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownNameError(PredicateError):
    """A function, type or family name was not found in the registry."""

    def __init__(self, name: str, registry: str, available: list[str]) -> None:
        self.name = name
        self.registry = registry
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown {registry} name: {name!r} (registered: {registered})"
        else:
            msg = f"unknown {registry} name: {name!r} (no {registry} names are registered)"
        super().__init__(msg)


class InvalidConfigError(PredicateError):
    """A config payload was malformed or semantically invalid."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


class TooManyTestsError(PredicateError):
    """Combinator config has too many children (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many tests in combinator: {count} exceeds maximum {max_}")


class DepthExceededError(PredicateError):
    """Config tree is nested deeper than MAX_DEPTH."""

    def __init__(self, depth: int, max_: int) -> None:
        self.depth = depth
        self.max = max_
        super().__init__(f"config depth {depth} exceeds maximum allowed depth {max_}")


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type TestFunction = Callable[..., bool]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register test functions and payload type names, then call build() to
    produce an immutable Registry.
    """

    def __init__(self) -> None:
        self._functions: dict[str, TestFunction] = {}
        self._types: dict[str, TypeTag] = {}

    def function(self, name: str, fn: TestFunction) -> RegistryBuilder:
        """Register a test function under ``name``."""
        self._functions[name] = fn
        return self

    def type(self, name: str, spec: Any) -> RegistryBuilder:
        """Register a payload type name (TypeTag, Python or numpy type)."""
        self._types[name] = resolve_tag(spec)
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        return Registry(
            _functions=MappingProxyType(dict(self._functions)),
            _types=MappingProxyType(dict(self._types)),
        )


_CORE_TYPES = (
    _types.INT,
    _types.FLOAT,
    _types.BOOL,
    _types.STR,
    _types.BYTES,
    _types.INT8,
    _types.INT16,
    _types.INT32,
    _types.INT64,
    _types.UINT8,
    _types.UINT16,
    _types.UINT32,
    _types.UINT64,
    _types.FLOAT16,
    _types.FLOAT32,
    _types.FLOAT64,
)


def register_core_types(builder: RegistryBuilder) -> RegistryBuilder:
    """Register builtin and numpy fixed-width scalar types by tag name."""
    for tag in _CORE_TYPES:
        builder.type(tag.name, tag)
    return builder


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of test functions and payload types.

    Constructed via RegistryBuilder. Use load() to compile a config into
    a Handle.
    """

    _functions: MappingProxyType[str, TestFunction] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _types: MappingProxyType[str, TypeTag] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load(self, config: TestConfig, arena: Arena | None = None) -> Handle:
        """Compile a config tree into a handle owned by ``arena``.

        Raises:
            DepthExceededError: config nested deeper than MAX_DEPTH
            UnknownNameError: function, type or family not registered
            InvalidConfigError: config payload malformed
            TooManyTestsError: too many combinator children
        """
        depth = config_depth(config)
        if depth > MAX_DEPTH:
            raise DepthExceededError(depth, MAX_DEPTH)
        return self._load(config, arena)

    @property
    def function_count(self) -> int:
        """Number of registered test functions."""
        return len(self._functions)

    @property
    def type_count(self) -> int:
        """Number of registered payload types."""
        return len(self._types)

    def contains_function(self, name: str) -> bool:
        return name in self._functions

    def contains_type(self, name: str) -> bool:
        return name in self._types

    def function_names(self) -> list[str]:
        """Return all registered function names (sorted)."""
        return sorted(self._functions.keys())

    def type_names(self) -> list[str]:
        """Return all registered type names (sorted)."""
        return sorted(self._types.keys())

    # ── Private loading methods ────────────────────────────────────────────

    def _load(self, config: TestConfig, arena: Arena | None) -> Handle:
        match config:
            case FunctionConfig(name=name):
                return obey(self._function(name), arena=arena)
            case WithArgsConfig(name=name, args=args):
                return with_args(self._function(name), *args, arena=arena)
            case FamilyConfig():
                return self._load_family(config, arena)
            case ObeyConfig(test=inner):
                return obey(self._load(inner, arena), arena=arena)
            case ResistConfig(test=inner):
                return resist(self._load(inner, arena), arena=arena)
            case AllConfig(tests=children):
                return match_all(*self._load_children(children, arena), arena=arena)
            case AnyConfig(tests=children):
                return match_any(*self._load_children(children, arena), arena=arena)
            case OneConfig(tests=children):
                return match_one(*self._load_children(children, arena), arena=arena)
            case NoneConfig(tests=children):
                return match_none(*self._load_children(children, arena), arena=arena)
            case _:  # pragma: no cover
                msg = f"unknown test config type: {type(config).__name__}"
                raise InvalidConfigError(msg)

    def _load_children(
        self, children: tuple[TestConfig, ...], arena: Arena | None
    ) -> list[Handle]:
        if len(children) > MAX_TESTS_PER_COMBINATOR:
            raise TooManyTestsError(len(children), MAX_TESTS_PER_COMBINATOR)
        return [self._load(child, arena) for child in children]

    def _load_family(self, config: FamilyConfig, arena: Arena | None) -> Handle:
        factory = FAMILIES.get(config.family)
        if factory is None:
            raise UnknownNameError(config.family, "family", list(FAMILIES.keys()))

        tag = self._type(config.payload) if config.payload is not None else None

        if config.family in CLASSIFIERS:
            if tag is None:
                msg = f"{config.family} requires a 'payload' type"
                raise InvalidConfigError(msg)
            if config.params:
                msg = f"{config.family} takes no params, got {len(config.params)}"
                raise InvalidConfigError(msg)
            try:
                return factory(tag, arena=arena)
            except TypeError as e:
                raise InvalidConfigError(str(e)) from e

        try:
            return factory(*config.params, as_type=tag, arena=arena)
        except (TypeError, ValueError) as e:
            raise InvalidConfigError(str(e)) from e

    def _function(self, name: str) -> TestFunction:
        fn = self._functions.get(name)
        if fn is None:
            raise UnknownNameError(name, "function", list(self._functions.keys()))
        return fn

    def _type(self, name: str) -> TypeTag:
        tag = self._types.get(name)
        if tag is None:
            raise UnknownNameError(name, "type", list(self._types.keys()))
        return tag
