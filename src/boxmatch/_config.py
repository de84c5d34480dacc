"""Config types for config-driven predicate construction.

A predicate tree can be described as a plain dict (loaded from JSON or
YAML) and compiled into arena handles:
  dict → parse_test_config() → TestConfig → Registry.load() → Handle

Relationship to runtime types:

| Config type       | Runtime predicate          |
|-------------------|----------------------------|
| FunctionConfig    | Obey(registered function)  |
| WithArgsConfig    | WithArgs                   |
| FamilyConfig      | IsEqual, IsOdd, InBetween… |
| ObeyConfig        | Obey                       |
| ResistConfig      | Resist                     |
| AllConfig         | MatchAll                   |
| AnyConfig         | MatchAny                   |
| OneConfig         | MatchOne                   |
| NoneConfig        | MatchNone                  |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# ═══════════════════════════════════════════════════════════════════════════════
# Config types (frozen dataclasses)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FunctionConfig:
    """A test function registered by name."""

    name: str


@dataclass(frozen=True, slots=True)
class WithArgsConfig:
    """A registered multi-argument function with bound extra arguments."""

    name: str
    args: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class FamilyConfig:
    """A parameterized family, e.g. ``in_between`` over ``uint8``.

    When payload is None the payload type is inferred from the first param.
    """

    family: str
    payload: str | None = None
    params: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class ObeyConfig:
    """Succeeds iff the inner test succeeds."""

    test: TestConfig


@dataclass(frozen=True, slots=True)
class ResistConfig:
    """Succeeds iff the inner test fails."""

    test: TestConfig


@dataclass(frozen=True, slots=True)
class AllConfig:
    """Every child test must succeed."""

    tests: tuple[TestConfig, ...]


@dataclass(frozen=True, slots=True)
class AnyConfig:
    """At least one child test must succeed."""

    tests: tuple[TestConfig, ...]


@dataclass(frozen=True, slots=True)
class OneConfig:
    """Exactly one child test must succeed."""

    tests: tuple[TestConfig, ...]


@dataclass(frozen=True, slots=True)
class NoneConfig:
    """No child test may succeed."""

    tests: tuple[TestConfig, ...]


type CombinatorConfig = AllConfig | AnyConfig | OneConfig | NoneConfig

type TestConfig = (
    FunctionConfig
    | WithArgsConfig
    | FamilyConfig
    | ObeyConfig
    | ResistConfig
    | CombinatorConfig
)


def config_depth(config: TestConfig) -> int:
    """Calculate the nesting depth of a config tree."""
    match config:
        case FunctionConfig() | WithArgsConfig() | FamilyConfig():
            return 1
        case ObeyConfig(test=inner) | ResistConfig(test=inner):
            return 1 + config_depth(inner)
        case (
            AllConfig(tests=children)
            | AnyConfig(tests=children)
            | OneConfig(tests=children)
            | NoneConfig(tests=children)
        ):
            return 1 + max((config_depth(c) for c in children), default=0)
        case _:  # pragma: no cover
            return 0


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_COMBINATORS: dict[str, type[CombinatorConfig]] = {
    "all": AllConfig,
    "any": AnyConfig,
    "one": OneConfig,
    "none": NoneConfig,
}


class ConfigParseError(Exception):
    """Error parsing a config dict into config types."""


def parse_test_config(data: dict[str, Any]) -> TestConfig:
    """Parse a dict into a TestConfig.

    This is the main entry point for config loading. Uses the 'type'
    discriminant: function, with_args, family, obey, resist, all, any,
    one, none.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"test must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    test_type = data.get("type")
    if test_type is None:
        msg = "test missing required field 'type'"
        raise ConfigParseError(msg)

    if test_type == "function":
        return FunctionConfig(name=_require_str(data, "name", "function"))
    if test_type == "with_args":
        return WithArgsConfig(
            name=_require_str(data, "name", "with_args"),
            args=_optional_list(data, "args", "with_args"),
        )
    if test_type == "family":
        return _parse_family(data)
    if test_type in ("obey", "resist"):
        if "test" not in data:
            msg = f"{test_type} test missing required field 'test'"
            raise ConfigParseError(msg)
        inner = parse_test_config(data["test"])
        return ObeyConfig(test=inner) if test_type == "obey" else ResistConfig(test=inner)
    if test_type in _COMBINATORS:
        return _parse_combinator(test_type, data)

    msg = f"unknown test type: {test_type!r}"
    raise ConfigParseError(msg)


def _parse_family(data: dict[str, Any]) -> FamilyConfig:
    family = _require_str(data, "family", "family")

    payload = data.get("payload")
    if payload is not None and not isinstance(payload, str):
        msg = f"payload must be a string, got {type(payload).__name__}"
        raise ConfigParseError(msg)

    return FamilyConfig(
        family=family,
        payload=payload,
        params=_optional_list(data, "params", "family"),
    )


def _parse_combinator(test_type: str, data: dict[str, Any]) -> CombinatorConfig:
    """Parse all/any/one/none; the child list must be non-empty."""
    children = data.get("tests")
    if children is None:
        msg = f"{test_type} test missing required field 'tests'"
        raise ConfigParseError(msg)
    if not isinstance(children, list):
        msg = f"'tests' must be a list, got {type(children).__name__}"
        raise ConfigParseError(msg)
    if not children:
        msg = f"{test_type} test requires at least one child test"
        raise ConfigParseError(msg)

    return _COMBINATORS[test_type](
        tests=tuple(parse_test_config(c) for c in children)
    )


def _require_str(data: dict[str, Any], key: str, test_type: str) -> str:
    if key not in data:
        msg = f"{test_type} test missing required field {key!r}"
        raise ConfigParseError(msg)
    value = data[key]
    if not isinstance(value, str):
        msg = f"{key} must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _optional_list(data: dict[str, Any], key: str, test_type: str) -> tuple[Any, ...]:
    value = data.get(key, [])
    if not isinstance(value, list):
        msg = f"{test_type} {key!r} must be a list, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return tuple(value)
