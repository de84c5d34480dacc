"""boxmatch — composable predicates over type-erased values.

All public types are exported from this module for flat imports:

    from boxmatch import encapsulate, execute, match_all, is_even, in_between
"""

__version__ = "0.1.0"

# Arena and handles
from boxmatch._arena import (
    Arena,
    Handle,
    PredicateError,
    StaleHandleError,
    default_arena,
    execute,
    reset_arena,
)

# Argument binding
from boxmatch._bind import WithArgs, with_args

# Value box
from boxmatch._box import Box, Unboxed, decapsulate, encapsulate

# Combinators
from boxmatch._combinators import (
    EmptyCombinatorError,
    MatchAll,
    MatchAny,
    MatchNone,
    MatchOne,
    match_all,
    match_any,
    match_none,
    match_one,
)

# Config types — see boxmatch._config for details
from boxmatch._config import (
    AllConfig,
    AnyConfig,
    CombinatorConfig,
    ConfigParseError,
    FamilyConfig,
    FunctionConfig,
    NoneConfig,
    ObeyConfig,
    OneConfig,
    ResistConfig,
    TestConfig,
    WithArgsConfig,
    config_depth,
    parse_test_config,
)

# Diagnostics
from boxmatch._diagnostics import (
    DiagnosticsConfig,
    LoggingSink,
    Sink,
    TraceProvider,
    capture_trace,
    configure,
    current_sink,
    diagnostics_config,
    format_value,
    install_sink,
    remove_sink,
    reset_diagnostics,
)

# Families
from boxmatch._families import (
    CLASSIFIERS,
    FAMILIES,
    FloatingArithmetic,
    InBetween,
    IntegralArithmetic,
    IsDivisibleBy,
    IsEqual,
    IsEqualEpsilon,
    IsEven,
    IsGreaterEq,
    IsGreaterThan,
    IsLesserEq,
    IsLesserThan,
    IsNegative,
    IsNonZero,
    IsOdd,
    IsPositive,
    IsZero,
    Outside,
    in_between,
    is_divisible_by,
    is_equal,
    is_equal_epsilon,
    is_even,
    is_greater_eq,
    is_greater_than,
    is_lesser_eq,
    is_lesser_than,
    is_negative,
    is_non_zero,
    is_odd,
    is_positive,
    is_zero,
    outside,
)

# Polarity wrappers and sub-tests
from boxmatch._predicate import (
    ClosureTest,
    FunctionTest,
    NestedTest,
    Obey,
    Resist,
    SubTest,
    as_subtest,
    obey,
    resist,
)

# Registry — see boxmatch._registry for details
from boxmatch._registry import (
    MAX_DEPTH,
    MAX_TESTS_PER_COMBINATOR,
    DepthExceededError,
    InvalidConfigError,
    Registry,
    RegistryBuilder,
    TooManyTestsError,
    UnknownNameError,
    register_core_types,
)

# Type tags
from boxmatch._types import (
    ArrayTag,
    Kind,
    Predicate,
    ScalarTag,
    TupleTag,
    TypeTag,
    array_of,
    resolve_tag,
    scalar_tag,
    tag_of,
    tuple_of,
)

__all__ = [
    "CLASSIFIERS",
    "FAMILIES",
    "MAX_DEPTH",
    "MAX_TESTS_PER_COMBINATOR",
    "AllConfig",
    "AnyConfig",
    "Arena",
    "ArrayTag",
    "Box",
    "ClosureTest",
    "CombinatorConfig",
    "ConfigParseError",
    "DepthExceededError",
    "DiagnosticsConfig",
    "EmptyCombinatorError",
    "FamilyConfig",
    "FloatingArithmetic",
    "FunctionConfig",
    "FunctionTest",
    "Handle",
    "InBetween",
    "IntegralArithmetic",
    "InvalidConfigError",
    "IsDivisibleBy",
    "IsEqual",
    "IsEqualEpsilon",
    "IsEven",
    "IsGreaterEq",
    "IsGreaterThan",
    "IsLesserEq",
    "IsLesserThan",
    "IsNegative",
    "IsNonZero",
    "IsOdd",
    "IsPositive",
    "IsZero",
    "Kind",
    "LoggingSink",
    "MatchAll",
    "MatchAny",
    "MatchNone",
    "MatchOne",
    "NestedTest",
    "NoneConfig",
    "Obey",
    "ObeyConfig",
    "OneConfig",
    "Outside",
    "Predicate",
    "PredicateError",
    "Registry",
    "RegistryBuilder",
    "Resist",
    "ResistConfig",
    "ScalarTag",
    "Sink",
    "StaleHandleError",
    "SubTest",
    "TestConfig",
    "TooManyTestsError",
    "TraceProvider",
    "TupleTag",
    "TypeTag",
    "Unboxed",
    "UnknownNameError",
    "WithArgs",
    "WithArgsConfig",
    "__version__",
    "array_of",
    "as_subtest",
    "capture_trace",
    "config_depth",
    "configure",
    "current_sink",
    "decapsulate",
    "default_arena",
    "diagnostics_config",
    "encapsulate",
    "execute",
    "format_value",
    "in_between",
    "install_sink",
    "is_divisible_by",
    "is_equal",
    "is_equal_epsilon",
    "is_even",
    "is_greater_eq",
    "is_greater_than",
    "is_lesser_eq",
    "is_lesser_than",
    "is_negative",
    "is_non_zero",
    "is_odd",
    "is_positive",
    "is_zero",
    "match_all",
    "match_any",
    "match_none",
    "match_one",
    "obey",
    "outside",
    "parse_test_config",
    "register_core_types",
    "remove_sink",
    "reset_arena",
    "reset_diagnostics",
    "resist",
    "resolve_tag",
    "scalar_tag",
    "tag_of",
    "tuple_of",
    "with_args",
]
