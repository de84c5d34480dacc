"""Diagnostic sink for failed checks.

Failures are silent by default: predicates only return False. Once the
embedder installs a sink, every failed check builds a message (lazily,
only on failure) and hands it to the sink, optionally followed by a
captured stack trace.

The sink never changes a result. Exceptions it raises do propagate, so a
sink may legitimately abort a test run (``pytest.fail``) on first failure.
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Callable

type Sink = Callable[[str], None]
type TraceProvider = Callable[[], str]

DEFAULT_ARRAY_LIMIT = 16


@dataclass(frozen=True, slots=True)
class DiagnosticsConfig:
    """Process-wide diagnostics settings.

    - sink: receives failure messages (None = silent)
    - trace: append a captured stack trace to every message
    - trace_provider: replaces capture_trace() when set
    - array_limit: max array elements rendered (None = unlimited)
    """

    sink: Sink | None = None
    trace: bool = False
    trace_provider: TraceProvider | None = None
    array_limit: int | None = DEFAULT_ARRAY_LIMIT


_config = DiagnosticsConfig()


def diagnostics_config() -> DiagnosticsConfig:
    return _config


def configure(**changes: Any) -> DiagnosticsConfig:
    """Update diagnostics settings, e.g. ``configure(trace=True)``."""
    global _config
    _config = replace(_config, **changes)
    return _config


def reset_diagnostics() -> None:
    """Restore the default (silent) settings."""
    global _config
    _config = DiagnosticsConfig()


def install_sink(sink: Sink) -> None:
    configure(sink=sink)


def remove_sink() -> None:
    configure(sink=None)


def current_sink() -> Sink | None:
    return _config.sink


def check(result: bool, describe: Callable[[], str]) -> bool:
    """Report a failed check through the sink and return the result unchanged."""
    result = bool(result)
    config = _config
    if result or config.sink is None:
        return result

    message = describe()
    if config.trace:
        provider = config.trace_provider or capture_trace
        message += provider()
    config.sink(message)
    return result


def capture_trace() -> str:
    """Render the current call stack, innermost frame first."""
    # Drop this frame and check()
    frames = traceback.extract_stack()[:-2]
    lines = [
        f"\nFrame #{n}\t: {frame.filename}:{frame.lineno} in {frame.name}"
        for n, frame in enumerate(reversed(frames), start=1)
    ]
    return "".join(lines)


def format_value(value: Any) -> str:
    """Render a value for a failure message.

    Arrays print as ``< N | a b c >`` and are cut after ``array_limit``
    elements (``< N | a b... >``).
    """
    if isinstance(value, (np.ndarray, list)):
        items = np.asarray(value).ravel().tolist()
        limit = _config.array_limit
        shown = items if limit is None else items[:limit]
        body = "".join(f" {format_value(item)}" for item in shown)
        more = "..." if len(shown) < len(items) else ""
        return f"< {len(items)} |{body}{more} >"
    if isinstance(value, tuple):
        return "(" + ", ".join(format_value(item) for item in value) + ")"
    if isinstance(value, np.generic):
        return str(value.item())
    if isinstance(value, (str, bytes)):
        return repr(value)
    return str(value)


@dataclass(frozen=True, slots=True)
class LoggingSink:
    """Sink that writes failure messages to a logger.

    >>> import logging
    >>> from boxmatch import LoggingSink, install_sink
    >>> install_sink(LoggingSink(level=logging.ERROR))
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("boxmatch"))
    level: int = logging.WARNING

    def __call__(self, message: str) -> None:
        self.logger.log(self.level, "%s", message)
