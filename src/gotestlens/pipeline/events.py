# src/gotestlens/pipeline/events.py

"""
Decodes single lines of `go test -json` output into structured test events.
"""

import json
import math
import re
from typing import Any

from attrs import define, field

from gotestlens.exceptions import EventDecodeError

ACTION_OUTPUT = "output"
ACTION_RUN = "run"
ACTION_PASS = "pass"
ACTION_FAIL = "fail"
ACTION_SKIP = "skip"
TERMINAL_ACTIONS = frozenset({ACTION_PASS, ACTION_FAIL})

# Leading numeric prefix, the way a lenient string-to-number parse reads it.
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def parse_float_or_default(value: Any, default: float = 0.0) -> float:
    """Parses `value` as a float, returning `default` for anything non-finite or non-numeric."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        raw: Any = value
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return default
        raw = match.group(1)
    else:
        return default
    try:
        number = float(raw)
    except (OverflowError, ValueError):
        return default
    return number if math.isfinite(number) else default


def atoi_or_default(value: Any, default: int = 0) -> int:
    """Parses the leading integer of `value`, returning `default` when there is none."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if match:
            return int(match.group(1))
    return default


@define(frozen=True, slots=True)
class TestEvent:
    """One record of the `go test -json` event stream."""

    package: str
    action: str
    test: str | None = field(default=None)
    output: str | None = field(default=None)
    elapsed: float = field(default=0.0)

    @property
    def is_terminal(self) -> bool:
        return self.action in TERMINAL_ACTIONS


def _optional_str(payload: dict[str, Any], name: str, line: str) -> str | None:
    value = payload.get(name)
    if value is None or isinstance(value, str):
        return value
    raise EventDecodeError(line, f"field '{name}' must be a string, got {type(value).__name__}")


def decode_event(line: str) -> TestEvent:
    """
    Parses one line of output as a test event.

    Raises:
        EventDecodeError: If the line is not a JSON object or required fields
            have the wrong shape. Unknown actions are not an error.
    """
    try:
        payload = json.loads(line)
    except ValueError as e:
        raise EventDecodeError(line, f"invalid JSON: {e}", details=e) from e

    if not isinstance(payload, dict):
        raise EventDecodeError(line, f"expected a JSON object, got {type(payload).__name__}")

    package = payload.get("Package")
    if not isinstance(package, str):
        raise EventDecodeError(line, "missing or non-string 'Package' field")
    action = payload.get("Action")
    if not isinstance(action, str):
        raise EventDecodeError(line, "missing or non-string 'Action' field")

    test = _optional_str(payload, "Test", line)
    output = _optional_str(payload, "Output", line)
    if action == ACTION_OUTPUT and output is None:
        raise EventDecodeError(line, "'output' event without an 'Output' field")

    return TestEvent(
        package=package,
        action=action,
        test=test or None,
        output=output,
        elapsed=parse_float_or_default(payload.get("Elapsed")),
    )

# 🔼⚙️
