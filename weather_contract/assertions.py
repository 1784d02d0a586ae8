"""
Assertion Engine

Evaluates expectations against a captured response. Every expectation is
evaluated, in order, and every mismatch contributes one diagnostic line,
so a single run surfaces all failures of a case at once.

Evaluation is pure: the same (response, expectations) pair always yields
an identical TestResult.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .expectations import (
    ContentTypeEquals,
    ElapsedBelow,
    Expectation,
    JsonPathBetween,
    JsonPathContains,
    JsonPathEquals,
    JsonPathPresent,
    JsonPathPresentIf,
    JsonPathType,
    StatusEquals,
    classify,
    kind_matches,
)
from .jsonpath import Absent, resolve
from .models import CapturedResponse, CaseState, TestResult

_MAX_VALUE_REPR = 120


def _show(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_VALUE_REPR:
        text = text[: _MAX_VALUE_REPR - 3] + "..."
    return text


def _json_equal(actual: Any, expected: Any) -> bool:
    """Equality where booleans never equal numbers (True != 1)."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    return actual == expected


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _absent(path: str, response: CapturedResponse, absent: Absent) -> str:
    message = f"{path}: absent ({absent.reason})"
    if response.parse_error:
        message += f"; parse error: {response.parse_error}"
    return message


def evaluate_one(response: CapturedResponse, expectation: Expectation) -> str | None:
    """Return a diagnostic if the expectation fails, None if it holds."""
    match expectation:
        case StatusEquals(status=status):
            if response.status_code != status:
                return f"status code: expected {status}, got {response.status_code}"
            return None

        case ContentTypeEquals(content_type=content_type):
            expected = content_type.split(";", 1)[0].strip().lower()
            if response.media_type != expected:
                actual = response.content_type or "(none)"
                return f"content type: expected {content_type}, got {actual}"
            return None

        case ElapsedBelow(millis=millis):
            if not response.elapsed_millis < millis:
                return (
                    f"elapsed time: expected < {millis:g} ms, "
                    f"got {response.elapsed_millis:g} ms"
                )
            return None

        case JsonPathPresent(path=path, required=required):
            if not required:
                return None
            resolution = resolve(response.body_json, path)
            if isinstance(resolution, Absent):
                return _absent(path, response, resolution)
            if resolution.value is None:
                return f"{path}: expected a non-null value, got null"
            return None

        case JsonPathPresentIf(path=path, when=when):
            condition = resolve(response.body_json, when)
            if response.body_json is None:
                # nothing to inspect, so the condition cannot be shown absent
                return _absent(when, response, condition)
            if isinstance(condition, Absent):
                return None
            resolution = resolve(response.body_json, path)
            if isinstance(resolution, Absent):
                return f"{path}: required because {when} is present; " + _absent(
                    path, response, resolution
                )
            return None

    # Remaining kinds all need a value at their path
    resolution = resolve(response.body_json, expectation.path)
    if isinstance(resolution, Absent):
        return _absent(expectation.path, response, resolution)
    value = resolution.value

    match expectation:
        case JsonPathEquals(path=path, expected=expected):
            if not _json_equal(value, expected):
                return f"{path}: expected {_show(expected)}, got {_show(value)}"

        case JsonPathType(path=path, expected_kind=expected_kind):
            if not kind_matches(value, expected_kind):
                return (
                    f"{path}: expected {expected_kind.value}, "
                    f"got {classify(value).value} {_show(value)}"
                )

        case JsonPathContains(path=path, substring=substring):
            if not isinstance(value, str):
                return (
                    f"{path}: expected a string containing {substring!r}, "
                    f"got {classify(value).value} {_show(value)}"
                )
            if substring not in value:
                return f"{path}: expected to contain {substring!r}, got {_show(value)}"

        case JsonPathBetween(path=path, low=low, high=high):
            if not _is_number(value):
                return f"{path}: expected a number, got {classify(value).value} {_show(value)}"
            if not low < value < high:
                return f"{path}: expected between {low:g} and {high:g}, got {value:g}"

    return None


def evaluate(
    name: str,
    response: CapturedResponse,
    expectations: Iterable[Expectation],
) -> TestResult:
    """Evaluate all expectations against one response; no short-circuit."""
    failures = [
        diagnostic
        for expectation in expectations
        if (diagnostic := evaluate_one(response, expectation)) is not None
    ]
    return TestResult(
        name=name,
        state=CaseState.FAILED if failures else CaseState.PASSED,
        failures=failures,
        elapsed_millis=response.elapsed_millis,
    )
