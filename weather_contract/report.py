"""Console and JSON rendering of registry results, and the process exit code."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from .models import CaseState, ReportDict, TestResult

_LABELS: dict[CaseState, str] = {
    CaseState.PASSED: "PASS",
    CaseState.FAILED: "FAIL",
    CaseState.ERRORED: "ERROR",
    CaseState.CANCELLED: "CANCELLED",
}


def format_result(result: TestResult) -> list[str]:
    """One status line for the case, then one indented line per diagnostic."""
    label = _LABELS.get(result.state, result.state.value.upper())
    line = f"{label} {result.name}"
    if result.elapsed_millis is not None:
        line += f" ({result.elapsed_millis:.0f} ms)"
    return [line, *(f"    - {failure}" for failure in result.failures)]


def summarize(results: Sequence[TestResult]) -> str:
    counts = Counter(result.state for result in results)
    return (
        f"{len(results)} case(s): {counts[CaseState.PASSED]} passed, "
        f"{counts[CaseState.FAILED]} failed, {counts[CaseState.ERRORED]} errored, "
        f"{counts[CaseState.CANCELLED]} cancelled"
    )


def format_report(results: Sequence[TestResult]) -> str:
    lines: list[str] = []
    for result in results:
        lines.extend(format_result(result))
    lines.append(summarize(results))
    return "\n".join(lines)


def results_to_dict(results: Sequence[TestResult]) -> ReportDict:
    counts = Counter(result.state for result in results)
    return {
        "total": len(results),
        "passed": counts[CaseState.PASSED],
        "failed": counts[CaseState.FAILED],
        "errored": counts[CaseState.ERRORED],
        "cancelled": counts[CaseState.CANCELLED],
        "results": [result.to_dict() for result in results],
    }


def exit_code(results: Sequence[TestResult]) -> int:
    """0 only when every case passed."""
    return 0 if all(result.passed for result in results) else 1
