"""Tests for console/JSON reporting and the exit code."""

from weather_contract.models import CaseState, TestResult
from weather_contract.report import exit_code, format_report, format_result, results_to_dict


PASSED = TestResult(name="status_code_200", state=CaseState.PASSED, elapsed_millis=142.4)
FAILED = TestResult(
    name="invalid_api_key",
    state=CaseState.FAILED,
    failures=["status code: expected 401, got 200", "cod: expected 401, got 200"],
    elapsed_millis=98.0,
)
ERRORED = TestResult(
    name="lat_lon_query",
    state=CaseState.ERRORED,
    failures=["network_error: Transport error"],
    error_category="network_error",
)
CANCELLED = TestResult(name="invalid_lat_lon", state=CaseState.CANCELLED, failures=["not run: run cancelled"])


def test_format_passed_case():
    assert format_result(PASSED) == ["PASS status_code_200 (142 ms)"]


def test_format_failed_case_lists_every_diagnostic():
    assert format_result(FAILED) == [
        "FAIL invalid_api_key (98 ms)",
        "    - status code: expected 401, got 200",
        "    - cod: expected 401, got 200",
    ]


def test_format_errored_case_without_timing():
    assert format_result(ERRORED)[0] == "ERROR lat_lon_query"


def test_report_ends_with_summary():
    report = format_report([PASSED, FAILED, ERRORED, CANCELLED])
    assert report.splitlines()[-1] == "4 case(s): 1 passed, 1 failed, 1 errored, 1 cancelled"


def test_results_to_dict():
    data = results_to_dict([PASSED, FAILED])
    assert data["total"] == 2
    assert data["passed"] == 1
    assert data["failed"] == 1
    assert data["results"][1] == {
        "name": "invalid_api_key",
        "state": "failed",
        "passed": False,
        "failures": ["status code: expected 401, got 200", "cod: expected 401, got 200"],
        "elapsed_millis": 98.0,
    }


def test_exit_code():
    assert exit_code([PASSED]) == 0
    assert exit_code([]) == 0
    assert exit_code([PASSED, FAILED]) == 1
    assert exit_code([PASSED, ERRORED]) == 1
    assert exit_code([CANCELLED]) == 1


def test_passed_is_serialized():
    assert PASSED.model_dump()["passed"] is True
