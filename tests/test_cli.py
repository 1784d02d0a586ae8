"""
Tests for the click CLI.

Runs are restricted to cases that fail before any request is sent, so no
network access is needed.
"""

import json

import pytest
from click.testing import CliRunner

from weather_contract.cli import cli


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    return CliRunner()


def test_list_cases(runner):
    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 11
    assert lines[0].startswith("status_code_200: ")


def test_list_cases_with_expectations(runner):
    result = runner.invoke(cli, ["list", "--expectations"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[1] == "    - status code == 200"
    assert "    - elapsed < 2000 ms" in lines
    assert "    - 200 < main.temp < 330" in lines
    assert "    - rain.1h is present when rain is present" in lines


def test_run_without_api_key_exits_nonzero(runner):
    result = runner.invoke(cli, ["run", "--case", "status_code_200"])

    assert result.exit_code == 1
    assert "ERROR status_code_200" in result.output
    assert "configuration_error" in result.output
    assert "1 case(s): 0 passed, 0 failed, 1 errored, 0 cancelled" in result.output


def test_run_json_report(runner):
    result = runner.invoke(
        cli, ["run", "--case", "response_schema", "--case", "lat_lon_query", "--json"]
    )

    assert result.exit_code == 1
    report = json.loads(result.output)
    assert report["total"] == 2
    assert report["errored"] == 2
    assert [r["name"] for r in report["results"]] == ["response_schema", "lat_lon_query"]


def test_run_concurrently_without_api_key(runner):
    result = runner.invoke(
        cli, ["run", "--concurrency", "2", "--case", "temperature_range", "--case", "status_code_200"]
    )

    assert result.exit_code == 1
    assert result.output.index("ERROR status_code_200") < result.output.index("ERROR temperature_range")


def test_unknown_case_is_usage_error(runner):
    result = runner.invoke(cli, ["run", "--case", "does_not_exist"])

    assert result.exit_code == 2
    assert "Unknown test case(s): does_not_exist" in result.output
