"""
Tests for the OpenWeather suite, run against the in-process stub.

The stub reproduces the upstream contract, so every case is expected to
pass; the error-path scenarios are also checked request by request.
"""

import pytest

from weather_contract.assertions import evaluate
from weather_contract.builder import build
from weather_contract.config import INVALID_API_KEY, STUB_API_KEY, HarnessConfig
from weather_contract.expectations import (
    content_type_equals,
    json_path_contains,
    json_path_equals,
    json_path_present,
    status_equals,
)
from weather_contract.models import CaseState
from weather_contract.suites import create_openweather_registry

from .conftest import BASE_URL

EXPECTED_CASES = [
    "status_code_200",
    "content_type_json",
    "response_time",
    "city_name_in_response",
    "response_schema",
    "missing_required_parameter",
    "invalid_api_key",
    "temperature_range",
    "optional_rain_field",
    "lat_lon_query",
    "invalid_lat_lon",
]


class TestSuiteDefinition:
    def test_all_cases_registered_in_order(self, stub_config):
        registry = create_openweather_registry(stub_config)
        assert [case.name for case in registry.cases] == EXPECTED_CASES

    def test_every_case_has_description(self, stub_config):
        for case in create_openweather_registry(stub_config).cases:
            assert case.description, f"{case.name} missing description"

    def test_registry_uses_config_timeout(self):
        config = HarnessConfig(base_url=BASE_URL, api_key=STUB_API_KEY, timeout_ms=750)
        assert create_openweather_registry(config).timeout_ms == 750


class TestSuiteAgainstStub:
    def test_all_cases_pass(self, stub_config, stub_capturer):
        results = create_openweather_registry(stub_config).run_all(capturer=stub_capturer)

        failures = {r.name: r.failures for r in results if not r.passed}
        assert failures == {}
        assert [r.name for r in results] == EXPECTED_CASES

    @pytest.mark.asyncio
    async def test_all_cases_pass_concurrently(self, stub_config, async_stub_capturer):
        registry = create_openweather_registry(stub_config)

        results = await registry.run_all_async(concurrency=4, capturer=async_stub_capturer)

        assert all(r.passed for r in results), [r.failures for r in results]
        assert [r.name for r in results] == EXPECTED_CASES

    def test_wrong_city_fails_name_cases(self, stub_capturer):
        config = HarnessConfig(base_url=BASE_URL, api_key=STUB_API_KEY, city="Paris")
        results = {r.name: r for r in create_openweather_registry(config).run_all(capturer=stub_capturer)}

        # the stub only knows London
        assert results["status_code_200"].failures == ["status code: expected 200, got 404"]
        assert results["lat_lon_query"].failures == ["name: expected 'Paris', got 'London'"]
        assert results["invalid_api_key"].passed

    def test_missing_api_key_errors_cases_that_need_it(self, stub_capturer):
        config = HarnessConfig(base_url=BASE_URL, api_key=None)
        results = {r.name: r for r in create_openweather_registry(config).run_all(capturer=stub_capturer)}

        assert results["invalid_api_key"].passed
        errored = [name for name, r in results.items() if r.state is CaseState.ERRORED]
        assert len(errored) == len(EXPECTED_CASES) - 1
        assert results["status_code_200"].error_category == "configuration_error"


class TestScenarios:
    """The documented request/expectation pairs, one request each."""

    def test_valid_city(self, stub_capturer):
        response = stub_capturer.execute(build(BASE_URL, "/weather", {"q": "London", "appid": STUB_API_KEY}))
        result = evaluate(
            "valid_city",
            response,
            [status_equals(200), content_type_equals("application/json"), json_path_equals("name", "London")],
        )
        assert result.passed, result.failures

    def test_nothing_to_geocode(self, stub_capturer):
        response = stub_capturer.execute(build(BASE_URL, "/weather", {"appid": STUB_API_KEY}))
        result = evaluate(
            "no_location",
            response,
            [status_equals(400), json_path_equals("message", "Nothing to geocode")],
        )
        assert result.passed, result.failures

    def test_invalid_api_key(self, stub_capturer):
        response = stub_capturer.execute(build(BASE_URL, "/weather", {"q": "London", "appid": INVALID_API_KEY}))
        result = evaluate(
            "bad_key",
            response,
            [status_equals(401), json_path_equals("cod", 401), json_path_contains("message", "Invalid API key")],
        )
        assert result.passed, result.failures

    def test_out_of_range_coordinates(self, stub_capturer):
        response = stub_capturer.execute(
            build(BASE_URL, "/weather", {"lat": 9999, "lon": 9999, "appid": STUB_API_KEY})
        )
        result = evaluate("bad_coords", response, [status_equals(400), json_path_present("message")])
        assert result.passed, result.failures
        assert response.body_json["message"] == "wrong latitude"
