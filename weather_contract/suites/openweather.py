"""
OpenWeather Current Weather Suite

Contract cases for GET {base_url}/weather.
https://openweathermap.org/current

Covers:
- Success responses by city name and by coordinates
- Response shape and field types
- Error responses for missing location, bad API key, bad coordinates
"""

from __future__ import annotations

from ..builder import build
from ..config import (
    INVALID_API_KEY,
    JSON_MEDIA_TYPE,
    KELVIN_MAX,
    KELVIN_MIN,
    OUT_OF_RANGE_COORDINATE,
    WEATHER_PATH,
    HarnessConfig,
)
from ..expectations import (
    JsonKind,
    content_type_equals,
    elapsed_below,
    json_path_between,
    json_path_contains,
    json_path_equals,
    json_path_present,
    json_path_present_if,
    json_path_type,
    status_equals,
)
from ..models import RequestSpec
from ..registry import CaseRegistry


def register_openweather_cases(registry: CaseRegistry, config: HarnessConfig) -> CaseRegistry:
    """
    Register every /weather contract case on the registry.

    The API key is read inside the request factories, so a missing key errors
    each case that needs it instead of preventing registration.
    """

    def by_city() -> RequestSpec:
        return build(
            config.base_url,
            WEATHER_PATH,
            {"q": config.city, "appid": config.require_api_key()},
        )

    def by_coordinates() -> RequestSpec:
        return build(
            config.base_url,
            WEATHER_PATH,
            {"lat": config.lat, "lon": config.lon, "appid": config.require_api_key()},
        )

    def without_location() -> RequestSpec:
        return build(config.base_url, WEATHER_PATH, {"appid": config.require_api_key()})

    def with_invalid_key() -> RequestSpec:
        return build(config.base_url, WEATHER_PATH, {"q": config.city, "appid": INVALID_API_KEY})

    def with_invalid_coordinates() -> RequestSpec:
        return build(
            config.base_url,
            WEATHER_PATH,
            {
                "lat": OUT_OF_RANGE_COORDINATE,
                "lon": OUT_OF_RANGE_COORDINATE,
                "appid": config.require_api_key(),
            },
        )

    registry.register(
        "status_code_200",
        by_city,
        lambda: [status_equals(200)],
        "A valid request by city returns 200.",
    )
    registry.register(
        "content_type_json",
        by_city,
        lambda: [content_type_equals(JSON_MEDIA_TYPE)],
        "Responses are JSON.",
    )
    registry.register(
        "response_time",
        by_city,
        lambda: [elapsed_below(config.max_response_millis)],
        "The response arrives within the latency budget.",
    )
    registry.register(
        "city_name_in_response",
        by_city,
        lambda: [json_path_equals("name", config.city)],
        "The response names the requested city.",
    )
    # Decimal fields are checked as NUMBER: whole values such as 280 arrive
    # without a fraction and classify as INTEGER.
    registry.register(
        "response_schema",
        by_city,
        lambda: [
            json_path_type("coord.lon", JsonKind.NUMBER),
            json_path_type("coord.lat", JsonKind.NUMBER),
            json_path_type("weather[0].id", JsonKind.INTEGER),
            json_path_type("weather[0].description", JsonKind.STRING),
            json_path_type("main.temp", JsonKind.NUMBER),
            json_path_type("main.pressure", JsonKind.INTEGER),
            json_path_type("main.humidity", JsonKind.INTEGER),
            json_path_equals("name", config.city),
        ],
        "Mandatory fields are present with the expected types.",
    )
    registry.register(
        "missing_required_parameter",
        without_location,
        lambda: [
            status_equals(400),
            json_path_equals("message", "Nothing to geocode"),
        ],
        "A request without q or lat/lon is rejected.",
    )
    registry.register(
        "invalid_api_key",
        with_invalid_key,
        lambda: [
            status_equals(401),
            json_path_equals("cod", 401),
            json_path_contains("message", "Invalid API key"),
        ],
        "An invalid API key is rejected with 401.",
    )
    registry.register(
        "temperature_range",
        by_city,
        lambda: [json_path_between("main.temp", KELVIN_MIN, KELVIN_MAX)],
        "The temperature is a plausible Kelvin value.",
    )
    registry.register(
        "optional_rain_field",
        by_city,
        lambda: [
            json_path_present("rain", required=False),
            json_path_present_if("rain.1h", when="rain"),
        ],
        "Rain is optional; when reported it carries hourly volume.",
    )
    registry.register(
        "lat_lon_query",
        by_coordinates,
        lambda: [
            status_equals(200),
            json_path_equals("name", config.city),
        ],
        "Coordinates resolve to the configured city.",
    )
    registry.register(
        "invalid_lat_lon",
        with_invalid_coordinates,
        lambda: [
            status_equals(400),
            json_path_present("message"),
        ],
        "Out-of-range coordinates are rejected with a message.",
    )
    return registry


def create_openweather_registry(config: HarnessConfig) -> CaseRegistry:
    """Create a registry pre-loaded with the OpenWeather /weather cases."""
    return register_openweather_cases(CaseRegistry(timeout_ms=config.timeout_ms), config)
