"""
Centralized configuration for the weather contract harness.

All magic values, API URLs, and constants in one place.
Supports environment variable overrides for deployment flexibility.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .errors import ConfigurationError

# -----------------------------------------------------------------------------
# API Base URLs
# -----------------------------------------------------------------------------

OPENWEATHER_BASE_URL = os.environ.get(
    "OPENWEATHER_BASE_URL",
    "https://api.openweathermap.org/data/2.5",
)

WEATHER_PATH = "/weather"

# -----------------------------------------------------------------------------
# HTTP Configuration
# -----------------------------------------------------------------------------

HTTP_TIMEOUT_MS = float(os.environ.get("WEATHER_CONTRACT_TIMEOUT_MS", "5000"))
MAX_RESPONSE_MILLIS = 2000

JSON_MEDIA_TYPE = "application/json"

# -----------------------------------------------------------------------------
# Scenario Defaults
# Reference: https://openweathermap.org/current
# -----------------------------------------------------------------------------

DEFAULT_CITY = os.environ.get("WEATHER_CONTRACT_CITY", "London")
DEFAULT_LAT = 51.5085
DEFAULT_LON = -0.1257

INVALID_API_KEY = "INVALID_API_KEY"
OUT_OF_RANGE_COORDINATE = 9999

# Plausible surface temperatures in Kelvin (exclusive bounds)
KELVIN_MIN = 200.0
KELVIN_MAX = 330.0

API_KEY_ENV_VAR = "OPENWEATHER_API_KEY"

# Query parameters whose values must never appear in logs or reports
SECRET_QUERY_PARAMS = frozenset({"appid"})

# -----------------------------------------------------------------------------
# Stub Server Configuration
# -----------------------------------------------------------------------------

STUB_HOST = os.environ.get("WEATHER_CONTRACT_STUB_HOST", "127.0.0.1")
STUB_PORT = int(os.environ.get("WEATHER_CONTRACT_STUB_PORT", "8008"))
STUB_API_KEY = "stub-api-key"

# -----------------------------------------------------------------------------
# Harness Configuration
# -----------------------------------------------------------------------------


class HarnessConfig(BaseModel):
    """
    Process-wide configuration, built once at startup.

    Frozen after construction. Passed explicitly to the suite builders
    rather than read from module globals at request time.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = OPENWEATHER_BASE_URL
    api_key: SecretStr | None = None
    city: str = DEFAULT_CITY
    lat: float = DEFAULT_LAT
    lon: float = DEFAULT_LON
    timeout_ms: float = Field(default=HTTP_TIMEOUT_MS, gt=0)
    max_response_millis: float = Field(default=MAX_RESPONSE_MILLIS, gt=0)

    @classmethod
    def from_env(cls, **overrides: object) -> HarnessConfig:
        """Build a config from the environment; explicit overrides win over env."""
        values: dict[str, object] = {}
        api_key = os.environ.get(API_KEY_ENV_VAR)
        if api_key:
            values["api_key"] = api_key
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def require_api_key(self) -> str:
        """Return the API key, failing loudly if none is configured."""
        if self.api_key is None or not self.api_key.get_secret_value().strip():
            raise ConfigurationError(
                f"No API key configured. Set {API_KEY_ENV_VAR} or pass --api-key."
            )
        return self.api_key.get_secret_value()
