"""
Upstream Stub

FastAPI application reproducing the assumed OpenWeather /weather contract,
for offline runs of the suite and for tests:

    weather-contract stub --port 8008
    OPENWEATHER_API_KEY=stub-api-key weather-contract run \\
        --base-url http://127.0.0.1:8008/data/2.5

Only the behavior the suite depends on is reproduced. It is a stand-in
for the external collaborator, not a weather service.
"""

from __future__ import annotations

import copy
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from .config import STUB_API_KEY

INVALID_KEY_MESSAGE = (
    "Invalid API key. Please see https://openweathermap.org/faq#error401 for more info."
)

LONDON_WEATHER: dict[str, Any] = {
    "coord": {"lon": -0.1257, "lat": 51.5085},
    "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
    "base": "stations",
    "main": {
        "temp": 284.63,
        "feels_like": 283.9,
        "temp_min": 283.47,
        "temp_max": 285.61,
        "pressure": 1012,
        "humidity": 81,
    },
    "visibility": 10000,
    "wind": {"speed": 4.63, "deg": 240},
    "clouds": {"all": 75},
    "dt": 1760870000,
    "sys": {"type": 2, "id": 2075535, "country": "GB"},
    "timezone": 3600,
    "id": 2643743,
    "name": "London",
    "cod": 200,
}

KNOWN_CITIES: dict[str, dict[str, Any]] = {"london": LONDON_WEATHER}


def _error(status: int, message: str) -> JSONResponse:
    # upstream reports cod as a number for 401 and as a string otherwise
    cod: int | str = status if status == 401 else str(status)
    return JSONResponse({"cod": cod, "message": message}, status_code=status)


def _coordinate(raw: str, limit: float) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if -limit <= value <= limit else None


def create_stub_app(api_key: str = STUB_API_KEY, rain_1h: float | None = None) -> FastAPI:
    """
    Build the stub app.

    Args:
        api_key: The only appid value accepted.
        rain_1h: When set, success payloads report rain with this hourly volume.
    """
    app = FastAPI(
        title="OpenWeather Stub",
        description="Offline stand-in for the OpenWeather current weather endpoint.",
        version="0.1.0",
    )

    def success(
        name: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
    ) -> JSONResponse:
        payload = copy.deepcopy(LONDON_WEATHER)
        if name is not None:
            payload["name"] = name
        if lat is not None and lon is not None:
            payload["coord"] = {"lon": lon, "lat": lat}
        if rain_1h is not None:
            payload["rain"] = {"1h": rain_1h}
        return JSONResponse(payload)

    @app.get("/data/2.5/weather")
    async def weather(
        appid: str | None = None,
        q: str | None = None,
        lat: str | None = None,
        lon: str | None = None,
    ) -> JSONResponse:
        if appid != api_key:
            return _error(401, INVALID_KEY_MESSAGE)

        if q is not None:
            city = KNOWN_CITIES.get(q.split(",", 1)[0].strip().lower())
            if city is None:
                return _error(404, "city not found")
            return success(name=city["name"])

        if lat is None or lon is None:
            return _error(400, "Nothing to geocode")

        latitude = _coordinate(lat, 90)
        if latitude is None:
            return _error(400, "wrong latitude")
        longitude = _coordinate(lon, 180)
        if longitude is None:
            return _error(400, "wrong longitude")
        return success(lat=latitude, lon=longitude)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_stub_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8008)
