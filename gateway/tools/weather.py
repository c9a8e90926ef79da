from __future__ import annotations

import logging

import httpx

from .base import CapabilityAdapter

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class WeatherAdapter(CapabilityAdapter):
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = "metric",
    ) -> None:
        super().__init__(client, api_key, base_url)
        self.units = units

    async def invoke(self, location: str) -> str:
        if not self.api_key:
            logger.warning("Weather lookup skipped: OPENWEATHER_API_KEY is not set")
            return _apology(location)

        try:
            response = await self.client.get(
                f"{self.base_url}/weather",
                params={"q": location, "appid": self.api_key, "units": self.units},
            )
            payload = response.json()
            if response.is_error or not payload.get("weather") or not payload.get("main"):
                logger.warning(
                    "Weather lookup for %r failed (status=%s): %s",
                    location,
                    response.status_code,
                    payload.get("message", "Unknown error"),
                )
                return _apology(location)

            description = payload["weather"][0]["description"]
            temperature = payload["main"]["temp"]
            name = payload.get("name") or location
        except Exception:
            logger.exception("Weather API error for %r", location)
            return _apology(location)

        return (
            f"The current weather in {name} is {description} "
            f"with a temperature of {temperature}°C."
        )


def _apology(location: str) -> str:
    return (
        f'Sorry, I couldn\'t fetch the weather for "{location}". '
        "Please try again later."
    )
