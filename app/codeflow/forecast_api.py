"""
Client for the protected weather forecast API.
"""

import logging
from functools import lru_cache

import httpx
from pydantic import TypeAdapter, ValidationError

from app.codeflow.config import get_app_config
from app.codeflow.exceptions import DownstreamCallError
from app.codeflow.models import WeatherForecast


logger = logging.getLogger(__name__)

_forecast_list = TypeAdapter(list[WeatherForecast])


class WeatherForecastApiClient:
    """Calls the downstream API with a bearer token."""

    def __init__(self, api_url: str, timeout: float = 10.0):
        self._api_url = api_url
        self._timeout = timeout

    async def get_forecasts(self, access_token: str) -> list[WeatherForecast]:
        """
        Fetch forecast records on behalf of the signed-in user.

        Args:
            access_token: Bearer token from the code exchange

        Returns:
            Forecast records as returned by the API

        Raises:
            DownstreamCallError: On non-2xx status, network error or bad body
        """
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._api_url, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Forecast API error: {e.response.status_code}",
                extra={"status_code": e.response.status_code},
            )
            raise DownstreamCallError(
                f"API request failed: {e.response.status_code} {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Forecast API network error: {e}")
            raise DownstreamCallError(f"Network error: {e}") from e

        try:
            forecasts = _forecast_list.validate_json(response.content)
        except ValidationError as e:
            raise DownstreamCallError(
                f"Failed to parse API response: {e.error_count()} validation error(s)",
                status_code=response.status_code,
            ) from e

        logger.info(f"Fetched {len(forecasts)} forecast record(s)")
        return forecasts


@lru_cache()
def get_forecast_api_client() -> WeatherForecastApiClient:
    """Get the WeatherForecastApiClient singleton."""
    config = get_app_config()
    return WeatherForecastApiClient(
        config.weather_forecast_api_url, timeout=config.http_timeout
    )
