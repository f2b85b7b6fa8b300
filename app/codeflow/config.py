"""
Authorization code flow configuration.

Loaded from environment variables once per process and validated at
startup. The identity provider settings mirror the Auth0:* keys of the
upstream sample (Auth0:Domain -> AUTH0_DOMAIN, and so on).
"""

import logging
import math
import os
from dataclasses import dataclass, field, fields
from functools import lru_cache

from app.codeflow.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

# Default bound for each outbound HTTP call, in seconds
DEFAULT_HTTP_TIMEOUT = 10.0

CALLBACK_PATH = "/Home/InvokeApiCallback"


@dataclass(frozen=True)
class ClientCredentials:
    """Identity provider client registration."""

    domain: str
    client_id: str
    client_secret: str = field(repr=False)
    audience: str
    scope: str


@dataclass(frozen=True)
class AppConfig:
    """
    Application configuration settings.

    Immutable for the lifetime of the process. Call validate() at startup
    to fail fast on missing settings.
    """

    credentials: ClientCredentials
    weather_forecast_api_url: str
    base_url: str = ""
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""
        credentials = ClientCredentials(
            domain=os.getenv("AUTH0_DOMAIN", ""),
            client_id=os.getenv("AUTH0_CLIENT_ID", ""),
            client_secret=os.getenv("AUTH0_CLIENT_SECRET", ""),
            audience=os.getenv("AUTH0_AUDIENCE", ""),
            scope=os.getenv("AUTH0_SCOPE", ""),
        )
        timeout = os.getenv("HTTP_TIMEOUT_SECONDS")
        try:
            http_timeout = float(timeout) if timeout else DEFAULT_HTTP_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                f"HTTP_TIMEOUT_SECONDS must be a number, got {timeout!r}"
            )

        return cls(
            credentials=credentials,
            weather_forecast_api_url=os.getenv("WEATHER_FORECAST_API_URL", ""),
            base_url=os.getenv("BASE_URL", "").rstrip("/"),
            http_timeout=http_timeout,
        )

    def get_callback_url(self) -> str | None:
        """Callback URL built from BASE_URL, or None if it is not set."""
        if not self.base_url:
            return None
        return f"{self.base_url}{CALLBACK_PATH}"

    def validate(self) -> None:
        """
        Validate required configuration.

        Raises:
            ConfigurationError: Listing every required setting that is empty
        """
        missing = [
            f"AUTH0_{f.name.upper()}"
            for f in fields(self.credentials)
            if not getattr(self.credentials, f.name).strip()
        ]
        if not self.weather_forecast_api_url.strip():
            missing.append("WEATHER_FORECAST_API_URL")

        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )
        if not math.isfinite(self.http_timeout) or self.http_timeout <= 0:
            raise ConfigurationError("HTTP_TIMEOUT_SECONDS must be a positive finite number")


@lru_cache()
def get_app_config() -> AppConfig:
    """Get application configuration singleton."""
    return AppConfig.from_env()
