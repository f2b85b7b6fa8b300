"""
Shared test configuration and fixtures.
"""

import os

import pytest
from fastapi.testclient import TestClient

# Environment for the lazily loaded configuration singleton
os.environ.setdefault("AUTH0_DOMAIN", "example.auth0.com")
os.environ.setdefault("AUTH0_CLIENT_ID", "abc")
os.environ.setdefault("AUTH0_CLIENT_SECRET", "s3cret")
os.environ.setdefault("AUTH0_AUDIENCE", "api")
os.environ.setdefault("AUTH0_SCOPE", "openid")
os.environ.setdefault(
    "WEATHER_FORECAST_API_URL", "https://api.example.com/weatherforecast"
)

from app.main import app  # noqa: E402
from app.codeflow.client import CodeFlowClient, get_codeflow_client  # noqa: E402
from app.codeflow.config import (  # noqa: E402
    AppConfig,
    ClientCredentials,
    get_app_config,
)
from app.codeflow.forecast_api import (  # noqa: E402
    WeatherForecastApiClient,
    get_forecast_api_client,
)


FORECAST_URL = "https://api.example.com/weatherforecast"


@pytest.fixture
def credentials():
    """Identity provider credentials used across tests."""
    return ClientCredentials(
        domain="example.auth0.com",
        client_id="abc",
        client_secret="s3cret",
        audience="api",
        scope="openid",
    )


@pytest.fixture
def app_config(credentials):
    """Application config with a fixed public base URL."""
    return AppConfig(
        credentials=credentials,
        weather_forecast_api_url=FORECAST_URL,
        base_url="https://app",
        http_timeout=5.0,
    )


@pytest.fixture
def codeflow_client(credentials):
    """CodeFlowClient for the test provider."""
    return CodeFlowClient(credentials, timeout=5.0)


@pytest.fixture
def forecast_api_client():
    """WeatherForecastApiClient for the test API."""
    return WeatherForecastApiClient(FORECAST_URL, timeout=5.0)


@pytest.fixture
def client(app_config, codeflow_client, forecast_api_client):
    """
    Test client with configuration and clients overridden.

    Outbound HTTP is left to respx in the individual tests.
    """
    app.dependency_overrides[get_app_config] = lambda: app_config
    app.dependency_overrides[get_codeflow_client] = lambda: codeflow_client
    app.dependency_overrides[get_forecast_api_client] = lambda: forecast_api_client

    yield TestClient(app)

    app.dependency_overrides.pop(get_app_config, None)
    app.dependency_overrides.pop(get_codeflow_client, None)
    app.dependency_overrides.pop(get_forecast_api_client, None)
