"""
Authorization code flow endpoints.

- GET /Home/InvokeApi - Redirect the browser to the provider's login page
- GET /Home/InvokeApiCallback - Exchange the code and call the forecast API
- GET /Home/Error - Correlation ID for the current request
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from app.codeflow.client import CodeFlowClient, get_codeflow_client
from app.codeflow.config import AppConfig, get_app_config
from app.codeflow.exceptions import ProviderRejectionError
from app.codeflow.forecast_api import WeatherForecastApiClient, get_forecast_api_client
from app.codeflow.models import WeatherForecast
from app.middleware.request_context import get_request_id


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/Home", tags=["codeflow"])

# Type aliases for cleaner dependency injection
Config = Annotated[AppConfig, Depends(get_app_config)]
FlowClient = Annotated[CodeFlowClient, Depends(get_codeflow_client)]
ForecastApi = Annotated[WeatherForecastApiClient, Depends(get_forecast_api_client)]


def get_callback_url(request: Request, config: AppConfig) -> str:
    """Absolute https callback URL, from BASE_URL when configured."""
    configured = config.get_callback_url()
    if configured:
        return configured
    # TLS usually terminates at the proxy, so the app may only see http
    return str(request.url_for("invoke_api_callback").replace(scheme="https"))


@router.get("/InvokeApi")
async def invoke_api(
    request: Request,
    config: Config,
    client: FlowClient,
) -> RedirectResponse:
    """
    Start the authorization code flow.

    Redirects the browser to the provider's authorization page, asking for
    a token for the configured audience and scope.
    """
    redirect_uri = get_callback_url(request, config)
    endpoint = client.build_authorization_url(
        redirect_uri,
        config.credentials.audience,
        config.credentials.scope,
    )

    logger.info(f"Redirecting to authorization endpoint, callback: {redirect_uri}")
    return RedirectResponse(url=endpoint, status_code=status.HTTP_302_FOUND)


@router.get(
    "/InvokeApiCallback",
    name="invoke_api_callback",
    response_model=list[WeatherForecast],
)
async def invoke_api_callback(
    request: Request,
    config: Config,
    client: FlowClient,
    forecast_api: ForecastApi,
    code: Annotated[str | None, Query(description="Authorization code")] = None,
    error: Annotated[str | None, Query(description="Provider error code")] = None,
    error_description: Annotated[
        str | None, Query(description="Provider error description")
    ] = None,
) -> list[WeatherForecast]:
    """
    Handle the provider callback.

    Exchanges the authorization code for an access token, then calls the
    forecast API with it and returns the records unchanged.

    Raises:
        ProviderRejectionError: The provider returned an error or no code
        TokenExchangeError: The token endpoint rejected the code
        MalformedTokenResponseError: The token response had no access_token
        DownstreamCallError: The forecast API call failed
    """
    if error and error.strip():
        logger.warning(
            f"Provider returned error: {error}",
            extra={"extra_fields": {"error": error}},
        )
        raise ProviderRejectionError(error, error_description)

    if not code or not code.strip():
        raise ProviderRejectionError(
            "invalid_request", "Authorization code missing from callback"
        )

    redirect_uri = get_callback_url(request, config)
    access_token = await client.exchange_code_for_token(code, redirect_uri)

    return await forecast_api.get_forecasts(access_token)


@router.get("/Error")
async def error_page() -> dict:
    """Show the correlation ID of this request."""
    return {
        "status": "error",
        "request_id": get_request_id(),
    }
