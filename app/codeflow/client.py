"""
OAuth2 authorization code flow client.

Builds the provider authorization URL and exchanges an authorization code
for an access token at the provider's token endpoint.
"""

import logging
from functools import lru_cache
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from app.codeflow.config import AppConfig, ClientCredentials, get_app_config
from app.codeflow.exceptions import MalformedTokenResponseError, TokenExchangeError
from app.codeflow.models import AuthorizationRequest, TokenResponse


logger = logging.getLogger(__name__)

# Characters left unescaped in query values so plain URLs read as-is
QUERY_SAFE_CHARS = ":/"


class CodeFlowClient:
    """
    Client for a hosted OAuth2 authorization server.

    Holds only immutable credentials, so a single instance can be shared by
    all requests. Each token exchange opens its own HTTP client.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        timeout: float = 10.0,
    ):
        self._credentials = credentials
        self._timeout = timeout

    @property
    def authorize_url(self) -> str:
        return f"https://{self._credentials.domain}/authorize"

    @property
    def token_url(self) -> str:
        return f"https://{self._credentials.domain}/oauth/token"

    def build_authorization_url(
        self, redirect_uri: str, audience: str, scope: str
    ) -> str:
        """
        Build the provider's /authorize URL for the code flow.

        Args:
            redirect_uri: Callback URL the provider redirects back to
            audience: API identifier the token should be issued for
            scope: Space-separated scopes

        Returns:
            Absolute authorization URL
        """
        auth_request = AuthorizationRequest(
            redirect_uri=redirect_uri, audience=audience, scope=scope
        )
        query = urlencode(
            auth_request.to_query_params(self._credentials.client_id),
            safe=QUERY_SAFE_CHARS,
            quote_via=quote,
        )
        return f"{self.authorize_url}?{query}"

    async def exchange_code_for_token(self, code: str, redirect_uri: str) -> str:
        """
        Exchange an authorization code for an access token.

        Authenticates with HTTP Basic client credentials.

        Args:
            code: Authorization code from the callback
            redirect_uri: The same redirect URI used for /authorize

        Returns:
            The access token

        Raises:
            TokenExchangeError: Non-200 response or network failure
            MalformedTokenResponseError: Body is not JSON or lacks access_token
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        }
        auth = httpx.BasicAuth(
            self._credentials.client_id, self._credentials.client_secret
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self.token_url, data=data, auth=auth)
        except httpx.RequestError as e:
            logger.error(f"Network error exchanging authorization code: {e}")
            raise TokenExchangeError(f"Network error: {e}") from e

        if response.status_code != httpx.codes.OK:
            logger.error(
                f"Token endpoint returned {response.status_code}",
                extra={"status_code": response.status_code},
            )
            raise TokenExchangeError(
                f"Access token could not be exchanged. {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            token = TokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise MalformedTokenResponseError(
                f"Invalid token response: {e.error_count()} validation error(s)"
            ) from e

        logger.info("Exchanged authorization code for access token")
        return token.access_token


def create_codeflow_client(config: AppConfig) -> CodeFlowClient:
    """Create a CodeFlowClient from application configuration."""
    return CodeFlowClient(config.credentials, timeout=config.http_timeout)


@lru_cache()
def get_codeflow_client() -> CodeFlowClient:
    """
    Get the CodeFlowClient singleton.

    Same instance across requests.
    """
    return create_codeflow_client(get_app_config())
