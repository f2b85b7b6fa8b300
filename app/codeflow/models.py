"""
Authorization code flow request and response models.

Pydantic models for the provider authorization request, the token
endpoint response and the downstream forecast records.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AuthorizationRequest(BaseModel):
    """Parameters of a single /authorize redirect."""

    redirect_uri: str = Field(description="Where the provider sends the code")
    audience: str = Field(description="API identifier the token is issued for")
    scope: str = Field(description="Space-separated OAuth scopes")

    model_config = ConfigDict(frozen=True)

    def to_query_params(self, client_id: str) -> list[tuple[str, str]]:
        """Query parameters in the order the provider URL is built with."""
        return [
            ("response_type", "code"),
            ("client_id", client_id),
            ("scope", self.scope),
            ("redirect_uri", self.redirect_uri),
            ("audience", self.audience),
        ]


class TokenResponse(BaseModel):
    """Token endpoint response. Only access_token is required."""

    access_token: str = Field(min_length=1, description="OAuth2 access token")
    token_type: str | None = Field(default=None, description="Token type")
    expires_in: int | None = Field(default=None, description="Lifetime in seconds")
    scope: str | None = Field(default=None, description="Granted scopes")

    model_config = ConfigDict(extra="ignore")


class WeatherForecast(BaseModel):
    """
    Forecast record returned by the downstream API.

    Records pass through unchanged except that a temperatureC key is
    returned as temperature in the response.
    """

    date: str = Field(description="Forecast date as returned by the API")
    temperature: int | float = Field(
        validation_alias=AliasChoices("temperature", "temperatureC"),
        description="Temperature in Celsius",
    )
    summary: str | None = Field(default=None, description="Short description")

    model_config = ConfigDict(extra="allow")
