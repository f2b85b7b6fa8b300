"""
Authorization code flow exceptions.

All errors raised while running the flow derive from CodeFlowError and are
turned into a generic error page by the centralized handler in main.py.
"""


class CodeFlowError(Exception):
    """Base exception for authorization code flow errors."""

    pass


class ConfigurationError(CodeFlowError):
    """Required configuration is missing or empty."""

    pass


class ProviderRejectionError(CodeFlowError):
    """The identity provider redirected back with an error instead of a code."""

    def __init__(self, error: str, description: str | None = None):
        self.error = error
        self.description = description
        super().__init__(f"{error}:{description or ''}")


class TokenExchangeError(CodeFlowError):
    """The token endpoint did not return 200 or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class MalformedTokenResponseError(CodeFlowError):
    """The token endpoint returned 200 without a usable access_token."""

    pass


class DownstreamCallError(CodeFlowError):
    """The downstream API call failed or returned an unexpected body."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
