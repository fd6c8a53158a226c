"""Custom exceptions for the Integration Endpoint client."""


class IntegrationError(Exception):
    """Base exception for Integration Endpoint errors (including transport failures)."""


class IntegrationHTTPError(IntegrationError):
    """Endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(IntegrationError):
    """Endpoint answered with a body that is not valid JSON."""
