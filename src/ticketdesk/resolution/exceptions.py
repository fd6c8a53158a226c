"""Custom exceptions for the Client Resolution flow."""


class ResolutionError(Exception):
    """Base exception for Client Resolution errors."""


class NotAuthenticatedError(ResolutionError):
    """Operation requires an authenticated client."""
