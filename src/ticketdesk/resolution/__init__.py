"""Client Resolution - Session/URL driven client lookup and the in-memory workspace."""

from ticketdesk.resolution.exceptions import NotAuthenticatedError, ResolutionError
from ticketdesk.resolution.mock_directory import MockDirectory, build_mock_directory
from ticketdesk.resolution.models import DeskSnapshot, Location, ResolutionState
from ticketdesk.resolution.resolver import ClientResolver

__all__ = [
    "ClientResolver",
    "DeskSnapshot",
    "Location",
    "MockDirectory",
    "NotAuthenticatedError",
    "ResolutionError",
    "ResolutionState",
    "build_mock_directory",
]
