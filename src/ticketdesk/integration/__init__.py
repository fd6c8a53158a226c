"""Integration - Client for the automation webhooks holding clients, projects and tickets."""

from ticketdesk.integration.client import IntegrationClient
from ticketdesk.integration.exceptions import (
    IntegrationError,
    IntegrationHTTPError,
    InvalidResponseError,
)
from ticketdesk.integration.payloads import (
    ClientData,
    RawClientResponse,
    ResponseShape,
    classify_response,
    normalize_date,
    normalize_project,
    normalize_ticket,
    parse_client_data,
    parse_list_field,
    ticket_to_payload,
    unwrap_id,
)

__all__ = [
    "ClientData",
    "IntegrationClient",
    "IntegrationError",
    "IntegrationHTTPError",
    "InvalidResponseError",
    "RawClientResponse",
    "ResponseShape",
    "classify_response",
    "normalize_date",
    "normalize_project",
    "normalize_ticket",
    "parse_client_data",
    "parse_list_field",
    "ticket_to_payload",
    "unwrap_id",
]
