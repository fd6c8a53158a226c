"""IntegrationClient - talks to the automation webhooks behind the dashboard."""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from ticketdesk.integration.exceptions import (
    IntegrationError,
    IntegrationHTTPError,
    InvalidResponseError,
)
from ticketdesk.integration.payloads import ticket_to_payload
from ticketdesk.logging import log_raw_response, sanitize_for_log, truncate_output

if TYPE_CHECKING:
    from ticketdesk.tickets.models import Ticket

logger = logging.getLogger("ticketdesk.integration")


class IntegrationClient:
    """Client for the Integration Endpoint's two webhooks.

    One webhook receives new tickets; the other returns a client's full record
    (identity, projects, tickets) looked up by email or client id.
    """

    def __init__(
        self,
        ticket_webhook_url: str = "",
        client_data_webhook_url: str = "",
        timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            ticket_webhook_url: Webhook receiving new tickets (empty disables sending)
            client_data_webhook_url: Webhook returning full client data (empty disables lookups)
            timeout: Request timeout in seconds
        """
        self.ticket_webhook_url = ticket_webhook_url
        self.client_data_webhook_url = client_data_webhook_url
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        """POST JSON and check the status.

        Raises:
            IntegrationHTTPError: On a non-2xx status
            IntegrationError: On transport failure
        """
        try:
            response = self.client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise IntegrationError(f"Request to integration endpoint failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise IntegrationHTTPError(
                response.status_code,
                f"HTTP error from integration endpoint: {response.status_code}",
            )
        return response

    def send_ticket(self, ticket: Ticket) -> None:
        """Forward a new ticket to the submission webhook.

        Raises:
            IntegrationHTTPError: On a non-2xx status
            IntegrationError: On transport failure
        """
        payload = ticket_to_payload(ticket)
        if not self.ticket_webhook_url:
            logger.warning("No ticket webhook configured, ticket %s not sent", ticket.id)
            logger.debug("Unsent payload: %s", payload)
            return

        self._post(self.ticket_webhook_url, payload)
        logger.info("Ticket %s sent to integration endpoint", ticket.id)

    def fetch_full_client_data(
        self, email: str | None = None, client_id: str | None = None
    ) -> Any:
        """Fetch a client's full record by email and/or client id.

        A millisecond timestamp is added to the body so intermediaries never
        serve a cached answer.

        Returns:
            The decoded JSON body, or None when no lookup webhook is configured.

        Raises:
            IntegrationHTTPError: On a non-2xx status
            InvalidResponseError: If the body is not valid JSON
            IntegrationError: On transport failure
        """
        if not self.client_data_webhook_url:
            logger.warning("No client data webhook configured")
            return None

        payload: dict[str, Any] = {}
        if email:
            payload["email"] = email
        if client_id:
            payload["clientId"] = client_id
        payload["_t"] = int(time.time() * 1000)

        response = self._post(self.client_data_webhook_url, payload)
        text = response.text
        log_raw_response("Client data response", text)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(
                "Invalid JSON from integration endpoint: %s",
                truncate_output(sanitize_for_log(text), 500),
            )
            raise InvalidResponseError(f"Invalid JSON from server: {e}") from e
        return data
