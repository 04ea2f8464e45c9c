# =============================================================================
# lib/email_client.py - Resend Email Client
# =============================================================================
# Thin wrapper over the Resend REST API (POST /emails).
#
# Usage:
#   client = ResendEmailClient(api_key="re_...")
#   client.send("Hasapakia <onboarding@resend.dev>", ["ops@example.com"],
#               "New supplier", "<h1>Hello</h1>")
# =============================================================================

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.resend.com"


class EmailClientError(Exception):
    """Raised when an email could not be handed to the provider."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ResendEmailClient:
    """Sends HTML email through Resend. Each call is a single attempt."""

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def send(self, sender: str, to: list[str], subject: str, html: str) -> dict[str, Any]:
        """
        Send one message.

        Returns:
            The provider response (contains the message id)

        Raises:
            EmailClientError: On transport errors or a non-2xx response
        """
        try:
            response = httpx.post(
                f"{self.api_url}/emails",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={"from": sender, "to": to, "subject": subject, "html": html},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise EmailClientError(f"Email request failed: {e}")

        if response.status_code >= 400:
            raise EmailClientError(
                f"Email provider returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        logger.debug(f"Email sent to {len(to)} recipient(s): {subject}")
        return response.json()
