"""Text messages through the Twilio REST API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from errors import MessagingError

log = logging.getLogger(__name__)


class SmsClient:
    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        api_base: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def send(self, to: str, from_: str, body: str) -> str:
        """Send ``body`` from ``from_`` to ``to`` and return the message sid."""
        if not self.account_sid or not self.auth_token:
            raise MessagingError("messaging credentials are not configured")
        url = f"{self.api_base}/Accounts/{self.account_sid}/Messages.json"
        data = {"To": to, "From": from_, "Body": body}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, data=data, auth=(self.account_sid, self.auth_token))
        except httpx.HTTPError as exc:
            raise MessagingError(f"message request failed: {exc}") from exc

        if response.status_code >= 400:
            log.error("Failed to send text message: %s", response.text)
            raise MessagingError(f"HTTP {response.status_code} from messaging API")
        try:
            sid = response.json()["sid"]
        except (ValueError, KeyError, TypeError) as exc:
            raise MessagingError("messaging API response has no sid") from exc
        log.info("Sent text message to %s: %s", to, sid)
        return sid
