"""E-mail dispatch through the SendGrid v3 HTTP API."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from restops.config import settings

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of one dispatch; ``error`` is a short machine-readable reason."""

    sent: bool
    error: Optional[str] = None


class NotificationService:
    """Sends HTML e-mail; never raises to the caller."""

    def __init__(self, api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._api_key = api_key
        self._transport = transport

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key or settings.SENDGRID_API_KEY

    @staticmethod
    def build_payload(to: List[str], subject: str, html: str) -> Dict[str, Any]:
        """SendGrid payload with one personalization per recipient."""
        payload: Dict[str, Any] = {
            "personalizations": [{"to": [{"email": address}]} for address in to],
            "from": {"email": settings.MAIL_FROM_EMAIL, "name": settings.MAIL_FROM_NAME},
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }
        if settings.MAIL_REPLY_TO:
            payload["reply_to"] = {"email": settings.MAIL_REPLY_TO}
        return payload

    @staticmethod
    def _error_from_response(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"HTTP_{response.status_code}"
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors and isinstance(errors, list) and errors[0].get("message"):
            return errors[0]["message"]
        return f"HTTP_{response.status_code}"

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        """POST with retry on connection-level failures."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=settings.MAIL_TIMEOUT_SECONDS, transport=self._transport) as client:
            return await client.post(settings.SENDGRID_API_URL, json=payload, headers=headers)

    async def send_email(self, to: List[str], subject: str, html: str) -> DispatchResult:
        """Send one message to every address in ``to``."""
        if not self.api_key:
            return DispatchResult(sent=False, error="MISSING_API_KEY")
        if not to:
            return DispatchResult(sent=False, error="NO_RECIPIENTS")

        try:
            response = await self._post(self.build_payload(to, subject, html))
        except httpx.HTTPError as exc:
            logger.warning("E-mail dispatch failed: %s", exc)
            return DispatchResult(sent=False, error=type(exc).__name__)

        if response.status_code >= 400:
            error = self._error_from_response(response)
            logger.warning("E-mail dispatch rejected: %s", error)
            return DispatchResult(sent=False, error=error)

        return DispatchResult(sent=True)


notification_service = NotificationService()
