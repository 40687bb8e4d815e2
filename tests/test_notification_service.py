"""Tests for e-mail dispatch."""
import json

import httpx
import pytest

from restops.config import settings
from restops.services.notification_service import NotificationService


@pytest.mark.asyncio
async def test_send_email_posts_sendgrid_payload(monkeypatch):
    monkeypatch.setattr(settings, "MAIL_REPLY_TO", "ops@bistro.test")
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["payload"] = json.loads(request.content)
        return httpx.Response(202)

    service = NotificationService(api_key="sg-key", transport=httpx.MockTransport(handler))
    result = await service.send_email(["a@bistro.test", "b@bistro.test"], "Subject", "<p>Body</p>")

    assert result.sent is True
    assert result.error is None
    assert captured["url"] == settings.SENDGRID_API_URL
    payload = captured["payload"]
    assert [p["to"][0]["email"] for p in payload["personalizations"]] == ["a@bistro.test", "b@bistro.test"]
    assert payload["from"]["email"] == settings.MAIL_FROM_EMAIL
    assert payload["reply_to"] == {"email": "ops@bistro.test"}
    assert payload["content"] == [{"type": "text/html", "value": "<p>Body</p>"}]


@pytest.mark.asyncio
async def test_send_email_without_recipients():
    service = NotificationService(api_key="sg-key", transport=httpx.MockTransport(lambda request: httpx.Response(202)))

    result = await service.send_email([], "Subject", "<p>Body</p>")

    assert result.sent is False
    assert result.error == "NO_RECIPIENTS"


@pytest.mark.asyncio
async def test_send_email_reports_http_status_without_error_body():
    service = NotificationService(api_key="sg-key", transport=httpx.MockTransport(lambda request: httpx.Response(503)))

    result = await service.send_email(["a@bistro.test"], "Subject", "<p>Body</p>")

    assert result.sent is False
    assert result.error == "HTTP_503"


@pytest.mark.asyncio
async def test_send_email_retries_transport_errors():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(202)

    service = NotificationService(api_key="sg-key", transport=httpx.MockTransport(handler))
    result = await service.send_email(["a@bistro.test"], "Subject", "<p>Body</p>")

    assert result.sent is True
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_send_email_gives_up_after_three_attempts():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    service = NotificationService(api_key="sg-key", transport=httpx.MockTransport(handler))
    result = await service.send_email(["a@bistro.test"], "Subject", "<p>Body</p>")

    assert result.sent is False
    assert result.error == "ConnectError"
    assert len(attempts) == 3
