"""Test email service functionality"""

import json

import httpx
import pytest

from app.errors import EmailDeliveryError
from app.models import EmailAddress, OutboundMessage
from app.services.email_service import EmailService
from conftest import FakeUpstream

SEND_URL = "https://api.mailchannels.net/tx/v1/send"


@pytest.fixture
def message() -> OutboundMessage:
    return OutboundMessage(
        sender=EmailAddress(email="no-reply@tours.example.com", name="Tours Website"),
        to=[EmailAddress(email="owner@example.com")],
        subject="Test Email from Booking Relay",
        reply_to=EmailAddress(email="ana@guest.example.org", name="Ana Rojas"),
        text="Hello! This is a test email.",
        html="<h1>Hello!</h1><p>This is a test email.</p>",
    )


async def test_send_simple_email(message):
    """Accepted sends return the provider status"""
    upstream = FakeUpstream(mail_responses=[(202, "")])
    async with upstream.client() as client:
        service = EmailService(client=client, api_key="mc-key", send_url=SEND_URL)
        result = await service.send_email(message)

    assert result["status"] == 202
    assert result["sent_at"]
    [request] = upstream.mail_requests
    assert request.method == "POST"
    assert str(request.url) == SEND_URL
    assert request.headers["X-Api-Key"] == "mc-key"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == message.to_mailchannels_payload()


async def test_rejected_send_raises_with_provider_detail(message):
    upstream = FakeUpstream(mail_responses=[(400, "Bad Request: invalid sender")])
    async with upstream.client() as client:
        service = EmailService(client=client, api_key="mc-key", send_url=SEND_URL)
        with pytest.raises(EmailDeliveryError) as exc_info:
            await service.send_email(message)

    assert exc_info.value.status == 400
    assert exc_info.value.detail == "Bad Request: invalid sender"


async def test_transport_failure_raises_without_status(message):
    upstream = FakeUpstream(mail_responses=[httpx.ConnectTimeout("connect timed out")])
    async with upstream.client() as client:
        service = EmailService(client=client, api_key="mc-key", send_url=SEND_URL)
        with pytest.raises(EmailDeliveryError) as exc_info:
            await service.send_email(message)

    assert exc_info.value.status is None
    assert "timed out" in exc_info.value.detail


async def test_each_send_attempted_once(message):
    upstream = FakeUpstream(mail_responses=[(503, "unavailable"), (202, "")])
    async with upstream.client() as client:
        service = EmailService(client=client, api_key="mc-key", send_url=SEND_URL)
        with pytest.raises(EmailDeliveryError):
            await service.send_email(message)

    assert len(upstream.mail_requests) == 1
