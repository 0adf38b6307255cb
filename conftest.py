"""Shared fixtures: settings and a fake Turnstile/MailChannels upstream"""

import json
from typing import Any, List

import httpx
import pytest

from app.config import Settings

TURNSTILE_HOST = "challenges.cloudflare.com"
MAILCHANNELS_HOST = "api.mailchannels.net"


class FakeUpstream:
    """Answers outbound calls for both providers and records every request.

    turnstile: dict returned as JSON, an httpx.Response, or an exception to raise.
    mail_responses: queue of (status, text) tuples or exceptions, one per send;
    sends beyond the queue get 202.
    """

    def __init__(self, turnstile: Any = None, mail_responses: List[Any] = None):
        self.turnstile = {"success": True, "error-codes": []} if turnstile is None else turnstile
        self.mail_responses = list(mail_responses or [])
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == TURNSTILE_HOST:
            if isinstance(self.turnstile, Exception):
                raise self.turnstile
            if isinstance(self.turnstile, httpx.Response):
                return self.turnstile
            return httpx.Response(200, json=self.turnstile)
        if request.url.host == MAILCHANNELS_HOST:
            outcome = self.mail_responses.pop(0) if self.mail_responses else (202, "")
            if isinstance(outcome, Exception):
                raise outcome
            status, text = outcome
            return httpx.Response(status, text=text)
        return httpx.Response(404, text="unexpected host")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def turnstile_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == TURNSTILE_HOST]

    @property
    def mail_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == MAILCHANNELS_HOST]

    @property
    def mail_payloads(self) -> List[dict]:
        return [json.loads(r.content) for r in self.mail_requests]


def make_settings(**overrides) -> Settings:
    values = {
        "to_emails": "owner@example.com, desk@example.com",
        "bcc_emails": "audit@example.com",
        "mc_api_key": "mc-test-key",
        "turnstile_secret": "ts-test-secret",
        "from_email": "no-reply@tours.example.com",
        "from_name": "Tours Website",
        "guest_from_name": "Tours Reservations",
        "business_name": "Pacific Tours",
        "site_name": "tours.example.com",
        "environment": "test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def submission() -> dict:
    return {
        "first_name": "Ana",
        "last_name": "Rojas",
        "email": "ana@guest.example.org",
        "phone": "+506 8888-0000",
        "date": "2025-08-16",
        "message": "Two adults, one child.",
        "company": "",
        "turnstile_token": "tok-123",
    }
