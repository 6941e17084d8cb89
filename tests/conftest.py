"""Shared test fixtures for the Cakto webhook API."""

from __future__ import annotations

from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from app.configs.app_settings import Settings, get_settings
from app.main import app
from app.models.email_models import EmailSendResult
from app.routes.cakto_webhook_routes import get_email_notifier

WEBHOOK_URL = "/api/cakto-webhook"
SECRET = "abc123"


class FakeNotifier:
    """Records every send call and answers with a fixed result (or raises)."""

    def __init__(self, result: Optional[EmailSendResult] = None, error: Optional[Exception] = None):
        self.result = result or EmailSendResult.success("fake-id")
        self.error = error
        self.calls: list[dict[str, str]] = []

    def send(self, recipient: str, subject: str, text_body: str, html_body: str) -> EmailSendResult:
        self.calls.append({"recipient": recipient, "subject": subject, "text_body": text_body, "html_body": html_body})
        if self.error is not None:
            raise self.error
        return self.result


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"CAKTO_WEBHOOK_SECRET": None, "RESEND_API_KEY": None, "SMTP_HOST": None}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def approved_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "event": "purchase_approved",
        "secret": SECRET,
        "data": {"customer": {"email": "a@b.com"}, "product": {"name": "Curso X"}},
    }
    body.update(overrides)
    return body


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def make_client():
    """Build a TestClient with injected settings and notifier."""

    def _make(settings: Optional[Settings] = None, email_notifier: Optional[FakeNotifier] = None) -> TestClient:
        injected_settings = settings or make_settings()
        injected_notifier = email_notifier or FakeNotifier()
        app.dependency_overrides[get_settings] = lambda: injected_settings
        app.dependency_overrides[get_email_notifier] = lambda: injected_notifier
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture()
def client(make_client, notifier: FakeNotifier) -> TestClient:
    """Client with SECRET configured and the shared fake notifier."""
    return make_client(make_settings(CAKTO_WEBHOOK_SECRET=SECRET), notifier)
