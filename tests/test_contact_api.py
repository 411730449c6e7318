"""Tests for the public contact form and the SMTP mailer behind it."""

import asyncio
import logging
from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest
from fastapi.testclient import TestClient

from inkwell.main import app
from inkwell.models.contact import ContactForm
from inkwell.models.email_settings import StoredEmailSettings
from inkwell.routers.contact import limiter
from inkwell.services.email_settings import EmailSettingsStore
from inkwell.services.mailer import build_contact_message, send_contact_message
from inkwell.services.secret_codec import encrypt_secret

client = TestClient(app)

_PASSWORD = "s3cret-smtp-pass"

_MESSAGE = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "message": "I would like to get in touch about your work.",
}


def _stored(encrypted: str = None) -> StoredEmailSettings:
    return StoredEmailSettings(
        email_host_smtp="smtp.example.com",
        email_port_smtp=465,
        is_email_secure_smtp=True,
        email_user="site@example.com",
        email_pass_encrypted=encrypted if encrypted is not None else encrypt_secret(_PASSWORD),
    )


@pytest.fixture(autouse=True)
def reset_state():
    limiter.reset()
    app.state.email_settings_store = EmailSettingsStore()
    yield


@pytest.fixture
def configured():
    app.state.email_settings_store.update(lambda _: _stored())


@pytest.fixture
def sender():
    with patch("inkwell.routers.contact.send_contact_message", new_callable=AsyncMock) as mock:
        yield mock


class TestContactEndpoint:
    def test_sends_message(self, configured, sender):
        resp = client.post("/contact", json=_MESSAGE)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Email sent successfully"}

    def test_password_decrypted_for_sending(self, configured, sender):
        client.post("/contact", json=_MESSAGE)
        sender.assert_awaited_once()
        settings, password, form = sender.await_args.args
        assert password == _PASSWORD
        assert settings.email_user == "site@example.com"
        assert form.email == "ada@example.com"

    def test_no_role_needed(self, configured, sender):
        resp = client.post("/contact", json=_MESSAGE, headers={})
        assert resp.status_code == 200

    def test_not_configured(self, sender):
        resp = client.post("/contact", json=_MESSAGE)
        assert resp.status_code == 503
        sender.assert_not_awaited()

    def test_smtp_failure(self, configured, sender):
        sender.side_effect = aiosmtplib.SMTPException("connection refused")
        resp = client.post("/contact", json=_MESSAGE)
        assert resp.status_code == 502
        assert resp.json() == {"detail": "Error sending the email."}

    def test_undecryptable_password(self, sender):
        app.state.email_settings_store.update(lambda _: _stored(encrypted="00" * 8))
        resp = client.post("/contact", json=_MESSAGE)
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Could not process settings."}
        sender.assert_not_awaited()


class TestContactValidation:
    def test_bad_email(self, configured, sender):
        resp = client.post("/contact", json={**_MESSAGE, "email": "not-an-address"})
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["field"] == "email"
        sender.assert_not_awaited()

    def test_message_too_short(self, configured, sender):
        resp = client.post("/contact", json={**_MESSAGE, "message": "hi"})
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["field"] == "message"

    def test_message_too_long(self, configured, sender):
        resp = client.post("/contact", json={**_MESSAGE, "message": "x" * 501})
        assert resp.status_code == 422

    def test_header_injection_in_name(self, configured, sender):
        resp = client.post("/contact", json={**_MESSAGE, "name": "Eve\r\nBcc: all@example.com"})
        assert resp.status_code == 422
        errors = {e["field"]: e["message"] for e in resp.json()["errors"]}
        assert errors["name"] == "Name must not contain control characters"


class TestContactRateLimit:
    def test_sixth_request_in_a_minute_is_limited(self, configured, sender):
        for _ in range(5):
            assert client.post("/contact", json=_MESSAGE).status_code == 200
        assert client.post("/contact", json=_MESSAGE).status_code == 429
        assert sender.await_count == 5


class TestBuildContactMessage:
    def test_headers(self):
        message = build_contact_message(_stored(), ContactForm(**_MESSAGE))
        assert message["To"] == "site@example.com"
        assert message["Reply-To"] == "ada@example.com"
        assert message["Subject"] == "Contact Form: Message from Ada Lovelace"
        assert "Ada Lovelace via Contact Form" in message["From"]
        assert "<site@example.com>" in message["From"]

    def test_body(self):
        body = build_contact_message(_stored(), ContactForm(**_MESSAGE)).get_content()
        assert "Name: Ada Lovelace" in body
        assert "Email: ada@example.com" in body
        assert "Message: I would like to get in touch about your work." in body


class TestSendContactMessage:
    def test_passes_connection_settings(self):
        with patch("inkwell.services.mailer.aiosmtplib.send", new_callable=AsyncMock) as send:
            asyncio.run(
                send_contact_message(_stored(), _PASSWORD, ContactForm(**_MESSAGE), timeout=3.0)
            )
        send.assert_awaited_once()
        kwargs = send.await_args.kwargs
        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["port"] == 465
        assert kwargs["username"] == "site@example.com"
        assert kwargs["password"] == _PASSWORD
        assert kwargs["use_tls"] is True
        assert kwargs["timeout"] == 3.0

    def test_log_line_names_the_host_not_the_password(self, caplog):
        with patch("inkwell.services.mailer.aiosmtplib.send", new_callable=AsyncMock):
            with caplog.at_level(logging.INFO, logger="inkwell.services.mailer"):
                asyncio.run(
                    send_contact_message(_stored(), _PASSWORD, ContactForm(**_MESSAGE), timeout=3.0)
                )
        messages = [r.getMessage() for r in caplog.records]
        assert any("smtp.example.com" in m for m in messages)
        assert not any(_PASSWORD in m for m in messages)

    def test_smtp_errors_propagate(self):
        with patch(
            "inkwell.services.mailer.aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPException("auth failed"),
        ):
            with pytest.raises(aiosmtplib.SMTPException):
                asyncio.run(
                    send_contact_message(_stored(), _PASSWORD, ContactForm(**_MESSAGE), timeout=3.0)
                )
