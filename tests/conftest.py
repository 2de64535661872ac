"""Shared fixtures for the FluentForms test suite."""

from datetime import datetime, timezone
from typing import List, Optional

import pytest

from fluentforms.clock import FixedClock
from fluentforms.config import FormSettings
from fluentforms.errors import MailError
from fluentforms.form import Form
from fluentforms.mailer import MailMessage

RENDER_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class RecordingTransport:
    """Transport that keeps every message it is asked to send."""

    def __init__(self):
        self.sent: List[MailMessage] = []

    def send(self, recipient, subject, body, reply_to=None):
        self.sent.append(MailMessage(recipient=recipient, subject=subject, body=body, reply_to=reply_to))


class FailingTransport:
    """Transport that always fails with the given message."""

    def __init__(self, message: str = "quota exceeded", code: Optional[int] = 429):
        self.message = message
        self.code = code
        self.attempts = 0

    def send(self, recipient, subject, body, reply_to=None):
        self.attempts += 1
        raise MailError(self.message, code=self.code)


@pytest.fixture
def clock():
    return FixedClock(RENDER_TIME)


@pytest.fixture
def contact_form(clock):
    """Contact form with required name, email and message and a submit button."""
    form = Form(clock=clock, action="/contact")
    form.text(name="name", required=True)
    form.email(name="email", required=True)
    form.textarea(name="message", required=True)
    form.submit(label="Send")
    return form


@pytest.fixture
def human_payload(clock):
    """Build a payload that passes the honeypot after a five second wait."""

    def build(form: Form, elapsed: float = 5, **values):
        clock.advance(elapsed)
        payload = {"my_name": "", "request": form.field("request").value}
        payload.update(values)
        return payload

    return build


@pytest.fixture
def settings():
    return FormSettings(app_name="Acme", mail_to="owner@acme.test", mail_from="noreply@acme.test")


@pytest.fixture
def recording_transport():
    return RecordingTransport()


@pytest.fixture
def failing_transport():
    return FailingTransport()
