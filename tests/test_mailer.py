"""Unit tests for mail delivery.

Tests cover:
- Message composition from a validated form
- deliver() driving the form to sent or rejected
- Debug vs generic failure messages
- MailerSendTransport request building and error mapping
- Transport selection from settings
"""

from unittest.mock import MagicMock

import pytest
import requests

from fluentforms.config import FormSettings
from fluentforms.errors import MailError
from fluentforms.form import MAILER_FAILED_MESSAGE, Form
from fluentforms.mailer import (
    MAILERSEND_URL,
    LoggingTransport,
    MailerSendTransport,
    compose,
    deliver,
    failure_message,
    transport_from_settings,
)
from fluentforms.types import FormStatus


@pytest.fixture
def valid_form():
    form = Form(honeypot=False)
    form.contact_name(required=True)
    form.contact_email(required=True)
    form.contact_message(required=True)
    form.submit(label="Send")
    form.merge({"name": "Ann", "email": "ann@example.com", "message": "Hello there"}).validate()
    assert form.is_valid()
    return form


def mock_response(status, json_body=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.ok = 200 <= status < 300
    if json_body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_body
    return response


class TestCompose:
    """Test building the outbound message."""

    def test_subject_body_and_reply_to(self, valid_form, settings):
        message = compose(valid_form, settings)
        assert message.recipient == "owner@acme.test"
        assert message.subject == "Contact Acme from Ann"
        assert message.body == "Name: Ann\nEmail: ann@example.com\nMessage: Hello there"
        assert message.reply_to == "ann@example.com"

    def test_subject_without_name_field(self, settings):
        form = Form(honeypot=False)
        form.textarea(name="message")
        form.merge({"message": "hi"})
        assert compose(form, settings).subject == "Contact Acme"

    def test_missing_recipient(self, valid_form):
        with pytest.raises(MailError, match="recipient"):
            compose(valid_form, FormSettings())


class TestDeliver:
    """Test deliver() against fake transports."""

    def test_success_sends_once_and_marks_sent(self, valid_form, settings, recording_transport):
        form = deliver(valid_form, recording_transport, settings)
        assert form.status == FormStatus.SENT
        assert len(recording_transport.sent) == 1
        assert recording_transport.sent[0].reply_to == "ann@example.com"
        assert form.fields == []

    def test_failure_rejects_with_generic_message(self, valid_form, settings, failing_transport):
        form = deliver(valid_form, failing_transport, settings)
        assert form.status == FormStatus.REJECTED
        assert form.error_message() == f"429: {MAILER_FAILED_MESSAGE}"
        assert "quota" not in form.error_message()

    def test_failure_in_debug_exposes_error(self, valid_form, failing_transport):
        settings = FormSettings(mail_to="owner@acme.test", debug=True)
        form = deliver(valid_form, failing_transport, settings)
        assert form.error_message() == "quota exceeded"

    def test_invalid_form_is_not_sent(self, settings, recording_transport):
        form = Form(honeypot=False)
        form.text(name="name", required=True)
        form.validate()
        deliver(form, recording_transport, settings)
        assert recording_transport.sent == []
        assert form.status == FormStatus.INVALID

    def test_unvalidated_form_is_not_sent(self, settings, recording_transport):
        form = Form(honeypot=False)
        deliver(form, recording_transport, settings)
        assert recording_transport.sent == []

    def test_missing_recipient_rejects(self, valid_form, recording_transport):
        form = deliver(valid_form, recording_transport, FormSettings())
        assert form.status == FormStatus.REJECTED
        assert form.error_message() == MAILER_FAILED_MESSAGE
        assert recording_transport.sent == []


class TestFailureMessage:
    def test_without_code(self):
        assert failure_message(MailError("down"), FormSettings()) == MAILER_FAILED_MESSAGE


class TestMailerSendTransport:
    """Test the MailerSend HTTP transport with a mocked session."""

    def _transport(self, response=None, error=None):
        session = MagicMock(spec=requests.Session)
        if error is not None:
            session.post.side_effect = error
        else:
            session.post.return_value = response
        transport = MailerSendTransport(
            api_key="key", sender="noreply@acme.test", sender_name="Acme", recipient_name="Owner", session=session,
        )
        return transport, session

    def test_posts_expected_payload(self):
        transport, session = self._transport(mock_response(202))
        transport.send("owner@acme.test", "Subject", "Body", reply_to="ann@example.com")

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args == (MAILERSEND_URL,)
        assert kwargs["headers"] == {"Authorization": "Bearer key"}
        assert kwargs["timeout"] == 10.0
        assert kwargs["json"] == {
            "from": {"email": "noreply@acme.test", "name": "Acme"},
            "to": [{"email": "owner@acme.test", "name": "Owner"}],
            "subject": "Subject",
            "text": "Body",
            "reply_to": {"email": "ann@example.com"},
        }

    def test_no_reply_to(self):
        transport, _ = self._transport(mock_response(202))
        payload = transport.build_payload("owner@acme.test", "S", "B")
        assert "reply_to" not in payload

    def test_error_response(self):
        """Should raise MailError with the provider message and status."""
        transport, _ = self._transport(mock_response(429, {"message": "quota exceeded"}))
        with pytest.raises(MailError) as exc_info:
            transport.send("owner@acme.test", "S", "B")
        assert str(exc_info.value) == "quota exceeded"
        assert exc_info.value.code == 429

    def test_error_response_without_json(self):
        transport, _ = self._transport(mock_response(500))
        with pytest.raises(MailError, match="HTTP 500") as exc_info:
            transport.send("owner@acme.test", "S", "B")
        assert exc_info.value.code == 500

    def test_network_error(self):
        transport, _ = self._transport(error=requests.ConnectionError("refused"))
        with pytest.raises(MailError, match="refused") as exc_info:
            transport.send("owner@acme.test", "S", "B")
        assert exc_info.value.code is None


class TestTransportSelection:
    """Test transport_from_settings."""

    def test_logging_outside_production(self):
        transport = transport_from_settings(FormSettings(app_env="local"))
        assert isinstance(transport, LoggingTransport)

    def test_mailersend_in_production(self):
        settings = FormSettings(app_env="production", mailersend_api_key="key", mail_from="a@b.test")
        transport = transport_from_settings(settings)
        assert isinstance(transport, MailerSendTransport)
        assert transport.sender_name == "Contact Form"

    def test_production_requires_credentials(self):
        with pytest.raises(ValueError):
            transport_from_settings(FormSettings(app_env="production"))

    def test_logging_transport_records(self):
        transport = LoggingTransport()
        transport.send("a@b.test", "S", "B")
        assert transport.sent[0].subject == "S"
