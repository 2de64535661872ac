"""Mail delivery for FluentForms.

The form core never talks to a mail provider directly. Delivery goes
through a MailTransport, any object with a ``send`` method that returns on
success and raises MailError on failure. ``deliver`` composes the message
from a validated form, calls the transport, and drives the form to sent or
rejected.

Two transports ship with the package:
- MailerSendTransport posts to the MailerSend HTTP API
- LoggingTransport records and logs messages without sending them
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import requests

from fluentforms.config import FormSettings
from fluentforms.errors import MailError
from fluentforms.form import MAILER_FAILED_MESSAGE, Form
from fluentforms.types import FieldKind

logger = logging.getLogger(__name__)

MAILERSEND_URL = "https://api.mailersend.com/v1/email"


class MailTransport(Protocol):
    def send(self, recipient: str, subject: str, body: str, reply_to: Optional[str] = None) -> None:
        """Deliver one message or raise MailError."""


@dataclass(frozen=True)
class MailMessage:
    """A composed outbound message."""
    recipient: str
    subject: str
    body: str
    reply_to: Optional[str] = None


class MailerSendTransport:
    """Sends mail through the MailerSend email API.

    Attributes:
        api_key: MailerSend API token
        sender: From address
        sender_name: From display name
        recipient_name: Display name for the recipient
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_key: str,
        sender: str,
        sender_name: str = "Contact Form",
        recipient_name: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        url: str = MAILERSEND_URL,
    ):
        self.api_key = api_key
        self.sender = sender
        self.sender_name = sender_name
        self.recipient_name = recipient_name
        self.timeout = timeout
        self.url = url
        self._session = session or requests.Session()

    def build_payload(self, recipient: str, subject: str, body: str, reply_to: Optional[str] = None) -> Dict[str, Any]:
        to: Dict[str, Any] = {"email": recipient}
        if self.recipient_name:
            to["name"] = self.recipient_name
        payload: Dict[str, Any] = {
            "from": {"email": self.sender, "name": self.sender_name},
            "to": [to],
            "subject": subject,
            "text": body,
        }
        if reply_to:
            payload["reply_to"] = {"email": reply_to}
        return payload

    def send(self, recipient: str, subject: str, body: str, reply_to: Optional[str] = None) -> None:
        """Post one message to MailerSend.

        Raises:
            MailError: On network failure or a non-2xx response; ``code``
                carries the HTTP status when there is one
        """
        try:
            response = self._session.post(
                self.url,
                json=self.build_payload(recipient, subject, body, reply_to),
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise MailError(f"MailerSend request failed: {exc}") from exc

        if not response.ok:
            raise MailError(_error_text(response), code=response.status_code)


def _error_text(response: requests.Response) -> str:
    try:
        message = response.json().get("message")
    except ValueError:
        message = None
    return message or f"MailerSend responded with HTTP {response.status_code}"


class LoggingTransport:
    """Keeps messages in memory and logs them instead of sending."""

    def __init__(self):
        self.sent: List[MailMessage] = []

    def send(self, recipient: str, subject: str, body: str, reply_to: Optional[str] = None) -> None:
        message = MailMessage(recipient=recipient, subject=subject, body=body, reply_to=reply_to)
        self.sent.append(message)
        logger.info("Not sending mail outside production: to=%s subject=%r", recipient, subject)


def transport_from_settings(settings: FormSettings) -> MailTransport:
    """Pick a transport: MailerSend in production, logging elsewhere.

    Raises:
        ValueError: In production without an API key or sender address
    """
    if not settings.is_production:
        return LoggingTransport()
    if not settings.mailersend_api_key or not settings.mail_from:
        raise ValueError("MAILERSEND_API_KEY and MAIL_FROM are required in production")
    return MailerSendTransport(
        api_key=settings.mailersend_api_key,
        sender=settings.mail_from,
        sender_name=settings.app_name,
        recipient_name=settings.mail_to_name,
    )


def compose(form: Form, settings: FormSettings) -> MailMessage:
    """Build the outbound message from a form's current values.

    Raises:
        MailError: If no recipient is configured
    """
    if not settings.mail_to:
        raise MailError("No mail recipient is configured")

    values = form.values()
    name = values.get("name")
    subject = f"Contact {settings.app_name} from {name}" if name else f"Contact {settings.app_name}"

    lines = []
    reply_to = None
    for item in form.fields:
        if item.is_hidden or item.is_button or not item.name:
            continue
        lines.append(f"{item.display_label}: {item.value or ''}")
        if reply_to is None and item.kind == FieldKind.EMAIL and item.value:
            reply_to = item.value

    return MailMessage(recipient=settings.mail_to, subject=subject, body="\n".join(lines), reply_to=reply_to)


def failure_message(error: MailError, settings: FormSettings) -> str:
    """User-facing text for a mail failure: the raw error only in debug mode.

    Examples:
        >>> failure_message(MailError("quota exceeded", code=429), FormSettings(debug=True))
        'quota exceeded'
        >>> failure_message(MailError("quota exceeded", code=429), FormSettings())
        '429: Sorry, mailer failed to send your message.'
    """
    if settings.debug:
        return str(error)
    if error.code is not None:
        return f"{error.code}: {MAILER_FAILED_MESSAGE}"
    return MAILER_FAILED_MESSAGE


def deliver(form: Form, transport: MailTransport, settings: FormSettings) -> Form:
    """Send a validated form and record the outcome on it.

    Forms that are not valid are returned untouched.
    """
    if not form.is_valid():
        logger.debug("Skipping delivery of a %s form", form.status.value)
        return form

    try:
        message = compose(form, settings)
        transport.send(message.recipient, message.subject, message.body, message.reply_to)
    except MailError as exc:
        logger.warning("Mail delivery failed (code=%s): %s", exc.code, exc)
        return form.delivery_failed(failure_message(exc, settings))

    logger.info("Form submission delivered to %s", message.recipient)
    return form.delivery_succeeded()


__all__ = [
    "MailTransport",
    "MailMessage",
    "MailerSendTransport",
    "LoggingTransport",
    "transport_from_settings",
    "compose",
    "failure_message",
    "deliver",
]
