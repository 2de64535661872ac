"""Framework-agnostic HTTP adapter for FluentForms.

Turns a form's state into a response description that any web framework can
emit. Asynchronous submissions (the client-side helper posts an ``ajax``
key) get JSON; regular submissions get a redirect after delivery, or the
re-rendered form when something needs correcting.

After a redirect, the ``?success`` or ``?rejected`` query flag is turned
back into the matching state signal on the freshly built form.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from fluentforms.config import FormSettings
from fluentforms.form import Form
from fluentforms.mailer import MailTransport, deliver
from fluentforms.rendering import render_form
from fluentforms.types import FormStatus

logger = logging.getLogger(__name__)

ASYNC_KEY = "ajax"
JSON_CONTENT_TYPE = "application/json"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass(frozen=True)
class FormResponse:
    """Description of the response to send back.

    Attributes:
        status: HTTP status code
        headers: Response headers
        body: Response body (empty for redirects)
    """
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400

    def json(self) -> Any:
        """Decode a JSON body."""
        return json.loads(self.body)


def is_async_submission(payload: Optional[Mapping[str, Any]]) -> bool:
    return payload is not None and ASYNC_KEY in payload


def apply_status_signals(form: Form, query: Optional[Mapping[str, Any]]) -> Form:
    """Re-enter sent or rejected from a redirect's query flags.

    Examples:
        >>> form = apply_status_signals(Form(honeypot=False), {"success": ""})
        >>> form.status.value
        'sent'
    """
    if not query:
        return form
    if "success" in query:
        form.success()
    elif "rejected" in query:
        form.reject()
    return form


def _json_response(status: int, data: Dict[str, Any]) -> FormResponse:
    return FormResponse(status=status, headers={"Content-Type": JSON_CONTENT_TYPE}, body=json.dumps(data))


def _html_response(status: int, form: Form) -> FormResponse:
    return FormResponse(status=status, headers={"Content-Type": HTML_CONTENT_TYPE}, body=render_form(form))


def _redirect(location: str, flag: str) -> FormResponse:
    separator = "&" if "?" in location else "?"
    return FormResponse(status=303, headers={"Location": f"{location}{separator}{flag}"})


def respond(form: Form, asynchronous: bool, location: str) -> FormResponse:
    """Build the response for a processed submission.

    Args:
        form: The form after validation and delivery
        asynchronous: Whether the request declared itself asynchronous
        location: URL of the page the form lives on, used for redirects
    """
    if asynchronous:
        if form.status == FormStatus.SENT:
            return _json_response(200, {"successful": form.success_message()})
        return _json_response(400, form.errors)

    if form.status == FormStatus.SENT:
        return _redirect(location, "success")
    if form.status == FormStatus.REJECTED:
        return _redirect(location, "rejected")
    if form.has_errors():
        return _html_response(400, form)
    return _html_response(200, form)


def handle_submission(
    form: Form,
    payload: Optional[Mapping[str, Any]],
    transport: MailTransport,
    settings: FormSettings,
    location: str,
) -> FormResponse:
    """Merge, validate, deliver and respond to one submission."""
    asynchronous = is_async_submission(payload)
    form.merge(payload).validate()
    deliver(form, transport, settings)
    logger.debug("Submission handled: status=%s async=%s", form.status.value, asynchronous)
    return respond(form, asynchronous, location)


__all__ = [
    "FormResponse",
    "is_async_submission",
    "apply_status_signals",
    "respond",
    "handle_submission",
]
