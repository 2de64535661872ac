"""Core type definitions for FluentForms.

This module defines the enumerations shared across the package:
- FieldKind: The closed set of input kinds a Field can take
- FormStatus: Lifecycle states of a single form submission
- SpamReason: Internal reasons a submission was classified as spam
- HttpMethod: Methods a rendered form may submit with

All enums are string valued so they serialize directly into HTML attributes
and JSON responses.
"""

from enum import Enum


class FieldKind(str, Enum):
    """Kinds of form input.

    Button kinds (button, submit, reset) may be declared without a name.
    Hidden fields are never validated.
    """
    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    HIDDEN = "hidden"
    BUTTON = "button"
    SUBMIT = "submit"
    RESET = "reset"
    TEXTAREA = "textarea"

    @property
    def is_button(self) -> bool:
        return self in BUTTON_KINDS

    @property
    def is_text_input(self) -> bool:
        """Single-line inputs that accept typed text."""
        return self in (FieldKind.TEXT, FieldKind.EMAIL, FieldKind.PASSWORD)


BUTTON_KINDS = frozenset({FieldKind.BUTTON, FieldKind.SUBMIT, FieldKind.RESET})


class FormStatus(str, Enum):
    """Submission lifecycle states.

    Terminal states: sent, rejected. A form in a terminal state renders with
    every field disabled.
    """
    INVALID = "invalid"
    VALID = "valid"
    SENT = "sent"
    REJECTED = "rejected"


class SpamReason(str, Enum):
    """Why the honeypot guard refused a submission.

    These are internal only; the end user always sees one generic message.
    """
    MISSING_PAYLOAD = "missing_payload"
    TAMPERED_PAYLOAD = "tampered_payload"
    HONEYPOT_TRIGGERED = "honeypot_triggered"
    SUBMITTED_TOO_FAST = "submitted_too_fast"


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"


__all__ = [
    "FieldKind",
    "BUTTON_KINDS",
    "FormStatus",
    "SpamReason",
    "HttpMethod",
]
