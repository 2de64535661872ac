"""Form aggregate for FluentForms.

The Form owns an ordered collection of Fields and a FormStateMachine, and
exposes the lifecycle used by the mail and HTTP adapters:

1. declare fields (``declare`` or the builder shortcuts)
2. ``merge`` the submitted payload
3. ``validate`` (honeypot, then field rules, then evaluation)
4. report the delivery outcome (``delivery_succeeded`` / ``delivery_failed``)
5. read ``errors``, ``error_message()`` and the field states to render

Usage:
    >>> from datetime import datetime, timezone
    >>> from fluentforms.clock import FixedClock
    >>> clock = FixedClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
    >>> form = Form(clock=clock)
    >>> _ = form.contact_name(required=True)
    >>> rendered = form.field("request").value
    >>> clock.advance(5)
    >>> form.merge({"my_name": "", "request": rendered, "name": "Ann"}).validate().status
    <FormStatus.VALID: 'valid'>
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from fluentforms.clock import SystemClock
from fluentforms.errors import DuplicateFieldError
from fluentforms.field import Field
from fluentforms.honeypot import (
    DEFAULT_MIN_DELAY,
    HONEYPOT_KEYS,
    HONEYPOT_NAME,
    HONEYPOT_TIMESTAMP,
    SPAM_MESSAGE,
    HoneypotGuard,
    format_timestamp,
)
from fluentforms.state_machine import FormStateMachine
from fluentforms.types import FieldKind, FormStatus, HttpMethod, SpamReason
from fluentforms.validation import ValidationEngine, ValidationResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thank you for your message"
MAILER_FAILED_MESSAGE = "Sorry, mailer failed to send your message."


class Form:
    """A contact form and the lifecycle of one submission.

    Attributes:
        method: HTTP method the form submits with
        action: Target URL, None to submit to the current URL
        honeypot: Whether the honeypot pair is declared and checked
        spam_reason: Why the last validation was refused as spam, if it was
        last_result: ValidationResult of the last validation run
    """

    def __init__(
        self,
        method: HttpMethod = HttpMethod.POST,
        action: Optional[str] = None,
        honeypot: bool = True,
        clock=None,
        min_delay: timedelta = DEFAULT_MIN_DELAY,
        engine: Optional[ValidationEngine] = None,
    ):
        self.method = HttpMethod(method.lower()) if isinstance(method, str) else method
        self.action = action
        self.honeypot = honeypot
        self.clock = clock or SystemClock()
        self.engine = engine or ValidationEngine(HoneypotGuard(clock=self.clock, min_delay=min_delay))
        self.spam_reason: Optional[SpamReason] = None
        self.last_result: Optional[ValidationResult] = None

        self._fields: List[Field] = []
        self._state = FormStateMachine()
        self._form_errors: Dict[str, str] = {}
        self._submission: Optional[Dict[str, Any]] = None

        if self.honeypot:
            self.hidden(name=HONEYPOT_NAME)
            self.hidden(name=HONEYPOT_TIMESTAMP, value=format_timestamp(self.clock.now()))

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "Form":
        """Build a form whose honeypot delay comes from FormSettings."""
        kwargs.setdefault("min_delay", timedelta(seconds=settings.submit_delay))
        return cls(**kwargs)

    # Declaration

    def declare(self, prepared: Optional[Field] = None, **attrs) -> Field:
        """Append a field and return it.

        Args:
            prepared: A ready Field, or None to build one from attrs
            **attrs: Field attributes (name, kind, label, required, ...)

        Raises:
            MissingNameError: If the field cannot resolve a required name
            DuplicateFieldError: If another field already has this name
        """
        new_field = prepared if prepared is not None else Field(**attrs)
        if new_field.name is not None and any(f.name == new_field.name for f in self._fields):
            raise DuplicateFieldError(new_field.name)
        self._fields.append(new_field)
        return new_field

    def text(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.TEXT, **attrs)

    def email(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.EMAIL, **attrs)

    def password(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.PASSWORD, **attrs)

    def textarea(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.TEXTAREA, **attrs)

    def hidden(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.HIDDEN, **attrs)

    def button(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.BUTTON, **attrs)

    def submit(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.SUBMIT, **attrs)

    def reset(self, **attrs) -> Field:
        return self.declare(kind=FieldKind.RESET, **attrs)

    # Opinionated contact fields

    def contact_name(self, **attrs) -> Field:
        attrs.setdefault("label", "Name")
        attrs.setdefault("autocomplete", "name")
        return self.text(**attrs)

    def contact_email(self, **attrs) -> Field:
        attrs.setdefault("label", "Email")
        attrs.setdefault("autocomplete", "email")
        return self.email(**attrs)

    def contact_message(self, **attrs) -> Field:
        attrs.setdefault("label", "Message")
        return self.textarea(**attrs)

    # Field access

    @property
    def fields(self) -> List[Field]:
        """Fields in render order."""
        return list(self._fields)

    def field(self, name: str) -> Field:
        """Look up a field by name.

        Raises:
            KeyError: If no field has this name
        """
        for item in self._fields:
            if item.name == name:
                return item
        raise KeyError(name)

    def values(self) -> Dict[str, Optional[str]]:
        """Current values of the visible, named input fields."""
        return {
            item.name: item.value
            for item in self._fields
            if item.name and not item.is_hidden and not item.is_button
        }

    @property
    def submission(self) -> Optional[Dict[str, Any]]:
        """Honeypot values extracted by the last merge, None if nothing was merged."""
        return None if self._submission is None else dict(self._submission)

    # Submission

    def merge(self, payload: Optional[Mapping[str, Any]]) -> "Form":
        """Copy submitted values onto declared fields.

        Only keys matching a declared field with a non-None value are used;
        everything else in the payload is ignored. Nothing is merged once the
        form is terminal.
        """
        if self.is_terminal():
            logger.debug("Ignoring merge into a %s form", self.status.value)
            return self
        if payload is None:
            return self

        self._submission = {key: payload[key] for key in HONEYPOT_KEYS if key in payload}
        for item in self._fields:
            if item.name is None:
                continue
            value = payload.get(item.name)
            if value is not None:
                item.set_value(value)
        return self

    def validate(self) -> "Form":
        """Run the validation engine, then evaluate validity."""
        self.last_result = self.engine.validate(self)
        self.evaluate()
        return self

    def evaluate(self) -> FormStatus:
        return self._state.evaluate(self.has_errors())

    def clear_validation(self) -> None:
        """Forget the outcome of a previous validation run."""
        for item in self._fields:
            item.clear_error()
        if self.spam_reason is not None:
            self._form_errors.pop("form", None)
            self.spam_reason = None

    def record_spam(self, reason: SpamReason) -> None:
        self.spam_reason = reason
        self._form_errors["form"] = SPAM_MESSAGE

    # Errors

    def add_error(self, key: str, message: str) -> "Form":
        self._form_errors[key] = message
        return self

    @property
    def errors(self) -> Dict[str, str]:
        """Error messages rebuilt from the current state on every read.

        Order: the rejected-mailer placeholder, field errors by name, then
        explicitly added errors, which override earlier entries.
        """
        errors: Dict[str, str] = {}
        if self.status == FormStatus.REJECTED:
            errors["mailer"] = MAILER_FAILED_MESSAGE
        for item in self._fields:
            if item.has_error():
                errors[item.name] = item.error
        errors.update(self._form_errors)
        return errors

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_error(self, key: str) -> bool:
        return key in self.errors

    def error_message(self) -> str:
        """The single general message: mailer failure, else form error, else empty."""
        errors = self.errors
        if self.status == FormStatus.REJECTED and "mailer" in errors:
            return errors["mailer"]
        if "form" in errors:
            return errors["form"]
        return ""

    def success_message(self) -> Optional[str]:
        return SUCCESS_MESSAGE if self.status == FormStatus.SENT else None

    # Lifecycle

    @property
    def status(self) -> FormStatus:
        return self._state.state

    def is_valid(self) -> bool:
        return self._state.is_valid()

    def is_terminal(self) -> bool:
        """True once sent or rejected; terminal forms render fully disabled."""
        return self._state.is_terminal()

    def delivery_succeeded(self) -> "Form":
        """Record that the mail transport delivered the message."""
        self._state.delivery_succeeded()
        self._discard_fields()
        return self

    def delivery_failed(self, message: Optional[str] = None) -> "Form":
        """Record that the mail transport failed."""
        self._state.delivery_failed()
        self.add_error("mailer", message or MAILER_FAILED_MESSAGE)
        self._lock()
        return self

    def success(self) -> "Form":
        """Apply the external success signal (e.g. after a redirect)."""
        self._state.signal(FormStatus.SENT)
        self._discard_fields()
        return self

    def reject(self) -> "Form":
        """Apply the external rejected signal (e.g. after a redirect)."""
        self._state.signal(FormStatus.REJECTED)
        self._lock()
        return self

    def _discard_fields(self) -> None:
        self._fields = []

    def _lock(self) -> None:
        self._fields = [item for item in self._fields if not item.is_submit]
        for item in self._fields:
            item.disable()

    def __repr__(self) -> str:
        return f"Form(method={self.method.value!r}, action={self.action!r}, status={self.status.value!r}, fields={len(self._fields)})"


__all__ = [
    "Form",
    "SUCCESS_MESSAGE",
    "MAILER_FAILED_MESSAGE",
]
