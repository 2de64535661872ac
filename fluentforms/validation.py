"""Validation engine for FluentForms.

This module runs the honeypot guard and then the per-field rules of a form,
recording outcomes on the form itself. Spam short-circuits: a submission the
guard refuses never has its fields validated.

Per-field rules are evaluated in a fixed order and at most one error is kept
per field:

1. required and empty -> "<Label> is required."
2. email kind and malformed -> "<Label> must be a valid email."
3. longer than max_length -> "<Label> must not exceed N characters"
4. shorter than min_length -> "<Label> must not be less than N characters"

Rules 2-4 are expressed as a small JSON Schema per field and checked with
jsonschema's Draft 7 validator, then translated into the messages above.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import jsonschema
from email_validator import EmailNotValidError, validate_email
from jsonschema import Draft7Validator, FormatChecker

from fluentforms.field import Field
from fluentforms.honeypot import HoneypotGuard
from fluentforms.types import FieldKind, SpamReason

logger = logging.getLogger(__name__)

FORMAT_CHECKER = FormatChecker(formats=())


@FORMAT_CHECKER.checks("email")
def is_email(instance: Any) -> bool:
    """Return True when instance is a syntactically valid email address.

    Deliverability is not checked, so no DNS lookup happens.

    Examples:
        >>> is_email("ann@example.com")
        True
        >>> is_email("bad")
        False
    """
    if not isinstance(instance, str):
        return True
    try:
        validate_email(instance, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


# jsonschema keywords in the order they are reported
RULE_ORDER = ("format", "maxLength", "minLength")


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a form.

    Attributes:
        is_valid: Whether the spam check and every field passed
        errors: Error messages keyed by field name (or "form" for spam)
        spam_reason: Why the honeypot refused the submission, if it did
    """
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)
    spam_reason: Optional[SpamReason] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "errors": dict(self.errors),
        }
        if self.spam_reason is not None:
            result["spamReason"] = self.spam_reason.value
        return result


def field_schema(field: Field) -> Dict[str, Any]:
    """Build the JSON Schema describing a field's value constraints.

    Examples:
        >>> field_schema(Field(name="email", kind="email", max_length=80))
        {'type': 'string', 'format': 'email', 'maxLength': 80}
    """
    schema: Dict[str, Any] = {"type": "string"}
    if field.kind == FieldKind.EMAIL:
        schema["format"] = "email"
    if field.max_length is not None:
        schema["maxLength"] = field.max_length
    if field.min_length is not None:
        schema["minLength"] = field.min_length
    return schema


class FieldValidator:
    """Applies the rule set of a single field.

    Examples:
        >>> validator = FieldValidator()
        >>> validator.check(Field(name="email", kind="email", value="bad"))
        'Email must be a valid email.'
        >>> validator.check(Field(name="nick", value="x", min_length=2))
        'Nick must not be less than 2 characters'
    """

    def check(self, field: Field) -> Optional[str]:
        """Return the first failing rule's message, or None when the field passes.

        Hidden fields and buttons always pass. A missing value is checked
        as the empty string, so an empty optional email or a ``min_length``
        constraint still fails.
        """
        if field.is_hidden or field.is_button:
            return None

        label = field.display_label
        value = "" if field.value is None else field.value

        if field.required and value == "":
            return f"{label} is required."

        validator = Draft7Validator(field_schema(field), format_checker=FORMAT_CHECKER)
        errors = list(validator.iter_errors(value))
        if not errors:
            return None

        errors.sort(key=self._rank)
        return self._translate_error(errors[0], label)

    @staticmethod
    def _rank(error: jsonschema.ValidationError) -> int:
        if error.validator in RULE_ORDER:
            return RULE_ORDER.index(error.validator)
        return len(RULE_ORDER)

    def _translate_error(self, error: jsonschema.ValidationError, label: str) -> str:
        """Translate a jsonschema error into the message shown next to the field."""
        if error.validator == "format":
            return f"{label} must be a valid email."

        if error.validator == "maxLength":
            return f"{label} must not exceed {error.validator_value} characters"

        if error.validator == "minLength":
            return f"{label} must not be less than {error.validator_value} characters"

        # Generic fallback for other validation errors
        return f"{label} is invalid."


class ValidationEngine:
    """Runs the honeypot guard and the field rules of a form.

    Validation never raises: outcomes are written onto the form's fields and
    form-level errors, and also returned as a ValidationResult.

    Attributes:
        guard: Honeypot guard used when the form carries a honeypot
        field_validator: Per-field rule runner
    """

    def __init__(self, guard: Optional[HoneypotGuard] = None, field_validator: Optional[FieldValidator] = None):
        self.guard = guard or HoneypotGuard()
        self.field_validator = field_validator or FieldValidator()

    def validate(self, form) -> ValidationResult:
        """Validate a form in place.

        Args:
            form: The Form whose submission should be checked

        Returns:
            ValidationResult mirroring what was recorded on the form
        """
        form.clear_validation()

        if form.honeypot:
            outcome = self.guard.check(form.submission)
            if not outcome.is_valid:
                form.record_spam(outcome.reason)
                return ValidationResult(
                    is_valid=False,
                    errors={"form": form.errors["form"]},
                    spam_reason=outcome.reason,
                )

        errors: Dict[str, str] = {}
        for item in form.fields:
            message = self.field_validator.check(item)
            if message is not None:
                item.set_error(message)
                errors[item.name] = message

        if errors:
            logger.debug("Field validation failed: %s", sorted(errors))
        return ValidationResult(is_valid=not errors, errors=errors)


__all__ = [
    "ValidationEngine",
    "ValidationResult",
    "FieldValidator",
    "field_schema",
    "is_email",
]
