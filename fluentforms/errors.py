"""Exception types for FluentForms.

Only contract violations are raised: declaring a field without a usable
name, declaring the same name twice, driving the state machine through an
illegal transition, and mail transport failures. Spam and field validation
failures are never raised; they are recorded on the Form as data.
"""

from typing import Optional


class FormError(Exception):
    """Base class for all FluentForms errors."""


class MissingNameError(FormError):
    """Raised when a field that requires a name cannot resolve one.

    Attributes:
        kind: The kind of the field being declared
    """

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or f"A '{kind}' field needs a name")


class DuplicateFieldError(FormError):
    """Raised when two fields of one form resolve to the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Field '{name}' is already declared on this form")


class MailError(FormError):
    """Raised by a mail transport when a message could not be delivered.

    Attributes:
        code: Optional provider status code (e.g. the HTTP status)

    Examples:
        >>> err = MailError("quota exceeded", code=429)
        >>> str(err), err.code
        ('quota exceeded', 429)
    """

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


__all__ = [
    "FormError",
    "MissingNameError",
    "DuplicateFieldError",
    "MailError",
]
