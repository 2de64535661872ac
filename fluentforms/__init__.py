"""FluentForms: contact forms with server-side validation and spam guarding.

FluentForms provides:
- Declarative form fields with per-field validation rules
- A honeypot spam guard (decoy field plus minimum submit delay)
- A submission state machine (invalid, valid, sent, rejected)
- Pluggable mail delivery and a framework-agnostic HTTP adapter

Basic usage:
    >>> from fluentforms import Form
    >>> form = Form(honeypot=False)
    >>> _ = form.contact_email(required=True)
    >>> form.merge({"email": "ann@example.com"}).validate().status.value
    'valid'
"""

__version__ = "0.1.0"
__author__ = "FluentForms Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from fluentforms.config import FormSettings
from fluentforms.errors import DuplicateFieldError, FormError, MailError, MissingNameError
from fluentforms.field import Field
from fluentforms.form import Form
from fluentforms.types import FieldKind, FormStatus, HttpMethod, SpamReason

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Form",
    "Field",
    "FormSettings",
    "FieldKind",
    "FormStatus",
    "HttpMethod",
    "SpamReason",
    "FormError",
    "MissingNameError",
    "DuplicateFieldError",
    "MailError",
]
