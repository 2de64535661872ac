"""Field definition for FluentForms.

A Field is one declared form input: its shape (kind, name, label), its
validation constraints, and its mutable state (value, error, disabled).

Name and label resolution happens once, at construction:
- ``name`` falls back to ``label`` and then ``id`` when absent, and is
  normalized to lower case with spaces replaced by underscores.
- ``label=None`` suppresses the label entirely; ``label=""`` derives a
  default label from the name (or, for buttons, from the value or kind).
- Every kind except the button kinds must resolve a non-empty name.
"""

from dataclasses import dataclass
from typing import Optional, Union

from fluentforms.errors import MissingNameError
from fluentforms.types import FieldKind


def normalize_name(raw: str) -> str:
    """Lower-case a name and replace spaces with underscores.

    Examples:
        >>> normalize_name("Your Name")
        'your_name'
    """
    return raw.lower().replace(" ", "_")


@dataclass
class Field:
    """A single form input.

    Attributes:
        name: Normalized input name, None only for unnamed buttons
        kind: Input kind
        label: Display label, None when suppressed
        id: HTML id, defaults to the normalized name
        value: Current value, None until set
        placeholder: Placeholder text
        autocomplete: Autocomplete hint
        required: Whether an empty value is an error
        min_length: Minimum value length
        max_length: Maximum value length
        rows: Visible rows, textarea only
        disabled: Set permanently once the owning form is terminal
        error: Validation error message from the last validation run

    Examples:
        >>> field = Field(name="Full Name", kind="text", required=True)
        >>> field.name, field.label
        ('full_name', 'Full Name')
        >>> Field(kind="submit").name is None
        True
    """

    name: Optional[str] = None
    kind: FieldKind = FieldKind.TEXT
    label: Optional[str] = ""
    id: str = ""
    value: Optional[str] = None
    placeholder: Optional[str] = ""
    autocomplete: Optional[str] = None
    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    rows: int = 4
    disabled: bool = False
    error: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.kind, FieldKind):
            self.kind = FieldKind(str(self.kind).lower())

        if self.kind.is_button and not self.name:
            name = None
        else:
            name = self.name or self.label or self.id or None

        if self.label is None:
            if self.kind.is_text_input and self.placeholder == "":
                self.placeholder = name
        elif self.label == "":
            if self.kind.is_button:
                self.label = self.value or self.kind.value
            else:
                self.label = name or "label"

        if not self.kind.is_button and not name:
            raise MissingNameError(self.kind.value)

        self.name = normalize_name(name) if name else None
        self.id = normalize_name(self.id) if self.id else (self.name or "")

    @property
    def display_label(self) -> str:
        """Label used in error messages: label, else name, first letter upper-cased."""
        text = self.label or self.name or self.id
        return text[:1].upper() + text[1:]

    @property
    def is_hidden(self) -> bool:
        return self.kind == FieldKind.HIDDEN

    @property
    def is_submit(self) -> bool:
        return self.kind == FieldKind.SUBMIT

    @property
    def is_button(self) -> bool:
        return self.kind.is_button

    def set_value(self, value: Union[str, int, float]) -> None:
        self.value = value if isinstance(value, str) else str(value)

    def has_error(self) -> bool:
        return self.error is not None

    def set_error(self, message: str) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = None

    def disable(self) -> None:
        self.disabled = True


__all__ = [
    "Field",
    "normalize_name",
]
