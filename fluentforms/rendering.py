"""Minimal HTML rendering for FluentForms.

Each field kind has a dedicated render function; ``render_field`` dispatches
on the kind and wraps the control with its label and error slot.
``render_form`` renders a whole form from its current state. Every value is
HTML-escaped.

Error slots carry ``data-input-error="<name>"`` (and ``"form"`` for the
general message) so a client-side helper can fill them from a JSON error
response.
"""

from html import escape
from typing import Callable, Dict, Iterable, Tuple, Union

from fluentforms.field import Field
from fluentforms.form import Form
from fluentforms.types import FieldKind

AttributeValue = Union[str, int, bool, None]


def render_attributes(pairs: Iterable[Tuple[str, AttributeValue]]) -> str:
    """Render attribute pairs, dropping None and False, bare for True.

    Examples:
        >>> render_attributes([("type", "text"), ("required", True), ("value", None)])
        'type="text" required'
    """
    parts = []
    for key, value in pairs:
        if value is None or value is False:
            continue
        if value is True:
            parts.append(key)
        else:
            parts.append(f'{key}="{escape(str(value))}"')
    return " ".join(parts)


def render_input(field: Field) -> str:
    attributes = render_attributes([
        ("type", field.kind.value),
        ("name", field.name),
        ("id", field.id or None),
        ("value", field.value),
        ("placeholder", field.placeholder or None),
        ("autocomplete", field.autocomplete),
        ("required", field.required),
        ("minlength", field.min_length),
        ("maxlength", field.max_length),
        ("disabled", field.disabled),
    ])
    return f"<input {attributes} />"


def render_textarea(field: Field) -> str:
    attributes = render_attributes([
        ("rows", field.rows),
        ("name", field.name),
        ("id", field.id or None),
        ("placeholder", field.placeholder or None),
        ("required", field.required),
        ("minlength", field.min_length),
        ("maxlength", field.max_length),
        ("disabled", field.disabled),
    ])
    return f"<textarea {attributes}>{escape(field.value or '')}</textarea>"


def render_button(field: Field) -> str:
    attributes = render_attributes([
        ("type", field.kind.value),
        ("name", field.name),
        ("id", field.id or None),
        ("value", field.value),
        ("disabled", field.disabled),
    ])
    return f"<button {attributes}>{escape(field.label or '')}</button>"


RENDERERS: Dict[FieldKind, Callable[[Field], str]] = {
    FieldKind.TEXT: render_input,
    FieldKind.EMAIL: render_input,
    FieldKind.PASSWORD: render_input,
    FieldKind.HIDDEN: render_input,
    FieldKind.TEXTAREA: render_textarea,
    FieldKind.BUTTON: render_button,
    FieldKind.SUBMIT: render_button,
    FieldKind.RESET: render_button,
}


def render_label(field: Field) -> str:
    if field.label is None or field.is_button or field.is_hidden:
        return ""
    text = field.label[:1].upper() + field.label[1:]
    marker = '<sup class="required">*</sup>' if field.required else ""
    return f'<label for="{escape(field.id)}">{escape(text)}{marker}</label>'


def render_error(field: Field) -> str:
    if field.is_button or field.name is None:
        return ""
    return f'<span data-input-error="{escape(field.name)}">{escape(field.error or "")}</span>'


def render_field(field: Field) -> str:
    """Render label, control and error slot for one field."""
    control = RENDERERS[field.kind](field)
    return render_label(field) + control + render_error(field)


def render_form(form: Form) -> str:
    """Render a form in its current state.

    Terminal forms render their remaining fields disabled and without a
    submit button; a sent form renders only the success block.
    """
    start = render_attributes([
        ("method", form.method.value),
        ("action", form.action),
        ("data-form", True),
    ])
    output = [f"<form {start}>"]
    output.extend(render_field(item) for item in form.fields)
    output.append(f'<div data-input-error="form" class="text-warning">{escape(form.error_message())}</div>')

    message = form.success_message()
    if message:
        output.append(f'<div data-form-success class="text-success">{escape(message)}</div>')

    output.append("</form>")
    return "".join(output)


__all__ = [
    "render_attributes",
    "render_input",
    "render_textarea",
    "render_button",
    "render_label",
    "render_error",
    "render_field",
    "render_form",
    "RENDERERS",
]
