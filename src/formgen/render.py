from __future__ import annotations

from typing import Any, Mapping

import markupsafe
from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from formgen.schema import AnswerType, FieldSchema, FormSchema


def control_kind(field: FieldSchema) -> str:
    """Element to emit for a field: ``textarea``, ``select`` or an input type.

    A ``select`` without configured options has nothing to choose from and
    falls back to a free text input.
    """
    kind = field.answer_type.input_kind
    if kind == "select" and not field.options:
        return "text"
    return kind


def trusted_html(fragment: str | None) -> markupsafe.Markup:
    """Operator supplied fragments are emitted verbatim, never escaped."""
    return markupsafe.Markup(fragment or "")


def _build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("formgen", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["control_kind"] = control_kind
    env.filters["trusted_html"] = trusted_html
    return env


ENV = _build_environment()


def _refill_value(field: FieldSchema, values: Mapping[str, str] | None) -> str:
    if field.answer_type is AnswerType.PASSWORD:
        return ""
    if values is not None and field.name in values:
        return values[field.name]
    return field.default or ""


def render_form(
    schema: FormSchema,
    errors: Mapping[str, str] | None = None,
    values: Mapping[str, str] | None = None,
    action: str = "",
) -> str:
    """Render the HTML document for ``schema``.

    ``errors`` and ``values`` come from a rejected submission and are shown
    next to the fields they belong to.
    """
    errors = errors or {}
    rows: list[dict[str, Any]] = [
        {
            "field": field,
            "value": _refill_value(field, values),
            "error": errors.get(field.name, ""),
        }
        for field in schema.fields
    ]
    template = ENV.get_template("form.html")
    return template.render(form=schema, rows=rows, has_errors=bool(errors), action=action)


def render_submitted(schema: FormSchema, back_url: str = "") -> str:
    return ENV.get_template("submitted.html").render(form=schema, back_url=back_url)


def render_error(schema: FormSchema, message: str, back_url: str = "") -> str:
    return ENV.get_template("error.html").render(form=schema, message=message, back_url=back_url)
