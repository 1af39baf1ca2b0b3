from __future__ import annotations

import re
from datetime import date
from typing import Mapping, assert_never
from urllib.parse import urlsplit

from formgen.errors import FieldError
from formgen.schema import AnswerType, FieldSchema, FormSchema

DEFAULT_MAX_LENGTH = 10_000

NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
CONTROL_CHARS_MULTILINE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

REQUIRED_MESSAGE = "This field is required."


def is_number(value: str) -> bool:
    return bool(NUMBER_PATTERN.match(value))


def is_email(value: str) -> bool:
    if value.count("@") != 1 or any(ch.isspace() for ch in value):
        return False
    local, domain = value.split("@")
    return bool(local) and bool(domain)


def is_http_url(value: str) -> bool:
    try:
        parsed = urlsplit(value)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname)


def is_iso_date(value: str) -> bool:
    if len(value) != 10:
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _check_text(field: FieldSchema, value: str, multiline: bool) -> str:
    pattern = CONTROL_CHARS_MULTILINE if multiline else CONTROL_CHARS
    if pattern.search(value):
        raise FieldError(field.name, "Contains characters that are not allowed.")
    return value


def _check_choice(field: FieldSchema, value: str) -> str:
    if not field.options:
        return _check_text(field, value, multiline=False)
    if value not in field.options:
        raise FieldError(field.name, "Select one of the offered choices.")
    return value


def check_type(field: FieldSchema, value: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Apply the answer type rule to a non-empty value."""
    if len(value) > max_length:
        raise FieldError(field.name, f"Must be at most {max_length} characters.")
    answer_type = field.answer_type
    if answer_type is AnswerType.NUMBER:
        if not is_number(value):
            raise FieldError(field.name, "Enter a number.")
        return value
    if answer_type is AnswerType.EMAIL:
        if not is_email(value):
            raise FieldError(field.name, "Enter a valid email address.")
        return _check_text(field, value, multiline=False)
    if answer_type is AnswerType.URL:
        if not is_http_url(value):
            raise FieldError(field.name, "Enter a valid http or https URL.")
        return _check_text(field, value, multiline=False)
    if answer_type is AnswerType.DATE:
        if not is_iso_date(value):
            raise FieldError(field.name, "Enter a date as YYYY-MM-DD.")
        return value
    if answer_type is AnswerType.TEXTAREA:
        return _check_text(field, value, multiline=True)
    if answer_type in (AnswerType.TEXT, AnswerType.TEL, AnswerType.PASSWORD):
        return _check_text(field, value, multiline=False)
    if answer_type in (AnswerType.SELECT, AnswerType.CHECKBOX):
        return _check_choice(field, value)
    assert_never(answer_type)


def validate_value(
    field: FieldSchema, raw: str | None, max_length: int = DEFAULT_MAX_LENGTH
) -> str:
    """Return the normalized value for ``field`` or raise :class:`FieldError`.

    Surrounding whitespace is dropped for every type except ``password``.
    An empty value is an error for required fields; optional fields fall
    back to their default, or to the empty string.
    """
    value = raw or ""
    if field.answer_type is not AnswerType.PASSWORD:
        value = value.strip()
    if value == "":
        if field.is_required:
            raise FieldError(field.name, REQUIRED_MESSAGE)
        return field.default or ""
    return check_type(field, value, max_length)


def validate_submission(
    schema: FormSchema,
    values: Mapping[str, str],
    max_length: int = DEFAULT_MAX_LENGTH,
) -> tuple[dict[str, str], dict[str, str]]:
    """Validate every field of ``schema``; never stops at the first error."""
    normalized: dict[str, str] = {}
    errors: dict[str, str] = {}
    for field in schema.fields:
        try:
            normalized[field.name] = validate_value(field, values.get(field.name), max_length)
        except FieldError as exc:
            errors[field.name] = exc.message
    return normalized, errors
