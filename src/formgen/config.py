from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

from formgen.errors import ConfigurationError, FieldError
from formgen.schema import FormSchema, parse_fields
from formgen.validation import DEFAULT_MAX_LENGTH, check_type

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "answers.json"

_FIELD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name", "title", "answer_type"],
    "properties": {
        "name": {"type": "string"},
        "title": {"type": "string"},
        "description": {"type": "string"},
        "answer_type": {"type": "string"},
        "html_before": {"type": "string"},
        "html_after": {"type": "string"},
        "options": {"type": "array", "items": {"type": "string"}},
        "default": {"type": "string"},
        "required": {"type": "boolean"},
        "placeholder": {"type": "string"},
    },
    "additionalProperties": False,
}

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["form_title", "submit_button", "fields"],
    "properties": {
        "form_title": {"type": "string"},
        "form_description": {"type": "string"},
        "submit_button": {"type": "string"},
        "json_output": {"type": "string", "minLength": 1},
        "lang": {"type": "string", "minLength": 1},
        "fields": {"type": "array", "items": _FIELD_SCHEMA, "minItems": 1},
    },
    "additionalProperties": False,
}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.config_path = Path(os.getenv("FORMGEN_CONFIG", "config.toml"))
        output = os.getenv("FORMGEN_OUTPUT")
        self.output_path = Path(output) if output else None
        self.host = os.getenv("HOST", "127.0.0.1")
        self.port = _env_int("SERVER_PORT", 8081)
        self.form_route = os.getenv("FORM_ROUTE", "/")
        self.submit_route = os.getenv("SUBMIT_ROUTE", "/submit")
        self.max_value_length = _env_int("MAX_VALUE_LENGTH", DEFAULT_MAX_LENGTH)
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_level = log_level if log_level in logging.getLevelNamesMapping() else "INFO"


def _shape_errors(document: dict[str, Any]) -> list[str]:
    validator = Draft7Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(document), key=lambda err: [str(part) for part in err.path])
    messages: list[str] = []
    for error in errors:
        location = ".".join(str(part) for part in error.path) or "<root>"
        messages.append(f"{location}: {error.message}")
    return messages


def parse_config(
    document: dict[str, Any],
    output_override: Path | str | None = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> FormSchema:
    """Turn an already parsed config document into a :class:`FormSchema`."""
    messages = _shape_errors(document)
    if messages:
        raise ConfigurationError(messages)

    fields, messages = parse_fields(document["fields"])
    for field in fields:
        if not field.default:
            continue
        try:
            check_type(field, field.default, max_length)
        except FieldError as exc:
            messages.append(f"field '{field.name}': default {field.default!r} is invalid: {exc.message}")
    if messages:
        raise ConfigurationError(messages)

    if output_override is not None:
        output_path = Path(output_override)
    else:
        output_path = Path(document.get("json_output") or DEFAULT_OUTPUT)

    return FormSchema(
        title=document["form_title"],
        description=document.get("form_description", ""),
        submit_button_text=document["submit_button"],
        fields=tuple(fields),
        output_path=output_path,
        lang=document.get("lang", "en"),
    )


def load_config(
    path: Path | str,
    output_override: Path | str | None = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> FormSchema:
    path = Path(path)
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"{path} is not valid TOML: {exc}") from exc

    schema = parse_config(document, output_override, max_length)
    logger.info(
        "Loaded config '%s', writing answers to '%s' with %d fields",
        path,
        schema.output_path,
        len(schema.fields),
    )
    return schema
