from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_\-]*$")
TIMESTAMP_KEY = "timestamp"
RESERVED_NAMES = {TIMESTAMP_KEY}


class AnswerType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    PASSWORD = "password"
    URL = "url"
    TEL = "tel"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DATE = "date"

    @property
    def input_kind(self) -> str:
        """HTML control used for this type: an ``<input type=...>`` value,
        ``textarea`` or ``select``."""
        if self is AnswerType.TEXTAREA:
            return "textarea"
        if self is AnswerType.SELECT:
            return "select"
        return self.value

    @property
    def takes_options(self) -> bool:
        return self in {AnswerType.SELECT, AnswerType.CHECKBOX}


@dataclass(frozen=True)
class FieldSchema:
    name: str
    title: str
    answer_type: AnswerType
    description: str = ""
    html_before: str | None = None
    html_after: str | None = None
    options: tuple[str, ...] = ()
    default: str | None = None
    required: bool | None = None
    placeholder: str = ""

    @property
    def is_required(self) -> bool:
        if self.required is None:
            return self.default is None
        return self.required

    @property
    def checked_value(self) -> str:
        """Value a checked checkbox submits."""
        return self.options[0] if self.options else "on"


@dataclass(frozen=True)
class FormSchema:
    title: str
    submit_button_text: str
    fields: tuple[FieldSchema, ...]
    output_path: Path
    lang: str = "en"
    description: str = ""

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def parse_fields(raw_fields: list[dict[str, Any]]) -> tuple[list[FieldSchema], list[str]]:
    """Build field schemas from raw config tables.

    Every problem is collected instead of stopping at the first one, so an
    operator sees the whole list in one run.
    """
    errors: list[str] = []
    fields: list[FieldSchema] = []
    seen_names: set[str] = set()

    for index, raw in enumerate(raw_fields, start=1):
        name = str(raw.get("name", "")).strip()
        loc = f"fields[{index}]" + (f" ({name})" if name else "")

        if not name:
            errors.append(f"{loc}: name must not be empty")
        elif not NAME_PATTERN.match(name):
            errors.append(f"{loc}: name may only contain letters, digits, '_' and '-'")
        elif name in RESERVED_NAMES:
            errors.append(f"{loc}: name '{name}' is reserved")
        elif name in seen_names:
            errors.append(f"{loc}: duplicate field name '{name}'")
        seen_names.add(name)

        raw_type = str(raw.get("answer_type", "")).strip()
        try:
            answer_type = AnswerType(raw_type)
        except ValueError:
            errors.append(f"{loc}: unknown answer type '{raw_type}'")
            continue

        options = tuple(str(value) for value in (raw.get("options") or []))
        if options and not answer_type.takes_options:
            errors.append(f"{loc}: options are only allowed for select and checkbox")
        if answer_type is AnswerType.CHECKBOX and len(options) > 1:
            errors.append(f"{loc}: a checkbox takes at most one option, its checked value")
        if len(set(options)) != len(options):
            errors.append(f"{loc}: options contain duplicates")

        required = raw.get("required")
        fields.append(
            FieldSchema(
                name=name,
                title=str(raw.get("title", "")),
                description=str(raw.get("description", "")),
                answer_type=answer_type,
                html_before=_optional_str(raw.get("html_before")),
                html_after=_optional_str(raw.get("html_after")),
                options=options,
                default=_optional_str(raw.get("default")),
                required=bool(required) if required is not None else None,
                placeholder=str(raw.get("placeholder", "")),
            )
        )

    return fields, errors
