"""Shared fixtures for formgen tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from formgen.app import create_app
from formgen.config import Settings
from formgen.schema import AnswerType, FieldSchema, FormSchema
from formgen.store import ResponseStore

SAMPLE_CONFIG = """
form_title = "Team survey"
submit_button = "Send answers"
json_output = "answers.json"

[[fields]]
name = "name"
title = "Your name"
description = "First and last name"
answer_type = "text"
html_before = "<h2 class='section'>About you</h2>"

[[fields]]
name = "email"
title = "Email"
description = ""
answer_type = "email"

[[fields]]
name = "age"
title = "Age"
description = "In years"
answer_type = "number"

[[fields]]
name = "team"
title = "Team"
description = ""
answer_type = "select"
options = ["core", "web", "ops"]

[[fields]]
name = "comments"
title = "Comments"
description = ""
answer_type = "textarea"
default = ""
html_after = "<hr>"
"""


def make_schema(fields, output_path, **overrides):
    values = dict(
        title="Test form",
        submit_button_text="Submit",
        fields=tuple(fields),
        output_path=Path(output_path),
    )
    values.update(overrides)
    return FormSchema(**values)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def email_schema(tmp_path):
    return make_schema(
        [FieldSchema(name="email", title="Email", answer_type=AnswerType.EMAIL)],
        tmp_path / "answers.json",
    )


@pytest.fixture
def store(email_schema):
    store = ResponseStore(email_schema.output_path)
    store.load()
    return store


@pytest.fixture
def settings(tmp_path, config_file, monkeypatch):
    monkeypatch.delenv("FORM_ROUTE", raising=False)
    monkeypatch.delenv("SUBMIT_ROUTE", raising=False)
    settings = Settings()
    settings.config_path = config_file
    settings.output_path = tmp_path / "out" / "answers.json"
    return settings


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
