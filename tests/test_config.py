import pytest

from formgen.config import DEFAULT_OUTPUT, Settings, load_config, parse_config
from formgen.errors import ConfigurationError
from formgen.schema import AnswerType


def _document(*fields, **extra):
    document = {
        "form_title": "Form",
        "submit_button": "Go",
        "fields": list(fields),
    }
    document.update(extra)
    return document


def _field(name, answer_type="text", **extra):
    return {"name": name, "title": name.title(), "answer_type": answer_type, **extra}


def test_load_config_builds_schema_in_order(config_file, tmp_path):
    schema = load_config(config_file)

    assert schema.title == "Team survey"
    assert schema.submit_button_text == "Send answers"
    assert schema.field_names() == ["name", "email", "age", "team", "comments"]
    assert schema.fields[2].answer_type is AnswerType.NUMBER
    assert schema.fields[3].options == ("core", "web", "ops")
    assert schema.fields[0].html_before == "<h2 class='section'>About you</h2>"
    assert str(schema.output_path) == "answers.json"


def test_output_override_wins(config_file, tmp_path):
    schema = load_config(config_file, output_override=tmp_path / "other.json")
    assert schema.output_path == tmp_path / "other.json"


def test_default_output_path():
    schema = parse_config(_document(_field("a")))
    assert str(schema.output_path) == DEFAULT_OUTPUT


def test_required_follows_default():
    schema = parse_config(
        _document(
            _field("needed"),
            _field("optional", default="n/a"),
            _field("forced", default="x", required=True),
            _field("relaxed", required=False),
        )
    )
    assert [f.is_required for f in schema.fields] == [True, False, True, False]


def test_duplicate_names_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        parse_config(_document(_field("a"), _field("a")))
    assert any("duplicate field name 'a'" in m for m in exc_info.value.messages)


def test_empty_name_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        parse_config(_document(_field("  ")))
    assert any("name must not be empty" in m for m in exc_info.value.messages)


def test_reserved_name_rejected():
    with pytest.raises(ConfigurationError, match="reserved"):
        parse_config(_document(_field("timestamp")))


def test_unknown_answer_type_rejected():
    with pytest.raises(ConfigurationError, match="unknown answer type 'colour'"):
        parse_config(_document(_field("a", answer_type="colour")))


def test_all_problems_reported_together():
    with pytest.raises(ConfigurationError) as exc_info:
        parse_config(_document(_field("a"), _field("a"), _field("b", answer_type="nope")))
    assert len(exc_info.value.messages) == 2


def test_options_only_for_choice_types():
    with pytest.raises(ConfigurationError, match="options are only allowed"):
        parse_config(_document(_field("a", options=["x"])))


def test_invalid_default_rejected():
    with pytest.raises(ConfigurationError, match="default 'abc' is invalid"):
        parse_config(_document(_field("age", answer_type="number", default="abc")))


def test_shape_errors_from_json_schema():
    with pytest.raises(ConfigurationError) as exc_info:
        parse_config({"form_title": "x", "fields": [{"name": "a"}]})
    messages = " ".join(exc_info.value.messages)
    assert "'submit_button' is a required property" in messages
    assert "'title' is a required property" in messages


def test_unknown_keys_rejected():
    with pytest.raises(ConfigurationError, match="Additional properties"):
        parse_config(_document(_field("a", colour="red")))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="config file not found"):
        load_config(tmp_path / "missing.toml")


def test_invalid_toml(tmp_path):
    path = tmp_path / "broken.toml"
    path.write_text("form_title = ", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="not valid TOML"):
        load_config(path)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("FORMGEN_CONFIG", "forms/survey.toml")
    monkeypatch.setenv("FORMGEN_OUTPUT", "data/out.json")
    monkeypatch.setenv("SERVER_PORT", "9000")
    monkeypatch.setenv("MAX_VALUE_LENGTH", "50")
    settings = Settings()
    assert str(settings.config_path) == "forms/survey.toml"
    assert str(settings.output_path) == "data/out.json"
    assert settings.port == 9000
    assert settings.max_value_length == 50


def test_settings_invalid_port_falls_back(monkeypatch):
    monkeypatch.setenv("SERVER_PORT", "not-a-port")
    monkeypatch.delenv("FORMGEN_OUTPUT", raising=False)
    settings = Settings()
    assert settings.port == 8081
    assert settings.output_path is None


def test_checkbox_takes_at_most_one_option():
    schema = parse_config(_document(_field("agree", answer_type="checkbox", options=["yes"])))
    assert schema.fields[0].checked_value == "yes"
    with pytest.raises(ConfigurationError, match="at most one option"):
        parse_config(_document(_field("agree", answer_type="checkbox", options=["yes", "no"])))


def test_settings_invalid_log_level_falls_back(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "loud")
    assert Settings().log_level == "INFO"
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert Settings().log_level == "DEBUG"
