"""Serve an HTML form described by a TOML schema and store answers as JSON."""

from formgen.app import create_app
from formgen.config import Settings, load_config, parse_config
from formgen.errors import ConfigurationError, FieldError, FormgenError, StorageError
from formgen.render import render_form
from formgen.routes import create_form_router
from formgen.schema import AnswerType, FieldSchema, FormSchema
from formgen.store import ResponseStore
from formgen.submission import SubmissionResult, handle_submission

__all__ = [
    "AnswerType",
    "ConfigurationError",
    "FieldError",
    "FieldSchema",
    "FormSchema",
    "FormgenError",
    "ResponseStore",
    "Settings",
    "StorageError",
    "SubmissionResult",
    "create_app",
    "create_form_router",
    "handle_submission",
    "load_config",
    "parse_config",
    "render_form",
]
