from __future__ import annotations


class FormgenError(Exception):
    """Base class for every error raised by formgen."""


class ConfigurationError(FormgenError):
    """The form configuration cannot be served. Fatal at startup."""

    def __init__(self, messages: list[str] | str) -> None:
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class FieldError(FormgenError):
    """A single submitted value violates its field's answer type."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class StorageError(FormgenError):
    """The response file could not be read or written."""
