"""
Request field extraction with deferred validation.

The Validator never raises: missing fields are recorded and an empty
value is returned so the caller can keep collecting. error_count is
checked once, after every field has been pulled, so that all input
problems are reported together.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """A single field failure."""

    field: str
    message: str


class Validator:
    """Pulls named fields out of a submitted form body."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data
        self.errors: list[ValidationError] = []

    def required_field(self, name: str) -> str:
        """
        Return the field as a string, recording an error if absent or blank.

        A value made only of whitespace counts as missing for every field,
        passwords included. Otherwise the value is returned untrimmed;
        callers trim everything except passwords.
        """
        value = self._coerce(self._data.get(name))
        if value is None or value.strip() == "":
            self.errors.append(ValidationError(name, f"The field '{name}' is required."))
            return ""
        return value

    def optional_field(self, name: str) -> str | None:
        """Return the field as a string, or None if absent."""
        return self._coerce(self._data.get(name))

    def add_error(self, name: str, message: str) -> None:
        """Record a failure found while interpreting a field."""
        self.errors.append(ValidationError(name, message))

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @staticmethod
    def _coerce(value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
