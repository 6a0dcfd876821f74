"""Structured error shapes returned by collaborators."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ErrorPayload:
    """An error reported by a backend collaborator.

    Attributes:
        message: Top-level error message, if the backend supplied one.
        field_errors: Validation messages keyed by field name.
    """

    message: Optional[str] = None
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "message": self.message,
            "field_errors": {k: list(v) for k, v in self.field_errors.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorPayload":
        """Deserialize from dictionary.

        Accepts both ``field_errors`` and ``fieldErrors`` keys, where each
        entry is either a string or a mapping with a ``message`` key.
        """
        raw_fields = data.get("field_errors") or data.get("fieldErrors") or {}
        field_errors = {}
        for name, entries in raw_fields.items():
            messages = []
            for entry in entries or []:
                if isinstance(entry, dict):
                    entry = entry.get("message")
                if entry:
                    messages.append(str(entry))
            field_errors[name] = messages
        return cls(message=data.get("message"), field_errors=field_errors)
