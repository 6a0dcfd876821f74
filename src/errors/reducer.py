"""Reduce heterogeneous error shapes to a single display string."""

import json
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from .exceptions import EmailActionError
from .models import ErrorPayload

UNKNOWN_ERROR_MESSAGE = "Unknown error"


def _flatten_field_errors(field_errors: Mapping) -> Optional[str]:
    """Flatten a field name -> messages mapping into one comma-joined string."""
    messages = []
    for entries in field_errors.values():
        if isinstance(entries, (str, Mapping)):
            entries = [entries]
        for entry in entries or []:
            if isinstance(entry, Mapping):
                entry = entry.get("message")
            if entry:
                messages.append(str(entry))
    return ", ".join(messages) if messages else None


def _reduce_mapping(error: Mapping) -> Optional[str]:
    body = error.get("body")
    if isinstance(body, Mapping):
        if isinstance(body.get("message"), str):
            return body["message"]
        field_errors = body.get("fieldErrors") or body.get("field_errors")
        if isinstance(field_errors, Mapping):
            flattened = _flatten_field_errors(field_errors)
            if flattened:
                return flattened

    field_errors = error.get("fieldErrors") or error.get("field_errors")
    if isinstance(field_errors, Mapping):
        flattened = _flatten_field_errors(field_errors)
        if flattened:
            return flattened

    if isinstance(error.get("message"), str):
        return error["message"]
    return None


def _serialize(error: Any) -> str:
    try:
        return json.dumps(error, default=str)
    except (TypeError, ValueError):
        return repr(error)


def _reduce_one(error: Any) -> Optional[str]:
    """Reduce a single error to text, following shape priority."""
    if isinstance(error, str):
        return error

    if isinstance(error, EmailActionError):
        return error.message

    if isinstance(error, ErrorPayload):
        if error.message:
            return error.message
        return _flatten_field_errors(error.field_errors)

    if isinstance(error, Mapping):
        reduced = _reduce_mapping(error)
        if reduced is not None:
            return reduced
        return _serialize(error)

    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message

    if isinstance(error, BaseException):
        return str(error) or type(error).__name__

    return _serialize(error)


def reduce_errors(errors: Any) -> str:
    """Reduce one error or a list of errors to a single display string.

    Each error is reduced in priority order: plain strings are used as-is,
    then structured message fields, then flattened field-level validation
    errors, then a generic ``message`` attribute, and finally a best-effort
    serialization. Reduced messages are joined with ``", "`` in input order.

    Args:
        errors: A single error or a list/tuple of errors of any shape.

    Returns:
        The combined message. Never raises; returns ``UNKNOWN_ERROR_MESSAGE``
        when nothing usable remains.
    """
    if isinstance(errors, (list, tuple)):
        items: Iterable[Any] = errors
    else:
        items = [errors]

    parts = []
    for error in items:
        if error is None or (isinstance(error, str) and not error):
            continue
        try:
            reduced = _reduce_one(error)
        except Exception:
            reduced = type(error).__name__
        if reduced:
            parts.append(reduced)

    return ", ".join(parts) if parts else UNKNOWN_ERROR_MESSAGE
