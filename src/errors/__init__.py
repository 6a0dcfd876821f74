"""Error taxonomy and display reduction for email actions.

Public API:
    - reduce_errors: Collapse one or many errors into a display string
    - ErrorPayload: Structured error shape returned by collaborators
    - ErrorKind: Closed set of error categories
    - EmailActionError: Base exception for the package
    - MalformedRecordError, RecordNotFoundError, PermissionDeniedError,
      InvalidRecipientError, NoSelectionError, TransportFailureError,
      UnknownActionError: Concrete error variants
"""

from .exceptions import (
    EmailActionError,
    ErrorKind,
    InvalidRecipientError,
    MalformedRecordError,
    NoSelectionError,
    PermissionDeniedError,
    RecordNotFoundError,
    TransportFailureError,
    UnknownActionError,
)
from .models import ErrorPayload
from .reducer import UNKNOWN_ERROR_MESSAGE, reduce_errors

__all__ = [
    "reduce_errors",
    "UNKNOWN_ERROR_MESSAGE",
    "ErrorPayload",
    "ErrorKind",
    "EmailActionError",
    "MalformedRecordError",
    "RecordNotFoundError",
    "PermissionDeniedError",
    "InvalidRecipientError",
    "NoSelectionError",
    "TransportFailureError",
    "UnknownActionError",
]
