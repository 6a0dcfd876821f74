"""Exceptions for email download and forwarding actions."""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of error categories surfaced to the user."""

    MALFORMED_RECORD = "MalformedRecord"
    RECORD_NOT_FOUND = "RecordNotFound"
    PERMISSION_DENIED = "PermissionDenied"
    INVALID_RECIPIENT = "InvalidRecipient"
    NO_SELECTION = "NoSelection"
    TRANSPORT_FAILURE = "TransportFailure"
    UNKNOWN = "Unknown"


class EmailActionError(Exception):
    """Base exception for all email action errors.

    Attributes:
        kind: Category of the error.
        message: Human-readable description, safe to display.
    """

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def reason(self) -> str:
        """Short reason used when summarizing batch failures."""
        return self.kind.value


class MalformedRecordError(EmailActionError):
    """Raised when an email record cannot be encoded."""

    kind = ErrorKind.MALFORMED_RECORD

    def __init__(self, record_id: str, detail: str):
        self.record_id = record_id
        self.detail = detail
        super().__init__(f"Email '{record_id}' cannot be encoded: {detail}")


class RecordNotFoundError(EmailActionError):
    """Raised when a requested email record does not exist."""

    kind = ErrorKind.RECORD_NOT_FOUND

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Email '{record_id}' not found")


class PermissionDeniedError(EmailActionError):
    """Raised when a capability is denied or could not be verified."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, capability: str, action: str = "access", detail: str | None = None):
        self.capability = capability
        self.action = action
        self.detail = detail
        if detail:
            message = f"Unable to verify permissions: {detail}"
        else:
            message = (
                f"You do not have permission to {action} emails. "
                "Please contact your administrator."
            )
        super().__init__(message)


class InvalidRecipientError(EmailActionError):
    """Raised when the recipient address is missing or malformed."""

    kind = ErrorKind.INVALID_RECIPIENT

    def __init__(self, recipient: str | None):
        self.recipient = recipient
        if not recipient or not recipient.strip():
            message = "Please enter a recipient email address."
        else:
            message = f"'{recipient}' is not a valid email address."
        super().__init__(message)


class NoSelectionError(EmailActionError):
    """Raised when an action is requested with no emails selected."""

    kind = ErrorKind.NO_SELECTION

    def __init__(self, action: str = "forward"):
        self.action = action
        super().__init__(f"Please select at least one email to {action}.")


class TransportFailureError(EmailActionError):
    """Raised when the underlying fetch or send call fails."""

    kind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, record_id: str | None, detail: str, status_code: int | None = None):
        self.record_id = record_id
        self.detail = detail
        self.status_code = status_code
        subject = f"Email '{record_id}'" if record_id else "Request"
        super().__init__(f"{subject} failed: {detail}")

    @property
    def reason(self) -> str:
        return f"{self.kind.value} ({self.detail})"


class UnknownActionError(EmailActionError):
    """Fallback for failures that fit no other category."""

    kind = ErrorKind.UNKNOWN
