"""Email record storage access.

This module models stored email records and loads them from the
platform (Gmail) for encoding and forwarding.

Public API:
    - EmailRecord, Attachment, Direction: Record data model
    - EmailSummary: Listing row for selection
    - RecordSource: Interface for record storage
    - InMemoryRecordSource: Dictionary-backed implementation
    - GmailRecordSource: Gmail API implementation
    - GmailAuthenticator: Authentication helper
    - sort_summaries: Column sorting for listings
    - sanitize_filename, short_id: File name helpers
"""

from .exceptions import AuthenticationError, NonInteractiveAuthError, ScopeMismatchError
from .filenames import sanitize_filename, short_id
from .gmail_auth import GmailAuthenticator
from .gmail_source import GmailRecordSource
from .listing import SORTABLE_FIELDS, sort_summaries
from .models import Attachment, Direction, EmailRecord, EmailSummary
from .source import InMemoryRecordSource, RecordSource

__all__ = [
    "EmailRecord",
    "Attachment",
    "Direction",
    "EmailSummary",
    "RecordSource",
    "InMemoryRecordSource",
    "GmailRecordSource",
    "GmailAuthenticator",
    "sort_summaries",
    "SORTABLE_FIELDS",
    "sanitize_filename",
    "short_id",
    "AuthenticationError",
    "ScopeMismatchError",
    "NonInteractiveAuthError",
]
