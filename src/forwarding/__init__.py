"""Forwarding of stored emails as attachments.

Public API:
    - ForwardingOrchestrator: Validate, forward and aggregate
    - Outcome, ForwardItemResult: Aggregated and per-email results
    - ForwardTransport: Interface to the send primitive
    - GmailForwardTransport: Gmail API implementation
    - is_valid_recipient, validate_recipient, normalize_selection: Input checks
"""

from .models import ForwardItemResult, Outcome
from .orchestrator import ForwardingOrchestrator
from .transport import (
    ForwardTransport,
    GmailForwardTransport,
    build_forward_message,
    forward_subject,
)
from .validation import is_valid_recipient, normalize_selection, validate_recipient

__all__ = [
    "ForwardingOrchestrator",
    "Outcome",
    "ForwardItemResult",
    "ForwardTransport",
    "GmailForwardTransport",
    "build_forward_message",
    "forward_subject",
    "is_valid_recipient",
    "validate_recipient",
    "normalize_selection",
]
