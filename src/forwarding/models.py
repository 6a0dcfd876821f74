"""Data models for forwarding outcomes."""

from dataclasses import dataclass, field
from typing import Any, Optional

from src.errors import EmailActionError


@dataclass
class ForwardItemResult:
    """Result of forwarding a single email.

    Attributes:
        record_id: Identifier of the forwarded email.
        message_id: Platform id of the sent forward, when it succeeded.
        error: Failure for this email, when it did not.
    """

    record_id: str
    message_id: Optional[str] = None
    error: Optional[EmailActionError] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class Outcome:
    """Aggregated result of forwarding a selection to one recipient."""

    recipient: str
    results: list[ForwardItemResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def failure_reasons(self) -> list[str]:
        """Distinct failure reasons in first-seen order."""
        reasons: list[str] = []
        for result in self.results:
            if result.error is not None and result.error.reason not in reasons:
                reasons.append(result.error.reason)
        return reasons

    @property
    def summary(self) -> str:
        """One-line description of the whole operation.

        e.g. "3 email(s) forwarded to x@y.com; 1 failed: RecordNotFound"
        """
        text = f"{self.succeeded} email(s) forwarded to {self.recipient}"
        if self.failed:
            text += f"; {self.failed} failed: {'; '.join(self.failure_reasons)}"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "recipient": self.recipient,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "summary": self.summary,
            "results": [
                {
                    "record_id": r.record_id,
                    "message_id": r.message_id,
                    "error": r.error.message if r.error else None,
                }
                for r in self.results
            ],
        }
