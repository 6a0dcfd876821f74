"""Data models for permission checks."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Capability(Enum):
    """Named permissions guarding protected email actions."""

    DOWNLOAD = "Allow_Email_Download"
    FORWARD = "Allow_Email_Forward"

    @property
    def action(self) -> str:
        """Verb used in user-facing messages."""
        return self.name.lower()


@dataclass(frozen=True)
class PermissionDecision:
    """Resolved outcome of a capability check.

    Attributes:
        capability: The capability that was checked.
        granted: Whether the user holds it. False when the check failed.
        error: Why the check could not be resolved, if it failed.
    """

    capability: Capability
    granted: bool
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None
