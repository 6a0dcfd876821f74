"""User-facing email actions.

Public API:
    - EmailActions: download_one, download_many, forward_selected
    - ActionSession: Single-flight, closable session for UI callers
    - Notification, NotificationVariant: One message per action
    - SelectionState: Ordered set of selected ids
    - DirectorySaver: Save-as primitive writing .eml files
"""

from .files import DirectorySaver
from .models import Notification, NotificationVariant, SelectionState
from .service import EmailActions
from .session import ActionSession, SaveFile, notification_for_error

__all__ = [
    "EmailActions",
    "ActionSession",
    "SaveFile",
    "DirectorySaver",
    "Notification",
    "NotificationVariant",
    "SelectionState",
    "notification_for_error",
]
