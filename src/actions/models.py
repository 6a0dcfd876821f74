"""Data models for user-facing email actions."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


class NotificationVariant(Enum):
    """Severity of a user-facing notification."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """The single message shown to the user after an action.

    Attributes:
        title: Short heading (e.g. "Success", "Access Denied").
        message: Combined, human-readable outcome.
        variant: Severity used for styling.
    """

    title: str
    message: str
    variant: NotificationVariant

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls("Success", message, NotificationVariant.SUCCESS)

    @classmethod
    def warning(cls, message: str) -> "Notification":
        return cls("Warning", message, NotificationVariant.WARNING)

    @classmethod
    def error(cls, message: str, title: str = "Error") -> "Notification":
        return cls(title, message, NotificationVariant.ERROR)


class SelectionState:
    """Ordered set of selected record ids.

    Membership is unique; order only matters for display.
    """

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: dict[str, None] = dict.fromkeys(ids)

    def add(self, record_id: str) -> None:
        self._ids[record_id] = None

    def remove(self, record_id: str) -> None:
        self._ids.pop(record_id, None)

    def toggle(self, record_id: str) -> bool:
        """Flip membership of an id. Returns True if it is now selected."""
        if record_id in self._ids:
            self.remove(record_id)
            return False
        self.add(record_id)
        return True

    def replace(self, ids: Iterable[str]) -> None:
        """Replace the whole selection (e.g. from a table's selected rows)."""
        self._ids = dict.fromkeys(ids)

    def clear(self) -> None:
        self._ids.clear()

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))
