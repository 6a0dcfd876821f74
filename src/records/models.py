"""Email record data models."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .filenames import sanitize_filename


class Direction(Enum):
    """Whether an email was received or sent."""

    INBOUND = "Inbound"
    OUTBOUND = "Outbound"


@dataclass(frozen=True)
class Attachment:
    """A file attached to an email record.

    Attachments are loaded lazily: ``content`` stays ``None`` until the
    record source resolves it.

    Attributes:
        filename: Original file name as stored on the platform.
        content_type: MIME content type (e.g. "application/pdf").
        content: Binary content, or None while unresolved.
        size: Declared size in bytes (0 when unknown).
        attachment_id: Platform handle used to load the content.
    """

    filename: str
    content_type: str = "application/octet-stream"
    content: Optional[bytes] = None
    size: int = 0
    attachment_id: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.content is not None

    @property
    def size_bytes(self) -> int:
        """Size in bytes, measured from content when it is loaded."""
        if self.content is not None:
            return len(self.content)
        return self.size

    @property
    def safe_filename(self) -> str:
        """File name with path separators and illegal characters removed."""
        return sanitize_filename(self.filename, max_length=255, fallback="attachment")

    def with_content(self, content: bytes) -> "Attachment":
        """Return a resolved copy of this attachment."""
        return replace(self, content=content, size=len(content))


@dataclass(frozen=True)
class EmailRecord:
    """A stored email message with its attachments.

    Attributes:
        id: Platform-assigned identifier (immutable)
        subject: Subject line (None when the platform has none)
        from_address: Sender address
        to_addresses: Ordered recipient addresses
        date: Sent or received timestamp
        direction: Inbound or outbound
        body: Plain text or HTML body
        is_html: Whether body is HTML
        attachments: Ordered attachments
    """

    id: str
    subject: Optional[str]
    from_address: str
    to_addresses: tuple[str, ...] = ()
    date: Optional[datetime] = None
    direction: Direction = Direction.INBOUND
    body: str = ""
    is_html: bool = False
    attachments: tuple[Attachment, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers; store tuples so the record stays hashable.
        object.__setattr__(self, "to_addresses", tuple(self.to_addresses))
        object.__setattr__(self, "attachments", tuple(self.attachments))

    @property
    def has_unresolved_attachments(self) -> bool:
        return any(not a.is_resolved for a in self.attachments)

    def with_attachments(self, attachments: list[Attachment]) -> "EmailRecord":
        """Return a copy of this record with the given attachments."""
        return replace(self, attachments=tuple(attachments))

    def to_dict(self) -> dict[str, Any]:
        """Serialize record metadata (attachment content excluded)."""
        return {
            "id": self.id,
            "subject": self.subject,
            "from_address": self.from_address,
            "to_addresses": list(self.to_addresses),
            "date": self.date.isoformat() if self.date else None,
            "direction": self.direction.value,
            "is_html": self.is_html,
            "attachments": [
                {
                    "filename": a.filename,
                    "content_type": a.content_type,
                    "size": a.size_bytes,
                }
                for a in self.attachments
            ],
        }


@dataclass
class EmailSummary:
    """A row in an email selection listing."""

    id: str
    subject: str
    from_address: str
    to_address: str
    date: Optional[datetime] = None
    direction: Direction = Direction.INBOUND

    @property
    def formatted_date(self) -> str:
        if self.date is None:
            return ""
        return self.date.strftime("%Y-%m-%d %H:%M")

    @classmethod
    def from_record(cls, record: EmailRecord) -> "EmailSummary":
        return cls(
            id=record.id,
            subject=record.subject or "",
            from_address=record.from_address,
            to_address=", ".join(record.to_addresses),
            date=record.date,
            direction=record.direction,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for display."""
        return {
            "id": self.id,
            "subject": self.subject,
            "from_address": self.from_address,
            "to_address": self.to_address,
            "formatted_date": self.formatted_date,
            "direction": self.direction.value,
        }
