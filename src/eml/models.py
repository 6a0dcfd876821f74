"""Data model for encoded EML documents."""

from dataclasses import dataclass


@dataclass
class EmlDocument:
    """A single email encoded as an RFC 5322 / MIME message.

    Attributes:
        record_id: Identifier of the source email record.
        content: MIME-formatted text with CRLF line endings.
        file_name: Suggested file name, ending in ".eml".
        boundary: Multipart boundary token used in ``content``.
    """

    record_id: str
    content: str
    file_name: str
    boundary: str

    def to_bytes(self) -> bytes:
        """Return the byte stream to hand to a save-as primitive."""
        return self.content.encode("utf-8")

    @property
    def size(self) -> int:
        """Encoded size in bytes."""
        return len(self.to_bytes())
