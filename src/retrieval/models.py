"""Data models for batch retrieval results."""

from dataclasses import dataclass
from typing import Optional

from src.eml import EmlDocument
from src.errors import EmailActionError


@dataclass
class RetrievalResult:
    """Outcome of encoding one requested record.

    Exactly one of ``document`` and ``error`` is set.
    """

    record_id: str
    document: Optional[EmlDocument] = None
    error: Optional[EmailActionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> EmlDocument:
        """Return the document, or raise the item's error."""
        if self.error is not None:
            raise self.error
        return self.document
