"""Record source interfaces for loading stored email records."""

from abc import ABC, abstractmethod
from typing import Iterable

from src.errors import RecordNotFoundError

from .models import EmailRecord, EmailSummary


class RecordSource(ABC):
    """Interface to the platform's email record storage.

    Implementations:
    - InMemoryRecordSource: Dictionary-backed, for tests and local runs
    - GmailRecordSource: Reads messages through the Gmail API
    """

    @abstractmethod
    def fetch_email_record(self, record_id: str) -> EmailRecord:
        """Fetch a record with all attachments resolved.

        Args:
            record_id: Platform identifier of the email

        Returns:
            EmailRecord ready for encoding

        Raises:
            RecordNotFoundError: If no record has this identifier
        """
        pass

    @abstractmethod
    def list_records(self, query: str = "", max_results: int = 50) -> list[EmailSummary]:
        """List records available for selection.

        Args:
            query: Platform-specific filter
            max_results: Maximum number of rows returned

        Returns:
            Summary rows in platform order
        """
        pass


class InMemoryRecordSource(RecordSource):
    """Record source backed by a dictionary keyed by record id.

    ``query`` is matched case-insensitively against subject and sender.
    """

    def __init__(self, records: Iterable[EmailRecord] = ()) -> None:
        self._records: dict[str, EmailRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: EmailRecord) -> None:
        self._records[record.id] = record

    def fetch_email_record(self, record_id: str) -> EmailRecord:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFoundError(record_id) from None

    def list_records(self, query: str = "", max_results: int = 50) -> list[EmailSummary]:
        needle = query.lower()
        rows = [
            EmailSummary.from_record(record)
            for record in self._records.values()
            if not needle
            or needle in (record.subject or "").lower()
            or needle in record.from_address.lower()
        ]
        return rows[:max_results]
