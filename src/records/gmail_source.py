"""Gmail-backed record source."""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from src.errors import RecordNotFoundError, TransportFailureError

from .body_parser import (
    decode_base64_bytes,
    extract_address_list,
    extract_attachments,
    extract_body,
    extract_email_address,
)
from .gmail_auth import GmailAuthenticator
from .models import Direction, EmailRecord, EmailSummary
from .source import RecordSource

logger = logging.getLogger(__name__)

SUMMARY_HEADERS = ["From", "To", "Subject", "Date"]


def handle_http_error(error: HttpError, record_id: Optional[str] = None) -> None:
    """Convert a Gmail HttpError to the matching action error.

    Raises:
        RecordNotFoundError: If the API reports 404 for a record.
        TransportFailureError: For every other API error.
    """
    status_code = error.resp.status
    reason = error.reason if hasattr(error, "reason") else str(error)
    logger.error("Gmail API error (status=%d): %s", status_code, reason)

    if status_code == 404 and record_id:
        raise RecordNotFoundError(record_id) from error
    raise TransportFailureError(
        record_id, f"Gmail API error: {reason}", status_code=status_code
    ) from error


def _parse_date(date_header: str, internal_date: str) -> datetime:
    try:
        return parsedate_to_datetime(date_header)
    except (ValueError, TypeError):
        # internalDate is milliseconds since epoch
        return datetime.fromtimestamp(int(internal_date) / 1000, tz=timezone.utc)


def _direction(labels: list[str]) -> Direction:
    return Direction.OUTBOUND if "SENT" in labels else Direction.INBOUND


class GmailRecordSource(RecordSource):
    """Loads email records and their attachments from Gmail.

    Example usage:
        source = GmailRecordSource()
        record = source.fetch_email_record("18c2f0e4b5a6d7e8")
        print(record.subject, len(record.attachments))
    """

    def __init__(
        self,
        authenticator: Optional[GmailAuthenticator] = None,
        service: Optional[Resource] = None,
    ):
        """Initialize the source.

        Args:
            authenticator: Gmail authenticator instance.
                Defaults to GmailAuthenticator with default paths.
            service: Pre-built Gmail API service (for testing).
                If provided, authenticator is ignored.
        """
        self._auth = authenticator
        self._service = service

    def _get_service(self) -> Resource:
        if self._service is None:
            if self._auth is None:
                self._auth = GmailAuthenticator()
            self._service = self._auth.get_service()
        return self._service

    def _parse_message(self, message: dict) -> EmailRecord:
        """Parse a Gmail API message (format='full') into an EmailRecord.

        Attachments that Gmail did not inline are left unresolved.
        """
        payload = message.get("payload", {})
        header_map = {h["name"].lower(): h["value"] for h in payload.get("headers", [])}
        body, is_html = extract_body(payload)

        return EmailRecord(
            id=message["id"],
            subject=header_map.get("subject"),
            from_address=header_map.get("from", ""),
            to_addresses=extract_address_list(header_map.get("to", "")),
            date=_parse_date(header_map.get("date", ""), message.get("internalDate", "0")),
            direction=_direction(message.get("labelIds", [])),
            body=body,
            is_html=is_html,
            attachments=extract_attachments(payload),
        )

    def _resolve_attachments(self, record: EmailRecord) -> EmailRecord:
        """Load the content of every unresolved attachment."""
        if not record.has_unresolved_attachments:
            return record

        service = self._get_service()
        resolved = []
        for attachment in record.attachments:
            if attachment.is_resolved:
                resolved.append(attachment)
                continue
            if not attachment.attachment_id:
                resolved.append(attachment.with_content(b""))
                continue
            logger.debug(
                "Loading attachment %s for email %s", attachment.filename, record.id
            )
            data = (
                service.users()
                .messages()
                .attachments()
                .get(userId="me", messageId=record.id, id=attachment.attachment_id)
                .execute()
            )
            resolved.append(attachment.with_content(decode_base64_bytes(data.get("data", ""))))
        return record.with_attachments(resolved)

    def fetch_email_record(self, record_id: str) -> EmailRecord:
        try:
            service = self._get_service()
            message = (
                service.users()
                .messages()
                .get(userId="me", id=record_id, format="full")
                .execute()
            )
            return self._resolve_attachments(self._parse_message(message))
        except HttpError as e:
            handle_http_error(e, record_id)
            raise  # Never reached, but satisfies type checker

    def list_records(self, query: str = "", max_results: int = 50) -> list[EmailSummary]:
        try:
            service = self._get_service()
            results = (
                service.users()
                .messages()
                .list(userId="me", q=query, maxResults=max_results)
                .execute()
            )
            rows = []
            for msg_ref in results.get("messages", []):
                message = (
                    service.users()
                    .messages()
                    .get(
                        userId="me",
                        id=msg_ref["id"],
                        format="metadata",
                        metadataHeaders=SUMMARY_HEADERS,
                    )
                    .execute()
                )
                rows.append(self._parse_summary(message))
            return rows
        except HttpError as e:
            handle_http_error(e)
            raise  # Never reached, but satisfies type checker

    def _parse_summary(self, message: dict) -> EmailSummary:
        payload = message.get("payload", {})
        header_map = {h["name"].lower(): h["value"] for h in payload.get("headers", [])}
        _, from_email = extract_email_address(header_map.get("from", ""))
        return EmailSummary(
            id=message["id"],
            subject=header_map.get("subject", "(No Subject)"),
            from_address=from_email,
            to_address=", ".join(extract_address_list(header_map.get("to", ""))),
            date=_parse_date(header_map.get("date", ""), message.get("internalDate", "0")),
            direction=_direction(message.get("labelIds", [])),
        )
