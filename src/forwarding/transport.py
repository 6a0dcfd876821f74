"""Transports that send forwarded emails."""

import base64
import email
import logging
from abc import ABC, abstractmethod
from email.mime.message import MIMEMessage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from src.eml import EmlDocument, encode
from src.errors import TransportFailureError
from src.records import EmailRecord, GmailAuthenticator, GmailRecordSource, RecordSource

logger = logging.getLogger(__name__)

FORWARD_PREFIX = "Fwd: "


class ForwardTransport(ABC):
    """Interface to the platform's send primitive."""

    @abstractmethod
    def send_forward(self, record_id: str, recipient: str) -> str:
        """Forward one stored email to a recipient.

        Args:
            record_id: Identifier of the email to forward
            recipient: Destination address (already validated)

        Returns:
            Platform id of the sent message

        Raises:
            RecordNotFoundError: If the email does not exist
            TransportFailureError: If sending fails
        """
        pass


def forward_subject(subject: str | None) -> str:
    subject = subject or ""
    if subject.lower().startswith(FORWARD_PREFIX.lower()):
        return subject
    return f"{FORWARD_PREFIX}{subject}"


def build_forward_message(
    record: EmailRecord, document: EmlDocument, recipient: str
) -> MIMEMultipart:
    """Wrap an encoded email as a message/rfc822 attachment.

    Args:
        record: The original email, used for the cover note.
        document: EML encoding of the original.
        recipient: Destination address.

    Returns:
        A multipart message ready to be sent.
    """
    message = MIMEMultipart()
    message["to"] = recipient
    message["subject"] = forward_subject(record.subject)

    date = record.date.strftime("%Y-%m-%d %H:%M") if record.date else "unknown"
    note = (
        "Forwarded email attached.\n\n"
        f"From: {record.from_address}\n"
        f"To: {', '.join(record.to_addresses)}\n"
        f"Date: {date}\n"
        f"Subject: {record.subject}\n"
    )
    message.attach(MIMEText(note, "plain", "utf-8"))

    attached = MIMEMessage(email.message_from_bytes(document.to_bytes()))
    attached.add_header("Content-Disposition", "attachment", filename=document.file_name)
    message.attach(attached)
    return message


class GmailForwardTransport(ForwardTransport):
    """Forwards emails as EML attachments through the Gmail API."""

    def __init__(
        self,
        source: Optional[RecordSource] = None,
        authenticator: Optional[GmailAuthenticator] = None,
        service: Optional[Resource] = None,
    ):
        """Initialize the transport.

        Args:
            source: Where forwarded records are loaded from.
                Defaults to a GmailRecordSource sharing this transport's service.
            authenticator: Gmail authenticator with the gmail.send scope.
            service: Pre-built Gmail API service (for testing).
        """
        self._auth = authenticator
        self._service = service
        self._source = source

    def _get_service(self) -> Resource:
        if self._service is None:
            if self._auth is None:
                self._auth = GmailAuthenticator()
            self._service = self._auth.get_service()
        return self._service

    def _get_source(self) -> RecordSource:
        if self._source is None:
            self._source = GmailRecordSource(service=self._get_service())
        return self._source

    def send_forward(self, record_id: str, recipient: str) -> str:
        record = self._get_source().fetch_email_record(record_id)
        document = encode(record)
        message = build_forward_message(record, document, recipient)
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode()

        try:
            service = self._get_service()
            result = (
                service.users()
                .messages()
                .send(userId="me", body={"raw": raw})
                .execute()
            )
        except HttpError as e:
            logger.error("Gmail send failed for email %s: %s", record_id, e)
            raise TransportFailureError(
                record_id, f"Gmail API error: {e.reason}", status_code=e.resp.status
            ) from e

        logger.info("Forwarded email %s to %s as %s", record_id, recipient, result["id"])
        return result["id"]
