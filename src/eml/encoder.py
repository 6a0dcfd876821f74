"""Encode email records as EML (MIME) documents."""

import base64
import secrets
from datetime import timezone
from email.header import Header
from email.utils import encode_rfc2231, formataddr, format_datetime, getaddresses
from typing import Callable, Optional

from src.errors import MalformedRecordError
from src.records.filenames import sanitize_filename, short_id
from src.records.models import Attachment, EmailRecord

from .models import EmlDocument

CRLF = "\r\n"
BASE64_LINE_LENGTH = 76


def normalize_line_endings(text: str) -> str:
    """Convert CR, LF and CRLF line endings to CRLF."""
    return text.replace("\r\n", "\n").replace("\r", "\n").replace("\n", CRLF)


def wrap_base64(content: bytes) -> str:
    """Base64-encode bytes in fixed-width lines per RFC 2045."""
    encoded = base64.b64encode(content).decode("ascii")
    lines = [
        encoded[i : i + BASE64_LINE_LENGTH]
        for i in range(0, len(encoded), BASE64_LINE_LENGTH)
    ]
    return CRLF.join(lines)


def eml_file_name(record: EmailRecord) -> str:
    """Derive the .eml file name from subject and record id."""
    return f"{sanitize_filename(record.subject)}_{short_id(record.id)}.eml"


def default_boundary(record_id: str) -> str:
    """Generate a boundary from the record id plus a random suffix."""
    return f"----=_Part_{short_id(record_id)}_{secrets.token_hex(12)}"


def _single_line(value: str) -> str:
    return " ".join(value.splitlines())


def _encode_header(name: str, value: str) -> str:
    """RFC 2047-encode a header value when it is not plain ASCII."""
    value = _single_line(value)
    try:
        value.encode("ascii")
        return value
    except UnicodeEncodeError:
        return Header(value, "utf-8", header_name=name).encode(linesep=CRLF)


def _encode_addresses(name: str, values: list[str]) -> str:
    """Format an address header, encoding only the display names."""
    pairs = getaddresses([_single_line(value) for value in values])
    formatted = [
        formataddr((display_name, address), charset="utf-8")
        for display_name, address in pairs
        if address
    ]
    if not formatted:
        return _encode_header(name, ", ".join(values))
    return ", ".join(formatted)


def _disposition(filename: str) -> str:
    try:
        filename.encode("ascii")
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        return f"attachment; filename*={encode_rfc2231(filename, 'utf-8')}"


def _validate(record: EmailRecord) -> None:
    missing = []
    if record.subject is None:
        missing.append("subject")
    if not record.from_address or not record.from_address.strip():
        missing.append("from address")
    if missing:
        raise MalformedRecordError(record.id, f"missing {', '.join(missing)}")
    if record.has_unresolved_attachments:
        raise MalformedRecordError(record.id, "attachments have not been loaded")


def _collides(boundary: str, texts: list[str], blobs: list[bytes]) -> bool:
    encoded = boundary.encode("ascii")
    return any(boundary in text for text in texts) or any(
        encoded in blob for blob in blobs
    )


def _attachment_part(attachment: Attachment, encoded_content: str) -> list[str]:
    return [
        f"Content-Type: {attachment.content_type or 'application/octet-stream'}",
        "Content-Transfer-Encoding: base64",
        f"Content-Disposition: {_disposition(attachment.safe_filename)}",
        "",
        encoded_content,
    ]


def encode(
    record: EmailRecord,
    boundary_factory: Optional[Callable[[str], str]] = None,
) -> EmlDocument:
    """Encode an email record and its attachments as an EML document.

    The output is a ``multipart/mixed`` message with one body part followed
    by one base64 part per attachment. The body is kept byte-for-byte apart
    from CRLF normalization. The boundary is regenerated until it occurs in
    neither the body nor any attachment.

    Args:
        record: Email record with all attachments resolved.
        boundary_factory: Callable producing a boundary from the record id.
            Defaults to ``default_boundary``.

    Returns:
        EmlDocument with MIME content and a derived file name.

    Raises:
        MalformedRecordError: If subject or from address is absent, or an
            attachment has not been loaded.
    """
    _validate(record)
    make_boundary = boundary_factory or default_boundary

    body = normalize_line_endings(record.body or "")
    encoded_attachments = [wrap_base64(a.content) for a in record.attachments]
    raw_attachments = [a.content for a in record.attachments]

    boundary = make_boundary(record.id)
    while _collides(boundary, [body] + encoded_attachments, raw_attachments):
        boundary = make_boundary(record.id)

    date = record.date
    if date is not None and date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)

    lines = [
        f"From: {_encode_addresses('From', [record.from_address])}",
        f"To: {_encode_addresses('To', list(record.to_addresses))}",
        f"Subject: {_encode_header('Subject', record.subject)}",
    ]
    if date is not None:
        lines.append(f"Date: {format_datetime(date)}")
    lines += [
        "MIME-Version: 1.0",
        f'Content-Type: multipart/mixed; boundary="{boundary}"',
        "",
        f"--{boundary}",
        f'Content-Type: {"text/html" if record.is_html else "text/plain"}; charset="utf-8"',
        "Content-Transfer-Encoding: 8bit",
        "",
        body,
    ]
    for attachment, encoded_content in zip(record.attachments, encoded_attachments):
        lines.append(f"--{boundary}")
        lines += _attachment_part(attachment, encoded_content)
    lines.append(f"--{boundary}--")

    return EmlDocument(
        record_id=record.id,
        content=CRLF.join(lines) + CRLF,
        file_name=eml_file_name(record),
        boundary=boundary,
    )
