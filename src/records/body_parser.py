"""MIME payload parsing utilities for Gmail messages."""

import base64
import re
from email.utils import getaddresses
from typing import Optional

from .models import Attachment


def decode_base64_bytes(data: str) -> bytes:
    """Decode Gmail's URL-safe base64 encoded data to raw bytes.

    Gmail uses URL-safe base64 encoding (RFC 4648) which replaces
    '+' with '-' and '/' with '_', and often drops the padding.

    Args:
        data: Base64url encoded string

    Returns:
        Decoded bytes
    """
    padding = 4 - len(data) % 4
    if padding != 4:
        data += "=" * padding
    return base64.urlsafe_b64decode(data)


def decode_base64(data: str) -> str:
    """Decode Gmail's URL-safe base64 encoded data to UTF-8 text."""
    return decode_base64_bytes(data).decode("utf-8", errors="replace")


def extract_body(payload: dict) -> tuple[str, bool]:
    """Extract the message body from a Gmail message payload.

    HTML is preferred over plain text because it is the richer
    representation and is written unchanged into the EML body part.

    Args:
        payload: Gmail message payload dictionary

    Returns:
        Tuple of (body, is_html). Body is "" when the message has none.
    """
    plain_text: Optional[str] = None
    html_body: Optional[str] = None

    def extract_from_parts(parts: list) -> None:
        nonlocal plain_text, html_body

        for part in parts:
            if part.get("filename"):
                continue
            mime_type = part.get("mimeType", "")
            body_data = part.get("body", {}).get("data")

            if mime_type == "text/plain" and body_data and plain_text is None:
                plain_text = decode_base64(body_data)
            elif mime_type == "text/html" and body_data and html_body is None:
                html_body = decode_base64(body_data)
            elif mime_type.startswith("multipart/"):
                extract_from_parts(part.get("parts", []))

    body_data = payload.get("body", {}).get("data")
    mime_type = payload.get("mimeType", "")

    if body_data and not mime_type.startswith("multipart/"):
        decoded = decode_base64(body_data)
        if mime_type == "text/html":
            html_body = decoded
        else:
            plain_text = decoded
    elif "parts" in payload:
        extract_from_parts(payload["parts"])

    if html_body is not None:
        return html_body, True
    return plain_text or "", False


def extract_attachments(payload: dict) -> list[Attachment]:
    """Collect attachment parts from a Gmail message payload.

    Parts with a filename are attachments. Small attachments carry their
    data inline and come back resolved; larger ones only carry an
    ``attachmentId`` and are returned unresolved.

    Args:
        payload: Gmail message payload dictionary

    Returns:
        Attachments in message order.
    """
    attachments: list[Attachment] = []

    def walk(part: dict) -> None:
        filename = part.get("filename")
        body = part.get("body", {})
        if filename:
            inline = body.get("data")
            attachments.append(
                Attachment(
                    filename=filename,
                    content_type=part.get("mimeType") or "application/octet-stream",
                    content=decode_base64_bytes(inline) if inline else None,
                    size=body.get("size", 0),
                    attachment_id=body.get("attachmentId"),
                )
            )
        for child in part.get("parts", []):
            walk(child)

    walk(payload)
    return attachments


def extract_email_address(header_value: str) -> tuple[str, str]:
    """Parse email header to extract display name and email address.

    Handles formats like:
    - "John Doe <john@example.com>"
    - "<john@example.com>"
    - "john@example.com"

    Args:
        header_value: Raw From/To header value

    Returns:
        Tuple of (display_name, email_address). Display name may equal
        email address if no name is present.
    """
    match = re.match(r'^"?([^"<]*)"?\s*<([^>]+)>$', header_value.strip())
    if match:
        name = match.group(1).strip()
        email = match.group(2).strip()
        return (name if name else email, email)

    email = header_value.strip()
    return (email, email)


def extract_address_list(header_value: str) -> list[str]:
    """Split a To/Cc header into bare addresses, keeping order."""
    if not header_value:
        return []
    return [address for _, address in getaddresses([header_value]) if address]
