"""File name sanitization for records and attachments."""

import re

# Characters that are illegal in file names on common filesystems.
_ILLEGAL_CHARS = re.compile(r'[/\\:*?"<>|\x00-\x1f\x7f]')
_WHITESPACE = re.compile(r"\s+")

MAX_FILENAME_LENGTH = 80


def sanitize_filename(
    value: str | None,
    max_length: int = MAX_FILENAME_LENGTH,
    fallback: str = "email",
) -> str:
    """Make a string safe to use as a file name.

    Replaces path separators and other illegal characters with ``_``,
    collapses whitespace, strips leading/trailing dots and spaces, and
    truncates to ``max_length`` characters.

    Args:
        value: Raw name (subject line, attachment name, ...).
        max_length: Maximum number of characters kept.
        fallback: Returned when nothing usable remains.

    Returns:
        Sanitized file name, never empty.
    """
    if not value:
        return fallback
    cleaned = _WHITESPACE.sub(" ", value)
    cleaned = _ILLEGAL_CHARS.sub("_", cleaned).strip(" .")
    cleaned = cleaned[:max_length].rstrip(" .")
    return cleaned or fallback


def short_id(record_id: str, length: int = 8) -> str:
    """Return a short, filename-safe suffix derived from a record id."""
    alnum = "".join(c for c in record_id if c.isalnum())
    return alnum[-length:] if alnum else "noid"
