"""Input validation for forwarding requests."""

from typing import Iterable

from src.errors import InvalidRecipientError, NoSelectionError


def is_valid_recipient(recipient: str | None) -> bool:
    """Check that a recipient lexically resembles an email address.

    Requires a single "@" with non-empty local and domain parts and no
    whitespace. Deliverability is not checked.
    """
    if not recipient:
        return False
    recipient = recipient.strip()
    if any(c.isspace() for c in recipient) or recipient.count("@") != 1:
        return False
    local, _, domain = recipient.partition("@")
    return bool(local) and bool(domain)


def validate_recipient(recipient: str | None) -> str:
    """Return the stripped recipient or raise InvalidRecipientError."""
    if not is_valid_recipient(recipient):
        raise InvalidRecipientError(recipient)
    return recipient.strip()


def normalize_selection(ids: Iterable[str], action: str = "forward") -> list[str]:
    """Deduplicate selected ids, keeping first-seen order.

    Raises:
        NoSelectionError: If nothing is selected.
    """
    selection = list(dict.fromkeys(i for i in ids if i))
    if not selection:
        raise NoSelectionError(action)
    return selection
