"""Sorting helpers for email selection listings."""

from .models import EmailSummary

SORTABLE_FIELDS = ("subject", "from_address", "to_address", "formatted_date", "direction")


def _sort_key(row: EmailSummary, field: str) -> str:
    value = getattr(row, field)
    if hasattr(value, "value"):
        value = value.value
    return str(value).lower() if value else ""


def sort_summaries(
    rows: list[EmailSummary],
    field: str = "formatted_date",
    direction: str = "desc",
) -> list[EmailSummary]:
    """Sort listing rows case-insensitively by one column.

    Missing values sort as empty strings. The sort is stable, so rows
    with equal keys keep their original order.

    Args:
        rows: Rows to sort (not modified).
        field: One of SORTABLE_FIELDS.
        direction: "asc" or "desc".

    Returns:
        A new sorted list.

    Raises:
        ValueError: If field or direction is not recognized.
    """
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by '{field}'. Choose from {SORTABLE_FIELDS}")
    if direction not in ("asc", "desc"):
        raise ValueError(f"Sort direction must be 'asc' or 'desc', got '{direction}'")
    return sorted(rows, key=lambda row: _sort_key(row, field), reverse=direction == "desc")
