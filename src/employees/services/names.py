"""Employee display-name rules shared by the ledger and the ORM side."""

from assets.models import normalize_name


def display_name(record):
    """Name stored on ``Asset.assigned_to`` for an employee record."""
    if not record:
        return ""
    full_name = normalize_name(record.get("full_name"))
    if full_name:
        return full_name
    return normalize_name(
        f"{record.get('first_name') or ''} {record.get('last_name') or ''}"
    )


def names_match(a, b):
    a, b = normalize_name(a), normalize_name(b)
    return bool(a) and a.casefold() == b.casefold()
