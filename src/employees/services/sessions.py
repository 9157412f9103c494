"""Keeps an in-progress AssetLedger in the Django session."""

from .ledger import AssetLedger

SESSION_PREFIX = "assetdesk.ledger"


def session_key(employee_pk=None):
    return f"{SESSION_PREFIX}.{employee_pk if employee_pk else 'new'}"


def store_ledger(request, ledger, employee_pk=None):
    request.session[session_key(employee_pk)] = ledger.to_dict()
    request.session.modified = True


def load_ledger(request, employee_pk=None):
    """Return the stored ledger, or None when no session is open."""
    data = request.session.get(session_key(employee_pk))
    if data is None:
        return None
    return AssetLedger.from_dict(data)


def discard_ledger(request, employee_pk=None):
    return request.session.pop(session_key(employee_pk), None) is not None
