"""Activity timeline built from asset history and employee records."""

from django.apps import apps

from ..models import AssetHistory

ACTIVITY_ICONS = {
    "Asset Created": "fas fa-plus-circle",
    "Name Updated": "fas fa-edit",
    "Category Changed": "fas fa-tags",
    "Status Changed": "fas fa-toggle-on",
    "Location Changed": "fas fa-map-marker-alt",
    "Asset Assigned": "fas fa-user-check",
    "Asset Unassigned": "fas fa-user-times",
    "Description Updated": "fas fa-align-left",
    "Asset Retired": "fas fa-trash",
    "Employee Added": "fas fa-user-plus",
}

ACTIVITY_COLORS = {
    "Asset Created": "success",
    "Name Updated": "info",
    "Category Changed": "info",
    "Status Changed": "warning",
    "Location Changed": "info",
    "Asset Assigned": "primary",
    "Asset Unassigned": "warning",
    "Description Updated": "info",
    "Asset Retired": "danger",
    "Employee Added": "success",
}


def _entry(key, timestamp, title, description, kind, **extra):
    return {
        "id": key,
        "timestamp": timestamp.isoformat(),
        "title": title,
        "description": description,
        "type": kind,
        "icon": ACTIVITY_ICONS.get(title, "fas fa-info-circle"),
        "color": ACTIVITY_COLORS.get(title, "info"),
        **extra,
    }


def build_timeline(limit=None, kind=None):
    """Return activity entries, newest first.

    ``kind`` restricts the feed to ``"assets"`` or ``"employees"``.
    """
    Employee = apps.get_model("employees", "Employee")
    items = []

    if kind in (None, "assets"):
        history = AssetHistory.objects.select_related("asset")
        for entry in history:
            items.append(
                _entry(
                    f"history-{entry.pk}",
                    entry.timestamp,
                    entry.action,
                    entry.details,
                    "assets",
                    asset_id=entry.asset.asset_id,
                    asset_name=entry.asset.name,
                )
            )

    if kind in (None, "employees"):
        for employee in Employee.objects.all():
            items.append(
                _entry(
                    f"employee-created-{employee.pk}",
                    employee.created_at,
                    "Employee Added",
                    f'Employee "{employee.display_name}" was added',
                    "employees",
                    employee_id=employee.employee_id,
                    employee_name=employee.display_name,
                )
            )

    items.sort(key=lambda item: item["timestamp"], reverse=True)
    if limit is not None:
        items = items[:limit]
    return items
