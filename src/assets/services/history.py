"""Asset change service: applies edits and appends history entries."""

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction
from django.utils import timezone

from ..models import Asset, AssetHistory, normalize_name

EDITABLE_FIELDS = (
    "name",
    "category",
    "status",
    "location",
    "description",
    "assigned_to",
)

# field -> (action, details template)
TRACKED_FIELDS = {
    "name": ("Name Updated", 'Asset name changed from "{old}" to "{new}"'),
    "category": (
        "Category Changed",
        'Category updated from "{old}" to "{new}"',
    ),
    "status": ("Status Changed", 'Status updated from "{old}" to "{new}"'),
    "location": (
        "Location Changed",
        'Location updated from "{old}" to "{new}"',
    ),
    "description": ("Description Updated", "Asset description was modified"),
}


def record_entry(asset, action, details="", old_value=None, new_value=None):
    return AssetHistory.objects.create(
        asset=asset,
        action=action,
        details=details,
        old_value=old_value,
        new_value=new_value,
    )


def create_asset(**fields) -> Asset:
    """Create an asset and its 'Asset Created' entry (plus assignment)."""
    with db_transaction.atomic():
        asset = Asset.objects.create(**fields)
        record_entry(
            asset,
            AssetHistory.ACTION_CREATED,
            f'Asset "{asset.name}" was created',
        )
        if asset.assigned_to:
            record_entry(
                asset,
                AssetHistory.ACTION_ASSIGNED,
                f"Asset assigned to {asset.assigned_to}",
                None,
                asset.assigned_to,
            )
    return asset


def _check_changes(asset, changes):
    unknown = set(changes) - set(EDITABLE_FIELDS) - {"asset_id"}
    if unknown:
        raise ValueError(
            f"Cannot update field(s): {', '.join(sorted(unknown))}."
        )
    new_asset_id = changes.get("asset_id")
    if new_asset_id is not None and (
        str(new_asset_id).strip().upper() != asset.asset_id
    ):
        raise ValidationError(
            {"asset_id": "Asset ID cannot be changed once set."}
        )


def update_asset(asset: Asset, changes) -> list:
    """Apply ``changes`` to ``asset`` and return the new history entries.

    Raises ValidationError when the change would alter ``asset_id`` and
    ValueError for fields that cannot be edited.
    """
    _check_changes(asset, changes)

    pending = []
    for field, (action, template) in TRACKED_FIELDS.items():
        if field not in changes:
            continue
        old = getattr(asset, field)
        new = changes[field] if changes[field] is not None else ""
        if old == new:
            continue
        setattr(asset, field, new)
        pending.append(
            (
                action,
                template.format(old=old or "None", new=new),
                old,
                new,
            )
        )

    if "assigned_to" in changes:
        old = asset.assigned_to
        new = normalize_name(changes["assigned_to"])
        if old != new:
            asset.assigned_to = new
            if new:
                # Reassignment passes through unassigned: fresh date.
                asset.assigned_date = timezone.now()
                pending.append(
                    (
                        AssetHistory.ACTION_ASSIGNED,
                        f"Asset assigned to {new}",
                        old or None,
                        new,
                    )
                )
            else:
                pending.append(
                    (
                        AssetHistory.ACTION_UNASSIGNED,
                        f"Asset unassigned from {old}",
                        old,
                        "Unassigned",
                    )
                )

    if not pending:
        return []

    with db_transaction.atomic():
        asset.save()
        return [record_entry(asset, *entry) for entry in pending]


def retire_asset(asset: Asset) -> Asset:
    """Soft delete: deactivate and mark retired."""
    with db_transaction.atomic():
        old_status = asset.status
        asset.is_active = False
        asset.status = "Retired"
        asset.save(update_fields=["is_active", "status", "updated_at"])
        record_entry(
            asset,
            AssetHistory.ACTION_RETIRED,
            f'Asset "{asset.name}" was retired',
            old_status,
            "Retired",
        )
    return asset
