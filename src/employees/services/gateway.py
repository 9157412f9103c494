"""Persistence of a committed ledger: employee first, then each asset."""

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.db import transaction as db_transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from assets.models import Asset
from assets.services import history

from ..models import Employee, Handover
from .names import names_match

logger = logging.getLogger(__name__)

EMPLOYEE_FIELDS = (
    "employee_id",
    "first_name",
    "last_name",
    "email",
    "phone",
    "department",
    "position",
    "hire_date",
    "location",
    "status",
    "notes",
)

ASSET_CREATE_FIELDS = (
    "asset_id",
    "name",
    "category",
    "status",
    "location",
    "description",
    "assigned_to",
)


class PersistenceError(Exception):
    """A write was rejected or the database could not be reached."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}


def _wrap(exc):
    if isinstance(exc, ValidationError) and hasattr(exc, "error_dict"):
        return PersistenceError(
            "Validation failed",
            errors={k: v[0] for k, v in exc.message_dict.items()},
        )
    return PersistenceError(str(exc))


class PersistenceGateway:
    """Writes employees and assets. Each call is atomic on its own."""

    def save_employee(self, patch, instance=None) -> Employee:
        """Create or update an employee from a committed patch.

        A ``handover_details`` key replaces the stored handover; without
        it any existing handover is left as is.
        """
        employee = instance if instance is not None else Employee()
        for field in EMPLOYEE_FIELDS:
            if field in patch:
                setattr(employee, field, patch[field])
        try:
            with db_transaction.atomic():
                employee.full_clean()
                employee.save()
                if "handover_details" in patch:
                    self._save_handover(employee, patch["handover_details"])
        except (DatabaseError, ValidationError) as exc:
            logger.warning(
                "Could not save employee %s: %s", employee.employee_id, exc
            )
            raise _wrap(exc) from exc
        logger.info("Saved employee %s", employee.employee_id)
        return employee

    def _save_handover(self, employee, details):
        handover, _ = Handover.objects.get_or_create(employee=employee)
        handover_date = details.get("handover_date")
        handover.handover_date = (
            parse_datetime(handover_date) if handover_date else None
        )
        handover.handover_to = details.get("handover_to") or ""
        handover.handover_reason = details.get("handover_reason") or ""
        handover.notes = details.get("notes") or ""
        handover.assets_to_return = list(
            details.get("assets_to_return") or []
        )
        handover.handover_status = (
            details.get("handover_status") or Handover.STATUS_PENDING
        )
        if handover.handover_status == Handover.STATUS_COMPLETED:
            handover.completed_at = handover.completed_at or timezone.now()
        else:
            handover.completed_at = None
        handover.full_clean(exclude=["employee"])
        handover.save()
        employee.handover = handover
        return handover

    def update_asset(self, internal_id, patch) -> Asset:
        try:
            asset = Asset.objects.get(internal_id=internal_id)
            history.update_asset(asset, patch)
        except Asset.DoesNotExist as exc:
            raise PersistenceError(f"Asset {internal_id} not found") from exc
        except (DatabaseError, ValidationError, ValueError) as exc:
            raise _wrap(exc) from exc
        return asset

    def create_asset(self, record) -> Asset:
        fields = {
            key: record[key]
            for key in ASSET_CREATE_FIELDS
            if record.get(key) not in (None, "")
        }
        try:
            if Asset.objects.filter(
                asset_id__iexact=fields.get("asset_id", "")
            ).exists():
                raise ValidationError(
                    {"asset_id": "Asset ID already exists."}
                )
            return history.create_asset(**fields)
        except (DatabaseError, ValidationError) as exc:
            raise _wrap(exc) from exc


def save_ledger(ledger, form_data, instance=None, gateway=None):
    """Commit ``ledger`` and persist the result.

    The employee is saved first and a PersistenceError there aborts the
    whole save. Asset writes follow one by one; their failures are
    logged and reported in ``failed`` without undoing the employee.
    When the save renames the employee, the assets they keep move to
    the new name.
    """
    gateway = gateway or PersistenceGateway()
    result = ledger.commit(form_data)
    employee = gateway.save_employee(result["employee"], instance=instance)
    holder = employee.display_name

    assigned, failed = [], []
    for record in result["assigned_assets"]:
        try:
            if record.get("internal_id"):
                asset = gateway.update_asset(
                    record["internal_id"], {"assigned_to": holder}
                )
            else:
                asset = gateway.create_asset({**record, "assigned_to": holder})
        except PersistenceError as exc:
            logger.warning(
                "Could not assign asset %s to %s: %s",
                record.get("asset_id"),
                employee.employee_id,
                exc,
            )
            failed.append(
                {"asset_id": record.get("asset_id"), "error": str(exc)}
            )
            continue
        assigned.append(asset.to_record())

    handover = result["employee"].get("handover_details")
    completed = (
        handover is not None
        and handover.get("handover_status") == Handover.STATUS_COMPLETED
    )
    to_return = (
        list(handover.get("assets_to_return") or []) if completed else []
    )

    # Held assets follow a rename; the ones being returned are released
    # below instead.
    previous = ledger.employee_name
    if previous and not names_match(previous, holder):
        for record in ledger.assigned_assets:
            if record.get("internal_id") in to_return:
                continue
            try:
                gateway.update_asset(
                    record["internal_id"], {"assigned_to": holder}
                )
            except PersistenceError as exc:
                logger.warning(
                    "Could not move asset %s to %s: %s",
                    record.get("asset_id"),
                    holder,
                    exc,
                )
                failed.append(
                    {"asset_id": record.get("asset_id"), "error": str(exc)}
                )

    released = []
    for internal_id in to_return:
        asset = Asset.objects.filter(internal_id=internal_id).first()
        if asset is None:
            failed.append(
                {"asset_id": internal_id, "error": "Asset not found"}
            )
            continue
        if not asset.assigned_to:
            continue
        if not (
            names_match(asset.assigned_to, holder)
            or names_match(asset.assigned_to, previous)
        ):
            failed.append(
                {
                    "asset_id": asset.asset_id,
                    "error": f"Asset is held by {asset.assigned_to}",
                }
            )
            continue
        try:
            asset = gateway.update_asset(internal_id, {"assigned_to": ""})
        except PersistenceError as exc:
            logger.warning(
                "Could not release asset %s from %s: %s",
                asset.asset_id,
                employee.employee_id,
                exc,
            )
            failed.append({"asset_id": asset.asset_id, "error": str(exc)})
            continue
        released.append(asset.to_record())

    logger.info(
        "Saved ledger for %s: %d assigned, %d released, %d failed",
        employee.employee_id,
        len(assigned),
        len(released),
        len(failed),
    )
    return {
        "employee": employee,
        "assigned": assigned,
        "released": released,
        "failed": failed,
    }
