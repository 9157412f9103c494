"""Asset-assignment ledger for a single employee edit session.

The ledger reconciles three views of an employee's assets while they are
being edited: what they currently hold, what they will return as part of
a handover, and what is newly being assigned to them. It works on plain
dict records (see ``Asset.to_record``) and never touches the database;
``commit`` produces the patch that the persistence gateway applies.

Handover selections are keyed by the human ``asset_id`` while the stored
``Handover.assets_to_return`` holds ``internal_id`` values. Translation in
both directions goes through ``assets.services.identifiers`` and is
lenient: an id that cannot be resolved is carried through unchanged.
"""

from datetime import date, datetime, time, timezone

from django.utils.dateparse import parse_date, parse_datetime

from assets.models import generate_asset_id
from assets.services.identifiers import to_display_ids, to_storage_ids

from .names import display_name, names_match

RELIEVING_STATUSES = ("Relieved", "Terminated")

HANDOVER_FIELDS = (
    "handover_date",
    "handover_to",
    "handover_reason",
    "notes",
    "handover_status",
)


def default_handover_data():
    return {
        "handover_date": None,
        "handover_to": "",
        "handover_reason": "",
        "notes": "",
        "handover_status": "Pending",
    }


def to_iso_datetime(value):
    """ISO-8601 timestamp for a handover date; dates become UTC midnight.

    Raises ValueError for a string that is neither a date nor a datetime.
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, date):
        midnight = datetime.combine(value, time.min, tzinfo=timezone.utc)
        return midnight.isoformat()
    text = str(value).strip()
    parsed = parse_date(text) or parse_datetime(text)
    if parsed is None:
        raise ValueError(f"Invalid handover date: {value!r}")
    return to_iso_datetime(parsed)


def _records(directory):
    if directory is None:
        return []
    if hasattr(directory, "list"):
        return directory.list()
    return list(directory)


def _unique(values):
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class AssetLedger:
    """Working state of one employee's assets during an edit."""

    def __init__(
        self,
        employee_name="",
        assigned_assets=None,
        selected_handover_assets=None,
        selected_assets=None,
        handover_data=None,
        directory=None,
    ):
        self.employee_name = employee_name
        self.assigned_assets = list(assigned_assets or [])
        self.selected_handover_assets = list(selected_handover_assets or [])
        self.selected_assets = list(selected_assets or [])
        self.handover_data = default_handover_data()
        self.handover_data.update(handover_data or {})
        # Snapshot the session was opened against; commit falls back to
        # it so ids of assets no longer held still resolve.
        self.directory = list(directory or [])

    @classmethod
    def initialize(cls, employee, asset_directory):
        """Open a session for ``employee`` (``None`` for a new one).

        ``asset_directory`` is either a list of asset records or an
        object with a ``list()`` method returning them.
        """
        records = _records(asset_directory)
        name = display_name(employee)
        assigned = (
            [r for r in records if names_match(r.get("assigned_to"), name)]
            if name
            else []
        )

        handover = (employee or {}).get("handover_details") or None
        selected = []
        handover_data = {}
        if handover:
            selected = _unique(
                to_display_ids(handover.get("assets_to_return"), records)
            )
            handover_data = {
                key: handover[key]
                for key in HANDOVER_FIELDS
                if key in handover
            }

        return cls(
            employee_name=name,
            assigned_assets=assigned,
            selected_handover_assets=selected,
            handover_data=handover_data,
            directory=records,
        )

    # --- Handover selection ---

    def toggle_handover_asset(self, asset_id, selected=True):
        if selected:
            if asset_id not in self.selected_handover_assets:
                self.selected_handover_assets.append(asset_id)
        elif asset_id in self.selected_handover_assets:
            self.selected_handover_assets.remove(asset_id)
        return list(self.selected_handover_assets)

    def remaining_assets(self):
        """Held assets the employee keeps after the handover."""
        chosen = set(self.selected_handover_assets)
        return [a for a in self.assigned_assets if a["asset_id"] not in chosen]

    def returning_assets(self):
        chosen = set(self.selected_handover_assets)
        return [a for a in self.assigned_assets if a["asset_id"] in chosen]

    # --- New assignments ---

    @staticmethod
    def available_assets(directory):
        return [r for r in _records(directory) if not r.get("assigned_to")]

    def _is_selected(self, asset_id):
        return any(a["asset_id"] == asset_id for a in self.selected_assets)

    def assign_new_asset(self, asset):
        """Add ``asset`` to the new assignments.

        Returns False when it was already selected. Raises ValueError
        for an asset somebody already holds.
        """
        asset_id = asset["asset_id"]
        if any(a["asset_id"] == asset_id for a in self.assigned_assets):
            raise ValueError(
                f"Asset {asset_id} is already assigned to this employee."
            )
        if asset.get("assigned_to"):
            raise ValueError(
                f"Asset {asset_id} is already assigned to "
                f"{asset['assigned_to']}."
            )
        if self._is_selected(asset_id):
            return False
        self.selected_assets.append(dict(asset))
        return True

    def unassign_new_asset(self, asset_id):
        before = len(self.selected_assets)
        self.selected_assets = [
            a for a in self.selected_assets if a["asset_id"] != asset_id
        ]
        return len(self.selected_assets) != before

    def add_new_asset(self, data):
        """Queue an asset that does not exist yet; created on save."""
        asset_id = (data.get("asset_id") or "").strip().upper()
        asset_id = asset_id or generate_asset_id()
        if self._is_selected(asset_id) or any(
            r.get("asset_id") == asset_id for r in self.directory
        ):
            raise ValueError("Asset ID already exists.")
        record = {
            "internal_id": None,
            "asset_id": asset_id,
            "name": data.get("name") or "Unnamed Asset",
            "category": data.get("category") or "Other",
            "status": data.get("status") or "Active",
            "location": data.get("location") or "",
            "description": data.get("description") or "",
            "assigned_to": "",
            "assigned_date": None,
        }
        self.selected_assets.append(record)
        return record

    # --- Handover details ---

    def update_handover(self, **fields):
        unknown = set(fields) - set(HANDOVER_FIELDS)
        if unknown:
            raise ValueError(
                f"Unknown handover field(s): {', '.join(sorted(unknown))}."
            )
        if "handover_date" in fields:
            fields["handover_date"] = to_iso_datetime(fields["handover_date"])
        self.handover_data.update(fields)
        return dict(self.handover_data)

    # --- Commit ---

    def commit(self, employee_form_data):
        """Build the save patch. Does not mutate the ledger.

        ``handover_details`` is attached only when the employee status is
        one that relieves them of their assets.
        """
        patch = dict(employee_form_data)
        patch.pop("handover_details", None)

        if patch.get("status") in RELIEVING_STATUSES:
            final_assets = self.assigned_assets + self.selected_assets
            patch["handover_details"] = {
                **self.handover_data,
                "assets_to_return": to_storage_ids(
                    self.selected_handover_assets,
                    final_assets,
                    self.directory,
                ),
                "handover_date": to_iso_datetime(
                    self.handover_data.get("handover_date")
                ),
            }

        return {
            "employee": patch,
            "assigned_assets": [dict(a) for a in self.selected_assets],
        }

    # --- Session storage ---

    def to_dict(self):
        return {
            "employee_name": self.employee_name,
            "assigned_assets": [dict(a) for a in self.assigned_assets],
            "selected_handover_assets": list(self.selected_handover_assets),
            "selected_assets": [dict(a) for a in self.selected_assets],
            "handover_data": dict(self.handover_data),
            "directory": [dict(r) for r in self.directory],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(**data)
