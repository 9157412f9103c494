"""Tests for the asset-assignment ledger.

The ledger works on plain records, so none of these tests touch the
database.
"""

import pytest

from employees.services.ledger import AssetLedger, to_iso_datetime
from employees.services.names import display_name, names_match


def make_asset(asset_id, internal_id, assigned_to=""):
    return {
        "internal_id": internal_id,
        "asset_id": asset_id,
        "name": f"Asset {asset_id}",
        "category": "Electronics",
        "status": "Active",
        "location": "HQ",
        "assigned_to": assigned_to,
        "assigned_date": None,
    }


@pytest.fixture
def directory():
    return [
        make_asset("AST1", "m1", "John Doe"),
        make_asset("AST2", "m2", "John Doe"),
        make_asset("AST3", "m3", "Sarah Johnson"),
        make_asset("AST4", "m4"),
        make_asset("AST5", "m5"),
    ]


@pytest.fixture
def john():
    return {
        "employee_id": "EMP001",
        "first_name": "John",
        "last_name": "Doe",
        "status": "Active",
        "handover_details": None,
    }


@pytest.fixture
def ledger(john, directory):
    return AssetLedger.initialize(john, directory)


RELIEVE_FORM = {
    "employee_id": "EMP001",
    "first_name": "John",
    "last_name": "Doe",
    "status": "Relieved",
}

# ============================================================
# INITIALIZE
# ============================================================


class TestInitialize:
    def test_assigned_assets_matched_by_name(self, ledger):
        assert [a["asset_id"] for a in ledger.assigned_assets] == [
            "AST1",
            "AST2",
        ]
        assert ledger.employee_name == "John Doe"

    def test_name_match_ignores_case_and_spacing(self, directory):
        employee = {"first_name": " JOHN ", "last_name": "doe "}
        ledger = AssetLedger.initialize(employee, directory)
        assert len(ledger.assigned_assets) == 2

    def test_new_employee_has_no_assets(self, directory):
        ledger = AssetLedger.initialize(None, directory)
        assert ledger.assigned_assets == []
        assert ledger.selected_handover_assets == []
        assert ledger.handover_data["handover_status"] == "Pending"

    def test_defaults_without_handover(self, ledger):
        assert ledger.selected_handover_assets == []
        assert ledger.handover_data == {
            "handover_date": None,
            "handover_to": "",
            "handover_reason": "",
            "notes": "",
            "handover_status": "Pending",
        }

    def test_stored_handover_translated_to_asset_ids(self, john, directory):
        john["handover_details"] = {
            "handover_date": "2024-06-01T00:00:00+00:00",
            "handover_to": "Sarah Johnson",
            "handover_reason": "Resignation",
            "assets_to_return": ["m2", "m1"],
            "handover_status": "In Progress",
            "notes": "",
            "completed_at": None,
        }
        ledger = AssetLedger.initialize(john, directory)
        assert ledger.selected_handover_assets == ["AST2", "AST1"]
        assert ledger.handover_data["handover_to"] == "Sarah Johnson"
        assert ledger.handover_data["handover_status"] == "In Progress"
        assert "completed_at" not in ledger.handover_data

    def test_accepts_directory_object(self, john, directory):
        class Directory:
            def list(self):
                return directory

        ledger = AssetLedger.initialize(john, Directory())
        assert len(ledger.assigned_assets) == 2

    def test_missing_reference_falls_back_to_raw_id(self, john, directory):
        john["status"] = "Relieved"
        john["handover_details"] = {"assets_to_return": ["gone"]}
        ledger = AssetLedger.initialize(john, directory)
        assert ledger.selected_handover_assets == ["gone"]


# ============================================================
# HANDOVER SELECTION
# ============================================================


class TestToggleHandover:
    @pytest.mark.parametrize("asset_id", ["AST1", "AST2", "UNKNOWN"])
    def test_idempotent(self, ledger, asset_id):
        ledger.toggle_handover_asset(asset_id, True)
        once = list(ledger.selected_handover_assets)
        ledger.toggle_handover_asset(asset_id, True)
        assert ledger.selected_handover_assets == once == [asset_id]

    def test_deselect(self, ledger):
        ledger.toggle_handover_asset("AST1")
        ledger.toggle_handover_asset("AST1", False)
        ledger.toggle_handover_asset("AST1", False)
        assert ledger.selected_handover_assets == []

    def test_does_not_touch_assigned(self, ledger):
        before = list(ledger.assigned_assets)
        ledger.toggle_handover_asset("AST1")
        assert ledger.assigned_assets == before


class TestPartition:
    @pytest.mark.parametrize(
        "selection",
        [[], ["AST1"], ["AST2"], ["AST1", "AST2"], ["AST1", "AST9"]],
    )
    def test_remaining_and_returning_partition_assigned(
        self, ledger, selection
    ):
        for asset_id in selection:
            ledger.toggle_handover_asset(asset_id)
        remaining = ledger.remaining_assets()
        returning = ledger.returning_assets()

        remaining_ids = {a["asset_id"] for a in remaining}
        returning_ids = {a["asset_id"] for a in returning}
        assigned_ids = {a["asset_id"] for a in ledger.assigned_assets}
        assert remaining_ids | returning_ids == assigned_ids
        assert not remaining_ids & returning_ids
        assert len(remaining) + len(returning) == len(ledger.assigned_assets)

    def test_recomputed_after_each_toggle(self, ledger):
        ledger.toggle_handover_asset("AST1")
        assert [a["asset_id"] for a in ledger.remaining_assets()] == ["AST2"]
        ledger.toggle_handover_asset("AST1", False)
        assert len(ledger.remaining_assets()) == 2


# ============================================================
# NEW ASSIGNMENTS
# ============================================================


class TestNewAssignments:
    def test_available_only_unassigned(self, directory):
        ids = [a["asset_id"] for a in AssetLedger.available_assets(directory)]
        assert ids == ["AST4", "AST5"]

    def test_assign_is_a_set(self, ledger, directory):
        assert ledger.assign_new_asset(directory[3]) is True
        assert ledger.assign_new_asset(directory[3]) is False
        assert [a["asset_id"] for a in ledger.selected_assets] == ["AST4"]

    def test_assign_held_by_someone_else_rejected(self, ledger, directory):
        with pytest.raises(ValueError):
            ledger.assign_new_asset(directory[2])
        assert ledger.selected_assets == []

    def test_assign_already_held_rejected(self, ledger, directory):
        with pytest.raises(ValueError):
            ledger.assign_new_asset(directory[0])

    def test_unassign(self, ledger, directory):
        ledger.assign_new_asset(directory[3])
        assert ledger.unassign_new_asset("AST4") is True
        assert ledger.unassign_new_asset("AST4") is False
        assert ledger.selected_assets == []

    def test_add_new_asset(self, ledger):
        record = ledger.add_new_asset(
            {"asset_id": "new-1", "name": "Headset", "category": "Other"}
        )
        assert record["asset_id"] == "NEW-1"
        assert record["internal_id"] is None
        assert ledger.selected_assets == [record]

    def test_add_new_asset_generates_id(self, ledger):
        record = ledger.add_new_asset({"name": "Headset"})
        assert record["asset_id"].startswith("AST")

    def test_add_new_asset_duplicate_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.add_new_asset({"asset_id": "AST4", "name": "Dup"})


# ============================================================
# HANDOVER DETAILS
# ============================================================


class TestUpdateHandover:
    def test_update(self, ledger):
        data = ledger.update_handover(
            handover_to="Sarah Johnson", handover_reason="Transfer"
        )
        assert data["handover_to"] == "Sarah Johnson"
        assert data["handover_status"] == "Pending"

    def test_date_stored_as_iso(self, ledger):
        ledger.update_handover(handover_date="2024-06-01")
        assert ledger.handover_data["handover_date"] == (
            "2024-06-01T00:00:00+00:00"
        )

    def test_unknown_field_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.update_handover(colour="red")


# ============================================================
# COMMIT
# ============================================================


class TestCommit:
    @pytest.mark.parametrize("status", ["Active", "On Leave"])
    def test_no_handover_when_not_relieving(self, ledger, status):
        ledger.toggle_handover_asset("AST1")
        ledger.update_handover(handover_to="Sarah Johnson")
        patch = ledger.commit(
            {**RELIEVE_FORM, "status": status, "handover_details": {"x": 1}}
        )
        assert "handover_details" not in patch["employee"]

    def test_relieve_scenario(self, john):
        directory = [
            make_asset("AST1", "m1", "John Doe"),
            make_asset("AST2", "m2", "John Doe"),
        ]
        ledger = AssetLedger.initialize(john, directory)
        ledger.toggle_handover_asset("AST1")
        ledger.update_handover(
            handover_date="2024-06-01",
            handover_to="Sarah Johnson",
            handover_reason="Resignation",
        )

        assert [a["asset_id"] for a in ledger.remaining_assets()] == ["AST2"]
        patch = ledger.commit(RELIEVE_FORM)
        details = patch["employee"]["handover_details"]
        assert details["assets_to_return"] == ["m1"]
        assert details["handover_date"] == "2024-06-01T00:00:00+00:00"
        assert details["handover_reason"] == "Resignation"

    def test_missing_reference_round_trips(self, john, directory):
        john["status"] = "Relieved"
        john["handover_details"] = {
            "assets_to_return": ["m1"],
            "handover_status": "Pending",
        }
        without_m1 = [a for a in directory if a["internal_id"] != "m1"]
        ledger = AssetLedger.initialize(john, without_m1)
        assert ledger.selected_handover_assets == ["m1"]

        patch = ledger.commit(RELIEVE_FORM)
        assert patch["employee"]["handover_details"]["assets_to_return"] == [
            "m1"
        ]

    def test_terminated_also_relieves(self, ledger):
        ledger.toggle_handover_asset("AST2")
        patch = ledger.commit({**RELIEVE_FORM, "status": "Terminated"})
        assert patch["employee"]["handover_details"]["assets_to_return"] == [
            "m2"
        ]

    def test_new_assets_in_patch(self, ledger, directory):
        ledger.assign_new_asset(directory[4])
        patch = ledger.commit({**RELIEVE_FORM, "status": "Active"})
        assert [a["asset_id"] for a in patch["assigned_assets"]] == ["AST5"]

    def test_commit_does_not_mutate(self, ledger):
        ledger.toggle_handover_asset("AST1")
        before = ledger.to_dict()
        ledger.commit(RELIEVE_FORM)
        assert ledger.to_dict() == before


class TestSessionStorage:
    def test_round_trip(self, ledger, directory):
        ledger.toggle_handover_asset("AST1")
        ledger.assign_new_asset(directory[3])
        ledger.update_handover(handover_to="Sarah Johnson")
        restored = AssetLedger.from_dict(ledger.to_dict())
        assert restored.to_dict() == ledger.to_dict()
        assert restored.remaining_assets() == ledger.remaining_assets()


# ============================================================
# HELPERS
# ============================================================


class TestNames:
    def test_display_name_prefers_full_name(self):
        record = {"full_name": " Johnny  D ", "first_name": "John"}
        assert display_name(record) == "Johnny D"

    def test_display_name_from_parts(self):
        assert display_name({"first_name": "John", "last_name": ""}) == "John"

    def test_empty_names_never_match(self):
        assert not names_match("", "")
        assert names_match("john doe", "John  Doe")


class TestIsoDates:
    def test_none(self):
        assert to_iso_datetime(None) is None
        assert to_iso_datetime("") is None

    def test_datetime_string_kept(self):
        assert to_iso_datetime("2024-06-01T10:30:00+00:00") == (
            "2024-06-01T10:30:00+00:00"
        )

    def test_invalid(self):
        with pytest.raises(ValueError):
            to_iso_datetime("next tuesday")
