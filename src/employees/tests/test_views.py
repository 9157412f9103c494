"""Tests for the employee JSON API and the asset edit session."""

import json
from unittest import mock

from django.urls import reverse

from assets.factories import AssetFactory
from assets.models import Asset
from employees.factories import EmployeeFactory
from employees.models import Employee, Handover
from employees.services.gateway import PersistenceError
from employees.services.sessions import session_key


def put_json(client, url, data):
    return client.put(url, json.dumps(data), content_type="application/json")


def post_json(client, url, data=None):
    return client.post(
        url, json.dumps(data or {}), content_type="application/json"
    )


def employee_payload(**overrides):
    data = {
        "employee_id": "EMP100",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "Ada@Example.com",
        "phone": "5550001111",
        "department": "Engineering",
        "position": "Developer",
        "hire_date": "2024-02-01",
    }
    data.update(overrides)
    return data


def url_for(name, employee=None):
    if employee is None:
        return reverse(f"employees:{name}")
    return reverse(f"employees:{name}", kwargs={"pk": employee.pk})


# ============================================================
# LIST / CREATE
# ============================================================


class TestEmployeeList:
    def test_requires_login(self, client, db):
        response = client.get(reverse("employees:employee_list"))
        assert response.status_code == 302

    def test_lists_active(self, client_logged_in, employee, other_employee):
        EmployeeFactory(employee_id="GONE", is_active=False)
        response = client_logged_in.get(reverse("employees:employee_list"))
        body = response.json()
        assert response.status_code == 200
        assert {e["employee_id"] for e in body["data"]} == {
            "EMP001",
            "EMP002",
        }
        assert body["pagination"]["total_items"] == 2

    def test_search(self, client_logged_in, employee, other_employee):
        response = client_logged_in.get(
            reverse("employees:employee_list"), {"search": "sarah"}
        )
        data = response.json()["data"]
        assert [e["employee_id"] for e in data] == ["EMP002"]

    def test_status_filter(self, client_logged_in, employee, other_employee):
        other_employee.status = Employee.STATUS_ON_LEAVE
        other_employee.save()
        response = client_logged_in.get(
            reverse("employees:employee_list"), {"status": "On Leave"}
        )
        data = response.json()["data"]
        assert [e["employee_id"] for e in data] == ["EMP002"]


class TestEmployeeCreate:
    def test_create(self, client_logged_in):
        response = post_json(
            client_logged_in,
            reverse("employees:employee_list"),
            employee_payload(),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Employee created successfully"
        assert body["data"]["email"] == "ada@example.com"
        assert body["data"]["status"] == "Active"
        assert body["data"]["assigned_assets"] == []

    def test_validation_errors(self, client_logged_in):
        response = post_json(
            client_logged_in,
            reverse("employees:employee_list"),
            employee_payload(employee_id="emp-1", phone="123"),
        )
        assert response.status_code == 400
        errors = response.json()["errors"]
        assert "employee_id" in errors
        assert errors["phone"] == "Phone number must be exactly 10 digits"
        assert not Employee.objects.exists()

    def test_duplicate_email(self, client_logged_in, employee):
        response = post_json(
            client_logged_in,
            reverse("employees:employee_list"),
            employee_payload(email="JOHN.DOE@example.com"),
        )
        assert response.status_code == 400
        assert response.json()["errors"]["email"] == "Email already exists"

    def test_invalid_json(self, client_logged_in):
        response = client_logged_in.post(
            reverse("employees:employee_list"),
            "{nope",
            content_type="application/json",
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid JSON"


# ============================================================
# DETAIL / UPDATE / DELETE
# ============================================================


class TestEmployeeDetail:
    def test_get_includes_assets(self, client_logged_in, employee, held_asset):
        response = client_logged_in.get(url_for("employee_detail", employee))
        data = response.json()["data"]
        assert data["full_name"] == "John Doe"
        assert [a["asset_id"] for a in data["assigned_assets"]] == ["AST2"]

    def test_not_found(self, client_logged_in):
        response = client_logged_in.get(
            reverse("employees:employee_detail", kwargs={"pk": 999})
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Employee not found"

    def test_partial_update(self, client_logged_in, employee):
        response = put_json(
            client_logged_in,
            url_for("employee_detail", employee),
            {"position": "Manager"},
        )
        assert response.status_code == 200
        employee.refresh_from_db()
        assert employee.position == "Manager"
        assert employee.first_name == "John"

    def test_update_ignores_handover_details(self, client_logged_in, employee):
        put_json(
            client_logged_in,
            url_for("employee_detail", employee),
            {"notes": "x", "handover_details": {"handover_to": "Someone"}},
        )
        assert not Handover.objects.filter(employee=employee).exists()

    def test_delete_refused_while_holding(
        self, client_logged_in, employee, held_asset
    ):
        response = client_logged_in.delete(
            url_for("employee_detail", employee)
        )
        assert response.status_code == 400
        assert response.json()["message"] == (
            "Cannot delete employee. They have 1 assigned assets."
        )
        employee.refresh_from_db()
        assert employee.is_active

    def test_delete_is_soft(self, client_logged_in, employee):
        response = client_logged_in.delete(
            url_for("employee_detail", employee)
        )
        assert response.status_code == 200
        employee.refresh_from_db()
        assert not employee.is_active
        assert employee.status == Employee.STATUS_TERMINATED


class TestEmployeeStatus:
    def test_on_leave(self, client_logged_in, employee):
        response = post_json(
            client_logged_in,
            url_for("employee_status", employee),
            {"status": "On Leave"},
        )
        assert response.status_code == 200
        employee.refresh_from_db()
        assert employee.status == "On Leave"
        assert employee.is_active

    def test_terminated_deactivates(self, client_logged_in, employee):
        post_json(
            client_logged_in,
            url_for("employee_status", employee),
            {"status": "Terminated"},
        )
        employee.refresh_from_db()
        assert not employee.is_active

    def test_unknown_status(self, client_logged_in, employee):
        response = post_json(
            client_logged_in,
            url_for("employee_status", employee),
            {"status": "Sacked"},
        )
        assert response.status_code == 400
        assert "status" in response.json()["errors"]


class TestEmployeeStats:
    def test_counts(self, client_logged_in, employee, other_employee):
        other_employee.status = Employee.STATUS_RELIEVED
        other_employee.save()
        response = client_logged_in.get(reverse("employees:employee_stats"))
        data = response.json()["data"]
        assert data["total"] == 2
        assert data["active"] == 1
        assert data["relieved"] == 1
        assert data["by_department"] == [{"department": "IT", "count": 2}]


class TestHandoverCandidates:
    def test_excludes_employee(
        self, client_logged_in, employee, other_employee
    ):
        EmployeeFactory(employee_id="EMP003", status="On Leave")
        response = client_logged_in.get(
            url_for("handover_candidates", employee)
        )
        data = response.json()["data"]
        assert [c["employee_id"] for c in data] == ["EMP002"]
        assert data[0]["name"] == "Sarah Johnson"


# ============================================================
# EDIT SESSION
# ============================================================


class TestEditSession:
    def test_open_existing(
        self, client_logged_in, employee, held_asset, asset
    ):
        response = post_json(client_logged_in, url_for("session", employee))
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["employee_name"] == "John Doe"
        assert [a["asset_id"] for a in data["assigned_assets"]] == ["AST2"]
        assert data["selected_handover_assets"] == []
        assert session_key(employee.pk) in client_logged_in.session

    def test_open_restores_handover_selection(
        self, client_logged_in, employee, held_asset
    ):
        Handover.objects.create(
            employee=employee,
            handover_to="Sarah Johnson",
            assets_to_return=[held_asset.internal_id],
        )
        response = post_json(client_logged_in, url_for("session", employee))
        data = response.json()["data"]
        assert data["selected_handover_assets"] == ["AST2"]
        assert data["handover_data"]["handover_to"] == "Sarah Johnson"

    def test_get_without_session(self, client_logged_in, employee):
        response = client_logged_in.get(url_for("session", employee))
        assert response.status_code == 404

    def test_discard(self, client_logged_in, employee):
        url = url_for("session", employee)
        post_json(client_logged_in, url)
        response = client_logged_in.delete(url)
        assert response.status_code == 200
        assert session_key(employee.pk) not in client_logged_in.session

    def test_toggle_handover(self, client_logged_in, employee, held_asset):
        post_json(client_logged_in, url_for("session", employee))
        url = url_for("session_handover", employee)

        data = post_json(client_logged_in, url, {"asset_id": "AST2"}).json()
        assert data["data"]["remaining_assets"] == []
        assert [a["asset_id"] for a in data["data"]["returning_assets"]] == [
            "AST2"
        ]

        data = post_json(
            client_logged_in, url, {"asset_id": "AST2", "selected": False}
        ).json()
        assert data["data"]["selected_handover_assets"] == []

    def test_toggle_handover_normalises_asset_id(
        self, client_logged_in, employee, held_asset
    ):
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_handover", employee),
            {"asset_id": " ast2 "},
        )
        data = response.json()["data"]
        assert data["selected_handover_assets"] == ["AST2"]
        assert data["remaining_assets"] == []

    def test_handover_details_validation(self, client_logged_in, employee):
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_handover_details", employee),
            {"handover_reason": "Vacation"},
        )
        assert response.status_code == 400
        assert "handover_reason" in response.json()["errors"]

    def test_handover_details_partial(self, client_logged_in, employee):
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_handover_details", employee),
            {"handover_date": "2024-06-01", "handover_to": "Sarah Johnson"},
        )
        assert response.status_code == 200
        handover = response.json()["data"]["handover_data"]
        assert handover["handover_date"] == "2024-06-01T00:00:00+00:00"
        assert handover["handover_to"] == "Sarah Johnson"
        assert handover["handover_status"] == "Pending"

    def test_available_excludes_held_and_picked(
        self, client_logged_in, employee, held_asset, asset, free_asset
    ):
        post_json(client_logged_in, url_for("session", employee))
        post_json(
            client_logged_in,
            url_for("session_assign", employee),
            {"asset_id": "AST1"},
        )
        response = client_logged_in.get(
            url_for("session_available", employee)
        )
        assert [a["asset_id"] for a in response.json()["data"]] == ["AST3"]

    def test_assign_held_asset_conflicts(
        self, client_logged_in, employee, other_employee
    ):
        AssetFactory(asset_id="AST9", assigned_to="Sarah Johnson")
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_assign", employee),
            {"asset_id": "AST9"},
        )
        assert response.status_code == 409
        assert "Sarah Johnson" in response.json()["message"]

    def test_assign_unknown_asset(self, client_logged_in, employee):
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_assign", employee),
            {"asset_id": "NOPE"},
        )
        assert response.status_code == 404

    def test_unassign(self, client_logged_in, employee, free_asset):
        post_json(client_logged_in, url_for("session", employee))
        post_json(
            client_logged_in,
            url_for("session_assign", employee),
            {"asset_id": "AST3"},
        )
        response = post_json(
            client_logged_in,
            url_for("session_unassign", employee),
            {"asset_id": "ast3"},
        )
        assert response.json()["data"]["selected_assets"] == []

    def test_new_asset_duplicate_id(self, client_logged_in, employee, asset):
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_new_asset", employee),
            {
                "asset_id": "AST1",
                "name": "Copy",
                "category": "Other",
                "status": "Active",
            },
        )
        assert response.status_code == 400
        assert response.json()["errors"]["asset_id"]


class TestSessionCommit:
    def relieve(self, client, employee):
        post_json(client, url_for("session", employee))
        post_json(
            client,
            url_for("session_handover", employee),
            {"asset_id": "AST2"},
        )
        post_json(
            client,
            url_for("session_handover_details", employee),
            {
                "handover_date": "2024-06-01",
                "handover_to": "Sarah Johnson",
                "handover_reason": "Resignation",
                "handover_status": "Completed",
            },
        )

    def test_relieve_releases_assets(
        self, client_logged_in, employee, held_asset, asset
    ):
        self.relieve(client_logged_in, employee)
        response = post_json(
            client_logged_in,
            url_for("session_commit", employee),
            {"status": "Relieved"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Employee updated successfully"
        assert [a["asset_id"] for a in body["data"]["released"]] == ["AST2"]
        assert body["data"]["failed"] == []
        details = body["data"]["employee"]["handover_details"]
        assert details["assets_to_return"] == [held_asset.internal_id]
        assert details["handover_status"] == "Completed"

        held_asset.refresh_from_db()
        assert held_asset.assigned_to == ""
        employee.refresh_from_db()
        assert employee.status == "Relieved"
        assert session_key(employee.pk) not in client_logged_in.session

    def test_relieve_requires_handover_details(
        self, client_logged_in, employee, held_asset
    ):
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_commit", employee),
            {"status": "Relieved"},
        )
        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors["handover_to"] == "Handover to is required"
        assert session_key(employee.pk) in client_logged_in.session
        employee.refresh_from_db()
        assert employee.status == "Active"

    def test_invalid_employee_keeps_session(self, client_logged_in, employee):
        post_json(client_logged_in, url_for("session", employee))
        response = post_json(
            client_logged_in,
            url_for("session_commit", employee),
            {"email": "broken"},
        )
        assert response.status_code == 400
        assert session_key(employee.pk) in client_logged_in.session

    def test_persistence_failure_keeps_session(
        self, client_logged_in, employee
    ):
        post_json(client_logged_in, url_for("session", employee))
        with mock.patch(
            "employees.views.save_ledger",
            side_effect=PersistenceError("connection refused"),
        ):
            response = post_json(
                client_logged_in,
                url_for("session_commit", employee),
                {"notes": "retry me"},
            )
        assert response.status_code == 503
        assert session_key(employee.pk) in client_logged_in.session

    def test_new_employee_with_new_asset(self, client_logged_in, free_asset):
        post_json(client_logged_in, url_for("session"))
        post_json(
            client_logged_in,
            url_for("session_assign"),
            {"asset_id": "AST3"},
        )
        response = post_json(
            client_logged_in,
            url_for("session_new_asset"),
            {"name": "Headset", "category": "Electronics", "status": "Active"},
        )
        assert response.status_code == 201
        new_id = response.json()["data"]["selected_assets"][-1]["asset_id"]

        response = post_json(
            client_logged_in, url_for("session_commit"), employee_payload()
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Employee created successfully"
        saved = body["data"]["employee"]
        held = {a["asset_id"] for a in saved["assigned_assets"]}
        assert held == {"AST3", new_id}
        assert Asset.objects.get(asset_id=new_id).assigned_to == "Ada Lovelace"
        assert session_key(None) not in client_logged_in.session
