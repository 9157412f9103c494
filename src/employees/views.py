"""JSON API views for the employees app and the asset edit session."""

import logging

from django_ratelimit.decorators import ratelimit

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.db.models import Count, Q

from assets import api
from assets.forms import QuickAssetForm
from assets.services.directory import AssetDirectory

from .forms import EmployeeForm, HandoverForm
from .models import Employee
from .services import sessions
from .services.directory import EmployeeDirectory
from .services.gateway import PersistenceError, save_ledger
from .services.ledger import AssetLedger

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = (
    "employee_id",
    "first_name",
    "last_name",
    "email",
    "department",
    "position",
    "hire_date",
    "status",
    "created_at",
)


def serialize_employee(employee, with_assets=False):
    data = employee.to_record()
    data["created_at"] = employee.created_at.isoformat()
    data["updated_at"] = employee.updated_at.isoformat()
    if with_assets:
        data["assigned_assets"] = [
            asset.to_record() for asset in employee.assigned_assets
        ]
    return data


def serialize_ledger(ledger):
    return {
        "employee_name": ledger.employee_name,
        "assigned_assets": ledger.assigned_assets,
        "remaining_assets": ledger.remaining_assets(),
        "returning_assets": ledger.returning_assets(),
        "selected_handover_assets": ledger.selected_handover_assets,
        "selected_assets": ledger.selected_assets,
        "handover_data": ledger.handover_data,
    }


def _get_employee(pk):
    return Employee.objects.select_related("handover").filter(pk=pk).first()


def _form_data(employee, data):
    """Current field values overlaid with the request body."""
    merged = {}
    if employee is not None:
        merged = {
            field: getattr(employee, field)
            for field in EmployeeForm.Meta.fields
        }
    merged.update(data)
    return merged


# ============================================================
# Employees
# ============================================================


@login_required
@ratelimit(
    key="user", rate=settings.API_RATE_LIMIT, method="GET", block=True
)
def employee_collection(request):
    """GET: list with filters and pagination. POST: create."""
    if request.method == "POST":
        return _employee_create(request)
    if request.method != "GET":
        return api.method_not_allowed(["GET", "POST"])

    queryset = Employee.objects.select_related("handover")
    if request.GET.get("include_inactive") != "true":
        queryset = queryset.filter(is_active=True)
    status = request.GET.get("status")
    if status:
        queryset = queryset.filter(status=status)
    department = request.GET.get("department")
    if department:
        queryset = queryset.filter(department=department)

    search = request.GET.get("search", "").strip()
    if search:
        queryset = queryset.filter(
            Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(employee_id__icontains=search)
            | Q(email__icontains=search)
            | Q(department__icontains=search)
            | Q(position__icontains=search)
        )

    queryset = queryset.order_by(
        api.ordering(request, SORTABLE_FIELDS, "-created_at"), "pk"
    )
    items, pagination = api.paginate(
        request, queryset, serialize_employee
    )
    return api.success(items, pagination=pagination)


def _employee_create(request):
    try:
        data = api.parse_json_body(request)
    except api.BadRequest as exc:
        return api.error(str(exc))
    form = EmployeeForm(data)
    if not form.is_valid():
        return api.error("Validation failed", errors=api.form_errors(form))
    employee = form.save()
    logger.info("Created employee %s", employee.employee_id)
    return api.success(
        serialize_employee(employee, with_assets=True),
        status=201,
        message="Employee created successfully",
    )


@login_required
def employee_detail(request, pk):
    """GET detail, PUT update, DELETE soft delete.

    Handover details are edited through the edit session, not here.
    """
    employee = _get_employee(pk)
    if employee is None:
        return api.error("Employee not found", status=404)

    if request.method == "GET":
        return api.success(serialize_employee(employee, with_assets=True))

    if request.method == "PUT":
        try:
            data = api.parse_json_body(request)
        except api.BadRequest as exc:
            return api.error(str(exc))
        data.pop("handover_details", None)
        form = EmployeeForm(_form_data(employee, data), instance=employee)
        if not form.is_valid():
            return api.error(
                "Validation failed", errors=api.form_errors(form)
            )
        employee = form.save()
        logger.info("Updated employee %s", employee.employee_id)
        return api.success(
            serialize_employee(employee, with_assets=True),
            message="Employee updated successfully",
        )

    if request.method == "DELETE":
        held = employee.assigned_assets.count()
        if held:
            return api.error(
                f"Cannot delete employee. They have {held} assigned assets."
            )
        employee.is_active = False
        employee.status = Employee.STATUS_TERMINATED
        employee.save(update_fields=["is_active", "status", "updated_at"])
        logger.info("Deactivated employee %s", employee.employee_id)
        return api.success(None, message="Employee deleted successfully")

    return api.method_not_allowed(["GET", "PUT", "DELETE"])


@login_required
def employee_status(request, pk):
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    employee = _get_employee(pk)
    if employee is None:
        return api.error("Employee not found", status=404)
    try:
        data = api.parse_json_body(request)
    except api.BadRequest as exc:
        return api.error(str(exc))

    status = (data.get("status") or "").strip()
    if not status:
        return api.error("Status is required")
    if status not in dict(Employee.STATUS_CHOICES):
        return api.error(
            "Validation failed",
            errors={"status": f"{status} is not a valid status."},
        )
    employee.status = status
    if status == Employee.STATUS_TERMINATED:
        employee.is_active = False
    employee.save(update_fields=["status", "is_active", "updated_at"])
    return api.success(
        serialize_employee(employee),
        message="Employee status updated successfully",
    )


def employee_stats_data():
    active = Employee.objects.filter(is_active=True)
    return {
        "total": active.count(),
        "active": active.filter(status=Employee.STATUS_ACTIVE).count(),
        "on_leave": active.filter(status=Employee.STATUS_ON_LEAVE).count(),
        "relieved": active.filter(status=Employee.STATUS_RELIEVED).count(),
        "terminated": active.filter(
            status=Employee.STATUS_TERMINATED
        ).count(),
        "by_department": list(
            active.values("department")
            .annotate(count=Count("id"))
            .order_by("-count", "department")
        ),
    }


@login_required
def employee_stats(request):
    return api.success(employee_stats_data())


@login_required
def handover_candidates(request, pk):
    employee = _get_employee(pk)
    if employee is None:
        return api.error("Employee not found", status=404)
    return api.success(
        EmployeeDirectory().handover_candidates(exclude=employee)
    )


# ============================================================
# Edit session
# ============================================================


def _session_context(request, pk):
    """Return ``(employee, ledger, error_response)`` for a session view."""
    employee = None
    if pk is not None:
        employee = _get_employee(pk)
        if employee is None:
            return None, None, api.error("Employee not found", status=404)
    ledger = sessions.load_ledger(request, pk)
    if ledger is None:
        return (
            employee,
            None,
            api.error("No edit session is open", status=404),
        )
    return employee, ledger, None


def _session_body(request):
    """Return ``(data, error_response)``."""
    try:
        return api.parse_json_body(request), None
    except api.BadRequest as exc:
        return None, api.error(str(exc))


@login_required
def edit_session(request, pk=None):
    """POST opens (or reopens) a session, GET shows it, DELETE drops it."""
    if request.method == "POST":
        employee = None
        if pk is not None:
            employee = _get_employee(pk)
            if employee is None:
                return api.error("Employee not found", status=404)
        ledger = AssetLedger.initialize(
            employee.to_record() if employee else None, AssetDirectory()
        )
        sessions.store_ledger(request, ledger, pk)
        return api.success(serialize_ledger(ledger), status=201)

    if request.method == "GET":
        _, ledger, error = _session_context(request, pk)
        if error:
            return error
        return api.success(serialize_ledger(ledger))

    if request.method == "DELETE":
        sessions.discard_ledger(request, pk)
        return api.success(None, message="Edit session discarded")

    return api.method_not_allowed(["GET", "POST", "DELETE"])


@login_required
def session_toggle_handover(request, pk=None):
    """Body: ``{"asset_id": ..., "selected": true|false}``."""
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    _, ledger, error = _session_context(request, pk)
    if error:
        return error
    data, error = _session_body(request)
    if error:
        return error
    asset_id = (data.get("asset_id") or "").strip().upper()
    if not asset_id:
        return api.error("Asset ID is required")
    ledger.toggle_handover_asset(asset_id, bool(data.get("selected", True)))
    sessions.store_ledger(request, ledger, pk)
    return api.success(serialize_ledger(ledger))


@login_required
def session_handover_details(request, pk=None):
    """Update any subset of the handover fields."""
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    _, ledger, error = _session_context(request, pk)
    if error:
        return error
    data, error = _session_body(request)
    if error:
        return error

    form = HandoverForm({**ledger.handover_data, **data})
    form.is_valid()
    field_errors = {
        field: message
        for field, message in api.form_errors(form).items()
        if field in data
    }
    if field_errors:
        return api.error("Validation failed", errors=field_errors)
    try:
        ledger.update_handover(
            **{
                field: form.cleaned_data.get(field, data[field])
                for field in data
            }
        )
    except ValueError as exc:
        return api.error(str(exc))
    sessions.store_ledger(request, ledger, pk)
    return api.success(serialize_ledger(ledger))


@login_required
def session_available_assets(request, pk=None):
    if request.method != "GET":
        return api.method_not_allowed(["GET"])
    _, ledger, error = _session_context(request, pk)
    if error:
        return error
    picked = {asset["asset_id"] for asset in ledger.selected_assets}
    return api.success(
        [
            asset
            for asset in AssetLedger.available_assets(AssetDirectory())
            if asset["asset_id"] not in picked
        ]
    )


@login_required
def session_assign(request, pk=None):
    """Body: ``{"asset_id": ...}`` of an existing, unassigned asset."""
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    _, ledger, error = _session_context(request, pk)
    if error:
        return error
    data, error = _session_body(request)
    if error:
        return error
    asset = AssetDirectory().get_by_asset_id(data.get("asset_id"))
    if asset is None:
        return api.error("Asset not found", status=404)
    try:
        ledger.assign_new_asset(asset)
    except ValueError as exc:
        return api.error(str(exc), status=409)
    sessions.store_ledger(request, ledger, pk)
    return api.success(serialize_ledger(ledger))


@login_required
def session_unassign(request, pk=None):
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    _, ledger, error = _session_context(request, pk)
    if error:
        return error
    data, error = _session_body(request)
    if error:
        return error
    ledger.unassign_new_asset((data.get("asset_id") or "").strip().upper())
    sessions.store_ledger(request, ledger, pk)
    return api.success(serialize_ledger(ledger))


@login_required
def session_new_asset(request, pk=None):
    """Queue a brand-new asset; it is created when the session commits."""
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    _, ledger, error = _session_context(request, pk)
    if error:
        return error
    data, error = _session_body(request)
    if error:
        return error
    form = QuickAssetForm(data)
    if not form.is_valid():
        return api.error("Validation failed", errors=api.form_errors(form))
    try:
        ledger.add_new_asset(form.cleaned_data)
    except ValueError as exc:
        return api.error(
            "Validation failed", errors={"asset_id": str(exc)}
        )
    sessions.store_ledger(request, ledger, pk)
    return api.success(serialize_ledger(ledger), status=201)


@login_required
def session_commit(request, pk=None):
    """Validate the employee form and persist the session.

    Validation problems (400) and persistence failures (503) keep the
    session open so the edit can be retried.
    """
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    employee, ledger, error = _session_context(request, pk)
    if error:
        return error
    data, error = _session_body(request)
    if error:
        return error

    form = EmployeeForm(_form_data(employee, data), instance=employee)
    if not form.is_valid():
        return api.error("Validation failed", errors=api.form_errors(form))
    if form.requires_handover:
        handover_form = HandoverForm(ledger.handover_data)
        if not handover_form.is_valid():
            return api.error(
                "Validation failed",
                errors=api.form_errors(handover_form),
            )

    try:
        result = save_ledger(ledger, form.cleaned_data, instance=employee)
    except PersistenceError as exc:
        logger.error("Saving edit session for %s failed: %s", pk, exc)
        if exc.errors:
            return api.error(str(exc), errors=exc.errors)
        return api.error(
            "Could not save employee. Please try again.", status=503
        )

    sessions.discard_ledger(request, pk)
    saved = _get_employee(result["employee"].pk)
    return api.success(
        {
            "employee": serialize_employee(saved, with_assets=True),
            "assigned": result["assigned"],
            "released": result["released"],
            "failed": result["failed"],
        },
        status=201 if pk is None else 200,
        message=(
            "Employee created successfully"
            if pk is None
            else "Employee updated successfully"
        ),
    )
