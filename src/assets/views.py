"""JSON API views for the assets app."""

import logging

from django_ratelimit.decorators import ratelimit

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.db.models import Count, Q

from employees.models import Employee

from . import api
from .forms import AssetForm
from .models import Asset
from .services import history
from .services.catalog import get_catalog
from .services.timeline import build_timeline

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = (
    "name",
    "asset_id",
    "category",
    "status",
    "location",
    "assigned_to",
    "assigned_date",
    "created_at",
    "updated_at",
)


def serialize_asset(asset, with_history=False):
    data = asset.to_record()
    data.update(
        {
            "description": asset.description,
            "is_active": asset.is_active,
            "created_at": asset.created_at.isoformat(),
            "updated_at": asset.updated_at.isoformat(),
        }
    )
    if with_history:
        data["history"] = [entry.to_record() for entry in asset.history.all()]
    return data


def _get_asset(identifier):
    """Find by internal_id first, then by asset_id."""
    return (
        Asset.objects.filter(internal_id=identifier).first()
        or Asset.objects.filter(asset_id__iexact=identifier).first()
    )


def _asset_changes(form, asset):
    return {
        field: form.cleaned_data[field]
        for field in history.EDITABLE_FIELDS
        if field in form.cleaned_data
        and form.cleaned_data[field] != getattr(asset, field)
    }


@login_required
@ratelimit(
    key="user", rate=settings.API_RATE_LIMIT, method="GET", block=True
)
def asset_collection(request):
    """GET: list with filters and pagination. POST: create."""
    if request.method == "POST":
        return _asset_create(request)
    if request.method != "GET":
        return api.method_not_allowed(["GET", "POST"])

    queryset = Asset.objects.all()
    if request.GET.get("include_inactive") != "true":
        queryset = queryset.active()

    status = request.GET.get("status")
    if status:
        queryset = queryset.filter(status=status)
    category = request.GET.get("category")
    if category:
        queryset = queryset.filter(category=category)
    location = request.GET.get("location")
    if location:
        queryset = queryset.filter(location__icontains=location)
    assigned_to = request.GET.get("assigned_to")
    if assigned_to:
        queryset = queryset.assigned_to_name(assigned_to)
    if request.GET.get("available") == "true":
        queryset = queryset.unassigned()

    search = request.GET.get("search", "").strip()
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search)
            | Q(asset_id__icontains=search)
            | Q(description__icontains=search)
            | Q(assigned_to__icontains=search)
        )

    queryset = queryset.order_by(
        api.ordering(request, SORTABLE_FIELDS, "-created_at"), "pk"
    )
    items, pagination = api.paginate(request, queryset, serialize_asset)
    return api.success(items, pagination=pagination)


def _asset_create(request):
    try:
        data = api.parse_json_body(request)
    except api.BadRequest as exc:
        return api.error(str(exc))

    form = AssetForm(data)
    if not form.is_valid():
        return api.error(
            "Validation failed", errors=api.form_errors(form)
        )
    asset = history.create_asset(
        **{
            field: value
            for field, value in form.cleaned_data.items()
            if value not in (None, "") or field == "assigned_to"
        }
    )
    logger.info("Created asset %s", asset.asset_id)
    return api.success(
        serialize_asset(asset, with_history=True),
        status=201,
        message="Asset created successfully",
    )


@login_required
def asset_detail(request, identifier):
    """GET detail, PUT update, DELETE soft delete."""
    asset = _get_asset(identifier)
    if asset is None:
        return api.error("Asset not found", status=404)

    if request.method == "GET":
        return api.success(serialize_asset(asset, with_history=True))

    if request.method == "PUT":
        try:
            data = api.parse_json_body(request)
        except api.BadRequest as exc:
            return api.error(str(exc))
        if (
            "asset_id" in data
            and str(data["asset_id"]).strip().upper() != asset.asset_id
        ):
            return api.error(
                "Validation failed",
                errors={"asset_id": "Asset ID cannot be changed once set."},
            )
        # Partial update: unspecified fields keep their current value.
        merged = {
            field: getattr(asset, field) for field in AssetForm.Meta.fields
        }
        merged.update(data)
        form = AssetForm(merged, instance=Asset.objects.get(pk=asset.pk))
        if not form.is_valid():
            return api.error(
                "Validation failed", errors=api.form_errors(form)
            )
        entries = history.update_asset(asset, _asset_changes(form, asset))
        logger.info(
            "Updated asset %s (%d change(s))", asset.asset_id, len(entries)
        )
        return api.success(
            serialize_asset(asset, with_history=True),
            message="Asset updated successfully",
        )

    if request.method == "DELETE":
        history.retire_asset(asset)
        logger.info("Retired asset %s", asset.asset_id)
        return api.success(None, message="Asset deleted successfully")

    return api.method_not_allowed(["GET", "PUT", "DELETE"])


@login_required
def asset_assign(request, identifier):
    """Assign an asset to an employee by their employee ID."""
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    asset = _get_asset(identifier)
    if asset is None:
        return api.error("Asset not found", status=404)
    try:
        data = api.parse_json_body(request)
    except api.BadRequest as exc:
        return api.error(str(exc))

    employee_id = (data.get("employee_id") or "").strip()
    if not employee_id:
        return api.error("Employee ID is required")
    employee = Employee.objects.filter(employee_id=employee_id).first()
    if employee is None:
        return api.error("Employee not found", status=404)
    if asset.is_assigned and not employee.holds(asset):
        return api.error(
            f"Asset is already assigned to {asset.assigned_to}. "
            f"Unassign it first.",
            status=409,
        )

    history.update_asset(asset, {"assigned_to": employee.display_name})
    return api.success(
        serialize_asset(asset), message="Asset assigned successfully"
    )


@login_required
def asset_unassign(request, identifier):
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    asset = _get_asset(identifier)
    if asset is None:
        return api.error("Asset not found", status=404)
    history.update_asset(asset, {"assigned_to": ""})
    return api.success(
        serialize_asset(asset), message="Asset unassigned successfully"
    )


@login_required
def asset_status(request, identifier):
    """Change only the status of an asset."""
    if request.method != "POST":
        return api.method_not_allowed(["POST"])
    asset = _get_asset(identifier)
    if asset is None:
        return api.error("Asset not found", status=404)
    try:
        data = api.parse_json_body(request)
    except api.BadRequest as exc:
        return api.error(str(exc))

    status = (data.get("status") or "").strip()
    if not status:
        return api.error("Status is required")
    if status not in get_catalog()["asset_statuses"]:
        return api.error(
            "Validation failed",
            errors={"status": f"{status} is not a valid status."},
        )
    history.update_asset(asset, {"status": status})
    return api.success(
        serialize_asset(asset), message="Asset status updated successfully"
    )


def asset_stats_data():
    active = Asset.objects.active()
    return {
        "total": active.count(),
        "assigned": active.exclude(assigned_to="").count(),
        "available": active.unassigned().count(),
        "by_status": list(
            active.values("status")
            .annotate(count=Count("id"))
            .order_by("-count", "status")
        ),
        "by_category": list(
            active.values("category")
            .annotate(count=Count("id"))
            .order_by("-count", "category")
        ),
    }


@login_required
def asset_stats(request):
    return api.success(asset_stats_data())


@login_required
@ratelimit(
    key="user", rate=settings.API_RATE_LIMIT, method="GET", block=True
)
def timeline(request):
    """Activity feed, newest first. ``?type=assets|employees&limit=``."""
    kind = request.GET.get("type") or None
    if kind not in (None, "assets", "employees"):
        return api.error("type must be 'assets' or 'employees'")
    limit = request.GET.get("limit")
    try:
        limit = int(limit) if limit else None
    except ValueError:
        return api.error("limit must be a number")
    items = build_timeline(limit=limit, kind=kind)
    return api.success(items, total=len(items))


@login_required
def dashboard(request):
    """Combined asset and employee overview."""
    from employees.views import employee_stats_data

    recent_assets = Asset.objects.active().order_by("-created_at")[:5]
    recent_employees = Employee.objects.filter(is_active=True).order_by(
        "-created_at"
    )[:5]
    return api.success(
        {
            "assets": asset_stats_data(),
            "employees": employee_stats_data(),
            "recent_assets": [serialize_asset(a) for a in recent_assets],
            "recent_employees": [
                {
                    "employee_id": e.employee_id,
                    "name": e.display_name,
                    "department": e.department,
                    "status": e.status,
                }
                for e in recent_employees
            ],
        }
    )
