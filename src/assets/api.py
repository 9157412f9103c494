"""JSON response helpers shared by the asset and employee APIs."""

import json

from django.conf import settings
from django.core.paginator import Paginator
from django.http import JsonResponse


class BadRequest(Exception):
    """Malformed request payload; rendered as a 400 error envelope."""


def success(data=None, status=200, **extra):
    payload = {"status": "success", "data": data}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def error(message, status=400, errors=None, **extra):
    payload = {"status": "error", "message": message}
    if errors:
        payload["errors"] = errors
    payload.update(extra)
    return JsonResponse(payload, status=status)


def method_not_allowed(allowed):
    response = error(f"{', '.join(allowed)} required", status=405)
    response["Allow"] = ", ".join(allowed)
    return response


def form_errors(form):
    """Flatten a bound form's errors to ``{field: first message}``."""
    return {
        field: messages[0] if len(messages) == 1 else list(messages)
        for field, messages in form.errors.items()
    }


def parse_json_body(request):
    """Decode a JSON object body. Raises BadRequest."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, ValueError):
        raise BadRequest("Invalid JSON")
    if not isinstance(data, dict):
        raise BadRequest("Expected a JSON object")
    return data


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def paginate(request, queryset, serialize):
    """Return ``(items, pagination)`` for ``?page=&limit=``."""
    limit = min(
        _positive_int(request.GET.get("limit"), settings.API_PAGE_SIZE),
        settings.API_MAX_PAGE_SIZE,
    )
    paginator = Paginator(queryset, limit)
    page = paginator.get_page(_positive_int(request.GET.get("page"), 1))
    items = [serialize(obj) for obj in page.object_list]
    return items, {
        "current_page": page.number,
        "total_pages": paginator.num_pages,
        "total_items": paginator.count,
        "items_per_page": limit,
    }


def ordering(request, allowed, default):
    """Resolve ``?sort_by=&sort_order=`` against an allow-list."""
    sort_by = request.GET.get("sort_by", "")
    if sort_by not in allowed:
        return default
    prefix = "-" if request.GET.get("sort_order") == "desc" else ""
    return f"{prefix}{sort_by}"
