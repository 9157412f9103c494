"""URL configuration for employees app."""

from django.urls import include, path

from . import views

app_name = "employees"

session_patterns = [
    path("", views.edit_session, name="session"),
    path(
        "handover/",
        views.session_toggle_handover,
        name="session_handover",
    ),
    path(
        "handover-details/",
        views.session_handover_details,
        name="session_handover_details",
    ),
    path(
        "available/",
        views.session_available_assets,
        name="session_available",
    ),
    path("assign/", views.session_assign, name="session_assign"),
    path("unassign/", views.session_unassign, name="session_unassign"),
    path("new-asset/", views.session_new_asset, name="session_new_asset"),
    path("commit/", views.session_commit, name="session_commit"),
]

urlpatterns = [
    path("employees/", views.employee_collection, name="employee_list"),
    path("employees/stats/", views.employee_stats, name="employee_stats"),
    path("employees/new/session/", include(session_patterns)),
    path(
        "employees/<int:pk>/",
        views.employee_detail,
        name="employee_detail",
    ),
    path(
        "employees/<int:pk>/status/",
        views.employee_status,
        name="employee_status",
    ),
    path(
        "employees/<int:pk>/handover-candidates/",
        views.handover_candidates,
        name="handover_candidates",
    ),
    path("employees/<int:pk>/session/", include(session_patterns)),
]
