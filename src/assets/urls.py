"""URL configuration for assets app."""

from django.urls import path

from . import views

app_name = "assets"

urlpatterns = [
    path("dashboard/", views.dashboard, name="dashboard"),
    path("timeline/", views.timeline, name="timeline"),
    # Assets
    path("assets/", views.asset_collection, name="asset_list"),
    path("assets/stats/", views.asset_stats, name="asset_stats"),
    path(
        "assets/<str:identifier>/",
        views.asset_detail,
        name="asset_detail",
    ),
    path(
        "assets/<str:identifier>/assign/",
        views.asset_assign,
        name="asset_assign",
    ),
    path(
        "assets/<str:identifier>/unassign/",
        views.asset_unassign,
        name="asset_unassign",
    ),
    path(
        "assets/<str:identifier>/status/",
        views.asset_status,
        name="asset_status",
    ),
]
