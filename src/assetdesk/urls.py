"""URL configuration for AssetDesk project."""

from django.contrib import admin
from django.urls import include, path

from assetdesk.views import health_check

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/", include("assets.urls")),
    path("api/", include("employees.urls")),
]
