"""Admin configuration for employees app using django-unfold."""

from unfold.admin import ModelAdmin, StackedInline
from unfold.decorators import display

from django.contrib import admin

from .models import Employee, Handover


class HandoverInline(StackedInline):
    model = Handover
    extra = 0
    can_delete = False
    fields = [
        "handover_date",
        "handover_to",
        "handover_reason",
        "handover_status",
        "assets_to_return",
        "notes",
        "completed_at",
    ]
    readonly_fields = ["completed_at"]


@admin.register(Employee)
class EmployeeAdmin(ModelAdmin):
    list_display = [
        "display_header",
        "department",
        "position",
        "display_status",
        "display_asset_count",
        "is_active",
    ]
    list_filter = ["status", "department", "is_active"]
    list_filter_submit = True
    search_fields = [
        "employee_id",
        "first_name",
        "last_name",
        "email",
        "department",
        "position",
    ]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [HandoverInline]

    fieldsets = (
        (
            None,
            {
                "fields": (
                    "employee_id",
                    "first_name",
                    "last_name",
                    "email",
                    "phone",
                    "status",
                )
            },
        ),
        (
            "Employment",
            {
                "fields": (
                    "department",
                    "position",
                    "hire_date",
                    "location",
                    "notes",
                ),
                "classes": ["tab"],
            },
        ),
        (
            "Tracking",
            {
                "fields": ("is_active", "created_at", "updated_at"),
                "classes": ["tab"],
            },
        ),
    )

    @display(description="Employee", header=True, ordering="last_name")
    def display_header(self, obj):
        return obj.display_name, obj.employee_id

    @display(
        description="Status",
        label={
            "Active": "success",
            "On Leave": "info",
            "Relieved": "warning",
            "Terminated": "danger",
        },
    )
    def display_status(self, obj):
        return obj.status

    @display(description="Assets")
    def display_asset_count(self, obj):
        return obj.assigned_assets.count()


@admin.register(Handover)
class HandoverAdmin(ModelAdmin):
    list_display = [
        "employee",
        "handover_to",
        "handover_reason",
        "display_status",
        "handover_date",
        "completed_at",
    ]
    list_filter = ["handover_status", "handover_reason"]
    search_fields = [
        "employee__first_name",
        "employee__last_name",
        "employee__employee_id",
        "handover_to",
    ]
    readonly_fields = ["completed_at", "created_at", "updated_at"]

    @display(
        description="Status",
        label={
            "Pending": "info",
            "In Progress": "warning",
            "Completed": "success",
            "Partial": "danger",
        },
    )
    def display_status(self, obj):
        return obj.handover_status
