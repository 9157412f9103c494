"""Admin configuration for assets app using django-unfold."""

from unfold.admin import ModelAdmin, TabularInline
from unfold.decorators import action, display

from django.contrib import admin, messages

from .models import Asset, AssetHistory
from .services import history


class AssetHistoryInline(TabularInline):
    model = AssetHistory
    extra = 0
    can_delete = False
    fields = ["timestamp", "action", "details", "old_value", "new_value"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class AssignmentFilter(admin.SimpleListFilter):
    title = "assignment"
    parameter_name = "assigned"

    def lookups(self, request, model_admin):
        return [("yes", "Assigned"), ("no", "Available")]

    def queryset(self, request, queryset):
        if self.value() == "yes":
            return queryset.exclude(assigned_to="")
        if self.value() == "no":
            return queryset.unassigned()
        return queryset


@admin.register(Asset)
class AssetAdmin(ModelAdmin):
    list_display = [
        "display_header",
        "display_status",
        "category",
        "location",
        "display_assigned",
        "is_active",
        "updated_at",
    ]
    list_filter = [
        "status",
        "category",
        AssignmentFilter,
        "is_active",
    ]
    list_filter_submit = True
    search_fields = ["name", "asset_id", "description", "assigned_to"]
    readonly_fields = [
        "internal_id",
        "assigned_date",
        "created_at",
        "updated_at",
    ]
    inlines = [AssetHistoryInline]
    actions = ["retire_selected"]

    fieldsets = (
        (
            None,
            {
                "fields": (
                    "asset_id",
                    "name",
                    "category",
                    "status",
                    "location",
                    "description",
                )
            },
        ),
        (
            "Assignment",
            {
                "fields": ("assigned_to", "assigned_date"),
                "classes": ["tab"],
            },
        ),
        (
            "Tracking",
            {
                "fields": (
                    "internal_id",
                    "is_active",
                    "created_at",
                    "updated_at",
                ),
                "classes": ["tab"],
            },
        ),
    )

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            fields.append("asset_id")
        return fields

    @display(description="Asset", header=True, ordering="name")
    def display_header(self, obj):
        return obj.name, obj.asset_id

    @display(
        description="Status",
        label={
            "Active": "success",
            "Inactive": "default",
            "Maintenance": "warning",
            "Repaired": "info",
            "Retired": "warning",
            "Lost": "danger",
        },
    )
    def display_status(self, obj):
        return obj.status

    @display(description="Assigned To", empty_value="-")
    def display_assigned(self, obj):
        return obj.assigned_to or None

    def save_model(self, request, obj, form, change):
        if not change:
            obj.save()
            history.record_entry(
                obj,
                AssetHistory.ACTION_CREATED,
                f'Asset "{obj.name}" was created',
            )
            return
        # Route edits through the history service so they are logged.
        original = Asset.objects.get(pk=obj.pk)
        changes = {
            field: getattr(obj, field)
            for field in form.changed_data
            if field in history.EDITABLE_FIELDS
        }
        history.update_asset(original, changes)
        if "is_active" in form.changed_data:
            original.is_active = obj.is_active
            original.save(update_fields=["is_active", "updated_at"])

    @action(description="Retire selected assets")
    def retire_selected(self, request, queryset):
        count = 0
        for asset in queryset.filter(is_active=True):
            history.retire_asset(asset)
            count += 1
        messages.success(request, f"{count} asset(s) retired.")


@admin.register(AssetHistory)
class AssetHistoryAdmin(ModelAdmin):
    list_display = [
        "asset",
        "display_action",
        "details",
        "timestamp",
    ]
    list_filter = ["action"]
    search_fields = ["asset__name", "asset__asset_id", "details"]
    date_hierarchy = "timestamp"
    readonly_fields = [
        "asset",
        "timestamp",
        "action",
        "details",
        "old_value",
        "new_value",
    ]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @display(
        description="Action",
        label={
            "Asset Created": "success",
            "Asset Assigned": "info",
            "Asset Unassigned": "warning",
            "Asset Retired": "danger",
        },
    )
    def display_action(self, obj):
        return obj.action
