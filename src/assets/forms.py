"""Forms for the assets app."""

from django import forms

from .models import Asset
from .services.catalog import as_choices, get_catalog


class AssetForm(forms.ModelForm):
    """Asset creation/editing form.

    ``asset_id`` is required on create and locked on edit.
    """

    category = forms.ChoiceField(required=False)
    status = forms.ChoiceField(required=False)

    class Meta:
        model = Asset
        fields = [
            "asset_id",
            "name",
            "category",
            "status",
            "location",
            "description",
            "assigned_to",
        ]
        error_messages = {
            "asset_id": {"unique": "Asset ID already exists."},
        }

    def __init__(self, *args, catalog=None, **kwargs):
        super().__init__(*args, **kwargs)
        catalog = catalog or get_catalog()
        self.fields["category"].choices = [("", "")] + as_choices(
            catalog["asset_categories"]
        )
        self.fields["status"].choices = [("", "")] + as_choices(
            catalog["asset_statuses"]
        )
        self.fields["location"].required = True
        self.fields["name"].required = False
        if self.instance and self.instance.pk:
            self.fields["asset_id"].disabled = True
        else:
            self.fields["asset_id"].required = True

    def clean_asset_id(self):
        return (self.cleaned_data.get("asset_id") or "").strip().upper()

    def clean_name(self):
        return (self.cleaned_data.get("name") or "").strip() or "Unnamed Asset"

    def clean_category(self):
        return self.cleaned_data.get("category") or "Other"

    def clean_status(self):
        return self.cleaned_data.get("status") or "Active"


class QuickAssetForm(forms.Form):
    """Ad-hoc asset added while editing an employee."""

    asset_id = forms.CharField(max_length=50, required=False)
    name = forms.CharField(
        max_length=100,
        error_messages={"required": "Asset name is required"},
    )
    category = forms.ChoiceField(
        error_messages={"required": "Category is required"},
    )
    status = forms.ChoiceField(
        error_messages={"required": "Status is required"},
    )
    location = forms.CharField(max_length=200, required=False)
    description = forms.CharField(
        max_length=500, required=False, widget=forms.Textarea
    )

    def __init__(self, *args, catalog=None, **kwargs):
        super().__init__(*args, **kwargs)
        catalog = catalog or get_catalog()
        self.fields["category"].choices = as_choices(
            catalog["asset_categories"]
        )
        self.fields["status"].choices = as_choices(catalog["asset_statuses"])

    def clean_asset_id(self):
        value = (self.cleaned_data.get("asset_id") or "").strip().upper()
        if value and Asset.objects.filter(asset_id=value).exists():
            raise forms.ValidationError("Asset ID already exists.")
        return value
