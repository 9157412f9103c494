"""Forms for the employees app."""

from django import forms

from assets.services.catalog import as_choices, get_catalog

from .models import Employee, Handover


class EmployeeForm(forms.ModelForm):
    """Employee details. Department and position come from the catalog."""

    department = forms.ChoiceField(
        error_messages={"required": "Department is required"}
    )
    position = forms.ChoiceField(
        error_messages={"required": "Position is required"}
    )

    class Meta:
        model = Employee
        fields = [
            "employee_id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "department",
            "position",
            "hire_date",
            "location",
            "status",
            "notes",
        ]
        error_messages = {
            "employee_id": {"required": "Employee ID is required"},
            "first_name": {"required": "First name is required"},
            "last_name": {"required": "Last name is required"},
            "email": {
                "required": "Email is required",
                "invalid": "Please enter a valid email address",
            },
            "hire_date": {"required": "Hire date is required"},
        }

    def __init__(self, *args, catalog=None, **kwargs):
        super().__init__(*args, **kwargs)
        catalog = catalog or get_catalog()
        self.fields["department"].choices = [("", "")] + as_choices(
            catalog["departments"]
        )
        self.fields["position"].choices = [("", "")] + as_choices(
            catalog["positions"]
        )
        self.fields["status"].required = False

    def clean_employee_id(self):
        # Lowercase input is rejected by the model validator, not fixed up.
        return (self.cleaned_data.get("employee_id") or "").strip()

    def clean_email(self):
        return (self.cleaned_data.get("email") or "").strip().lower()

    def clean_phone(self):
        return (self.cleaned_data.get("phone") or "").strip()

    def clean_status(self):
        return self.cleaned_data.get("status") or Employee.STATUS_ACTIVE

    @property
    def requires_handover(self):
        return self.cleaned_data.get("status") in Employee.RELIEVING_STATUSES


class HandoverForm(forms.Form):
    """Handover details, required when an employee is being relieved."""

    handover_date = forms.DateTimeField(
        error_messages={"required": "Handover date is required"},
    )
    handover_to = forms.CharField(
        max_length=200,
        error_messages={"required": "Handover to is required"},
    )
    handover_reason = forms.ChoiceField(
        choices=Handover.REASON_CHOICES,
        error_messages={"required": "Handover reason is required"},
    )
    handover_status = forms.ChoiceField(
        choices=Handover.STATUS_CHOICES, required=False
    )
    notes = forms.CharField(
        max_length=1000, required=False, widget=forms.Textarea
    )

    def clean_handover_status(self):
        return (
            self.cleaned_data.get("handover_status")
            or Handover.STATUS_PENDING
        )
