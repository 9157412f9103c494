"""Models for AssetDesk employee records and handovers."""

from django.core.validators import RegexValidator
from django.db import models

from assets.models import Asset, normalize_name

employee_id_validator = RegexValidator(
    regex=r"^[A-Z0-9_-]+$",
    message=(
        "Employee ID can only contain uppercase letters, numbers, "
        "hyphens, and underscores"
    ),
)

phone_validator = RegexValidator(
    regex=r"^\d{10}$",
    message="Phone number must be exactly 10 digits",
)


class Employee(models.Model):
    STATUS_ACTIVE = "Active"
    STATUS_RELIEVED = "Relieved"
    STATUS_ON_LEAVE = "On Leave"
    STATUS_TERMINATED = "Terminated"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_RELIEVED, "Relieved"),
        (STATUS_ON_LEAVE, "On Leave"),
        (STATUS_TERMINATED, "Terminated"),
    ]

    # Statuses that require a handover of held assets.
    RELIEVING_STATUSES = (STATUS_RELIEVED, STATUS_TERMINATED)

    employee_id = models.CharField(
        max_length=50,
        unique=True,
        validators=[employee_id_validator],
        error_messages={"unique": "Employee ID already exists"},
    )
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(
        unique=True, error_messages={"unique": "Email already exists"}
    )
    phone = models.CharField(
        max_length=20, blank=True, validators=[phone_validator]
    )
    department = models.CharField(max_length=100)
    position = models.CharField(max_length=100)
    hire_date = models.DateField()
    location = models.CharField(max_length=200, blank=True)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE
    )
    notes = models.TextField(blank=True, max_length=1000)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["department"], name="idx_employee_dept"),
            models.Index(fields=["status"], name="idx_employee_status"),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.employee_id})"

    @property
    def display_name(self):
        return normalize_name(f"{self.first_name} {self.last_name}")

    @property
    def assigned_assets(self):
        """Active assets whose holder matches this employee's name."""
        return Asset.objects.active().assigned_to_name(self.display_name)

    def holds(self, asset):
        return (
            normalize_name(asset.assigned_to).casefold()
            == self.display_name.casefold()
        )

    def to_record(self):
        handover = getattr(self, "handover", None)
        return {
            "id": self.pk,
            "employee_id": self.employee_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.display_name,
            "email": self.email,
            "phone": self.phone,
            "department": self.department,
            "position": self.position,
            "hire_date": (
                self.hire_date.isoformat() if self.hire_date else None
            ),
            "location": self.location,
            "status": self.status,
            "notes": self.notes,
            "is_active": self.is_active,
            "handover_details": handover.to_record() if handover else None,
        }


class Handover(models.Model):
    """Asset handover recorded when an employee is relieved."""

    REASON_CHOICES = [
        ("Resignation", "Resignation"),
        ("Termination", "Termination"),
        ("Retirement", "Retirement"),
        ("Transfer", "Transfer"),
        ("Other", "Other"),
    ]

    STATUS_PENDING = "Pending"
    STATUS_IN_PROGRESS = "In Progress"
    STATUS_COMPLETED = "Completed"
    STATUS_PARTIAL = "Partial"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_PARTIAL, "Partial"),
    ]

    employee = models.OneToOneField(
        Employee, on_delete=models.CASCADE, related_name="handover"
    )
    handover_date = models.DateTimeField(null=True, blank=True)
    handover_to = models.CharField(max_length=200, blank=True)
    handover_reason = models.CharField(
        max_length=20, choices=REASON_CHOICES, blank=True
    )
    assets_to_return = models.JSONField(
        default=list,
        blank=True,
        help_text="internal_id of each asset to be returned",
    )
    handover_status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )
    notes = models.TextField(blank=True, max_length=1000)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Handover for {self.employee}"

    def to_record(self):
        return {
            "handover_date": (
                self.handover_date.isoformat() if self.handover_date else None
            ),
            "handover_to": self.handover_to,
            "handover_reason": self.handover_reason,
            "assets_to_return": list(self.assets_to_return or []),
            "handover_status": self.handover_status,
            "notes": self.notes,
            "completed_at": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
        }
