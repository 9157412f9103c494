"""Models for AssetDesk asset tracking."""

import random
import time
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


def generate_internal_id():
    return uuid.uuid4().hex


def generate_asset_id():
    """Human-facing fallback ID: ``AST`` + epoch millis + 0-999."""
    millis = int(time.time() * 1000)
    return f"AST{millis}{random.randint(0, 999)}"


def normalize_name(value):
    """Trim and collapse whitespace in a person's display name."""
    return " ".join(str(value or "").split())


class AssetQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def unassigned(self):
        return self.filter(assigned_to="")

    def assigned_to_name(self, name):
        """Assets held by ``name``, compared case-insensitively."""
        name = normalize_name(name)
        if not name:
            return self.none()
        return self.filter(assigned_to__iexact=name)


class Asset(models.Model):
    """Individual trackable asset."""

    internal_id = models.CharField(
        max_length=32,
        unique=True,
        default=generate_internal_id,
        editable=False,
        help_text="System identifier stored on handover records",
    )
    asset_id = models.CharField(
        max_length=50,
        unique=True,
        blank=True,
        help_text="Human-assigned identifier, immutable once set",
    )
    name = models.CharField(max_length=100, default="Unnamed Asset")
    category = models.CharField(max_length=50, default="Other")
    status = models.CharField(max_length=30, default="Active")
    location = models.CharField(max_length=200, blank=True)
    assigned_to = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text="Display name of the employee holding this asset",
    )
    assigned_date = models.DateTimeField(null=True, blank=True)
    description = models.TextField(blank=True, max_length=500)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AssetQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="idx_asset_status"),
            models.Index(fields=["category"], name="idx_asset_category"),
            models.Index(
                fields=["assigned_to"], name="idx_asset_assigned_to"
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.asset_id})"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_asset_id = instance.__dict__.get("asset_id")
        return instance

    @property
    def is_assigned(self):
        return bool(self.assigned_to)

    def save(self, *args, **kwargs):
        loaded = getattr(self, "_loaded_asset_id", None)
        if not self.asset_id:
            self.asset_id = generate_asset_id()
        self.asset_id = self.asset_id.strip().upper()
        if loaded and self.asset_id != loaded:
            raise ValidationError(
                {"asset_id": "Asset ID cannot be changed once set."}
            )

        self.assigned_to = normalize_name(self.assigned_to)
        if self.assigned_to and self.assigned_date is None:
            self.assigned_date = timezone.now()
        elif not self.assigned_to:
            self.assigned_date = None

        super().save(*args, **kwargs)
        self._loaded_asset_id = self.asset_id

    def to_record(self):
        """Plain dict view consumed by the assignment ledger."""
        return {
            "internal_id": self.internal_id,
            "asset_id": self.asset_id,
            "name": self.name,
            "category": self.category,
            "status": self.status,
            "location": self.location,
            "assigned_to": self.assigned_to,
            "assigned_date": (
                self.assigned_date.isoformat() if self.assigned_date else None
            ),
        }


class AssetHistory(models.Model):
    """Append-only change log of an asset."""

    ACTION_CREATED = "Asset Created"
    ACTION_ASSIGNED = "Asset Assigned"
    ACTION_UNASSIGNED = "Asset Unassigned"
    ACTION_RETIRED = "Asset Retired"

    asset = models.ForeignKey(
        Asset, on_delete=models.CASCADE, related_name="history"
    )
    timestamp = models.DateTimeField(default=timezone.now)
    action = models.CharField(max_length=50)
    details = models.TextField(blank=True)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)

    class Meta:
        ordering = ["timestamp", "pk"]
        verbose_name_plural = "asset history"
        indexes = [
            models.Index(fields=["timestamp"], name="idx_history_timestamp"),
            models.Index(fields=["action"], name="idx_history_action"),
        ]

    def __str__(self):
        return f"{self.asset.asset_id} - {self.action}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValidationError(
                "History entries are immutable and cannot be modified."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "History entries are immutable and cannot be deleted."
        )

    def to_record(self):
        return {
            "id": self.pk,
            "timestamp": self.timestamp.isoformat(),
            "action": self.action,
            "details": self.details,
            "old_value": self.old_value,
            "new_value": self.new_value,
        }
