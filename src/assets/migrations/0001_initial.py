import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import assets.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Asset",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "internal_id",
                    models.CharField(
                        default=assets.models.generate_internal_id,
                        editable=False,
                        help_text="System identifier stored on handover records",
                        max_length=32,
                        unique=True,
                    ),
                ),
                (
                    "asset_id",
                    models.CharField(
                        blank=True,
                        help_text="Human-assigned identifier, immutable once set",
                        max_length=50,
                        unique=True,
                    ),
                ),
                (
                    "name",
                    models.CharField(default="Unnamed Asset", max_length=100),
                ),
                (
                    "category",
                    models.CharField(default="Other", max_length=50),
                ),
                (
                    "status",
                    models.CharField(default="Active", max_length=30),
                ),
                ("location", models.CharField(blank=True, max_length=200)),
                (
                    "assigned_to",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Display name of the employee holding this asset",
                        max_length=200,
                    ),
                ),
                (
                    "assigned_date",
                    models.DateTimeField(blank=True, null=True),
                ),
                (
                    "description",
                    models.TextField(blank=True, max_length=500),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="idx_asset_status"),
                    models.Index(
                        fields=["category"], name="idx_asset_category"
                    ),
                    models.Index(
                        fields=["assigned_to"], name="idx_asset_assigned_to"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AssetHistory",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "timestamp",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("action", models.CharField(max_length=50)),
                ("details", models.TextField(blank=True)),
                ("old_value", models.TextField(blank=True, null=True)),
                ("new_value", models.TextField(blank=True, null=True)),
                (
                    "asset",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="assets.asset",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "asset history",
                "ordering": ["timestamp", "pk"],
                "indexes": [
                    models.Index(
                        fields=["timestamp"], name="idx_history_timestamp"
                    ),
                    models.Index(
                        fields=["action"], name="idx_history_action"
                    ),
                ],
            },
        ),
    ]
