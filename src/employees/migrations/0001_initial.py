import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Employee",
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
                    "employee_id",
                    models.CharField(
                        error_messages={
                            "unique": "Employee ID already exists"
                        },
                        max_length=50,
                        unique=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                message=(
                                    "Employee ID can only contain "
                                    "uppercase letters, numbers, "
                                    "hyphens, and underscores"
                                ),
                                regex="^[A-Z0-9_-]+$",
                            )
                        ],
                    ),
                ),
                ("first_name", models.CharField(max_length=50)),
                ("last_name", models.CharField(max_length=50)),
                (
                    "email",
                    models.EmailField(
                        error_messages={"unique": "Email already exists"},
                        max_length=254,
                        unique=True,
                    ),
                ),
                (
                    "phone",
                    models.CharField(
                        blank=True,
                        max_length=20,
                        validators=[
                            django.core.validators.RegexValidator(
                                message=(
                                    "Phone number must be exactly 10 digits"
                                ),
                                regex="^\\d{10}$",
                            )
                        ],
                    ),
                ),
                ("department", models.CharField(max_length=100)),
                ("position", models.CharField(max_length=100)),
                ("hire_date", models.DateField()),
                ("location", models.CharField(blank=True, max_length=200)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Active", "Active"),
                            ("Relieved", "Relieved"),
                            ("On Leave", "On Leave"),
                            ("Terminated", "Terminated"),
                        ],
                        default="Active",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True, max_length=1000)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["department"], name="idx_employee_dept"
                    ),
                    models.Index(
                        fields=["status"], name="idx_employee_status"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Handover",
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
                    "handover_date",
                    models.DateTimeField(blank=True, null=True),
                ),
                (
                    "handover_to",
                    models.CharField(blank=True, max_length=200),
                ),
                (
                    "handover_reason",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("Resignation", "Resignation"),
                            ("Termination", "Termination"),
                            ("Retirement", "Retirement"),
                            ("Transfer", "Transfer"),
                            ("Other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "assets_to_return",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="internal_id of each asset to be returned",
                    ),
                ),
                (
                    "handover_status",
                    models.CharField(
                        choices=[
                            ("Pending", "Pending"),
                            ("In Progress", "In Progress"),
                            ("Completed", "Completed"),
                            ("Partial", "Partial"),
                        ],
                        default="Pending",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True, max_length=1000)),
                (
                    "completed_at",
                    models.DateTimeField(blank=True, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="handover",
                        to="employees.employee",
                    ),
                ),
            ],
        ),
    ]
