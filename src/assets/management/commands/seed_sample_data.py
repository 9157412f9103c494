"""Seed sample employees and assets for a demo or development database."""

import datetime

from django.core.management.base import BaseCommand

from assets.models import Asset
from assets.services import history
from employees.models import Employee

EMPLOYEES = [
    {
        "employee_id": "EMP001",
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@company.com",
        "phone": "1234567890",
        "department": "IT",
        "position": "Developer",
        "hire_date": datetime.date(2022, 1, 15),
        "location": "New York",
    },
    {
        "employee_id": "EMP002",
        "first_name": "Sarah",
        "last_name": "Johnson",
        "email": "sarah.johnson@company.com",
        "phone": "1234567892",
        "department": "HR",
        "position": "Manager",
        "hire_date": datetime.date(2021, 6, 20),
        "location": "Los Angeles",
    },
    {
        "employee_id": "EMP003",
        "first_name": "Michael",
        "last_name": "Chen",
        "email": "michael.chen@company.com",
        "phone": "1234567894",
        "department": "Finance",
        "position": "Analyst",
        "hire_date": datetime.date(2022, 3, 10),
        "location": "Chicago",
    },
    {
        "employee_id": "EMP004",
        "first_name": "Emily",
        "last_name": "Brown",
        "email": "emily.brown@company.com",
        "phone": "1234567896",
        "department": "Marketing",
        "position": "Specialist",
        "hire_date": datetime.date(2022, 8, 5),
        "location": "Miami",
    },
    {
        "employee_id": "EMP005",
        "first_name": "Robert",
        "last_name": "Wilson",
        "email": "robert.wilson@company.com",
        "phone": "1234567898",
        "department": "Operations",
        "position": "Manager",
        "hire_date": datetime.date(2021, 11, 12),
        "location": "Seattle",
    },
]

# (asset_id, name, category, location, holder employee_id or None)
ASSETS = [
    ("AST001", 'MacBook Pro 16"', "Electronics", "IT Department", "EMP001"),
    ("AST002", "Office Desk Set", "Furniture", "Marketing", "EMP004"),
    ("AST003", "Ford Transit", "Vehicles", "Company Garage", "EMP005"),
    ("AST004", "3D Printer", "Machinery", "R&D Lab", "EMP001"),
    ("AST005", "Adobe Creative Suite", "Software", "Marketing", "EMP004"),
    ("AST006", "Projector", "Electronics", "Conference Room A", "EMP004"),
    ("AST007", "Coffee Machine", "Machinery", "Break Room", "EMP005"),
    ("AST008", "Security Cameras", "Electronics", "Perimeter", None),
]


class Command(BaseCommand):
    help = "Seed sample employees and assets"

    def handle(self, *args, **options):
        employees = {}
        for data in EMPLOYEES:
            obj, created = Employee.objects.update_or_create(
                employee_id=data["employee_id"],
                defaults=data,
            )
            employees[obj.employee_id] = obj
            action = "Created" if created else "Updated"
            self.stdout.write(f"{action}: {obj}")

        for asset_id, name, category, location, holder in ASSETS:
            if Asset.objects.filter(asset_id=asset_id).exists():
                self.stdout.write(f"Exists: {asset_id}")
                continue
            asset = history.create_asset(
                asset_id=asset_id,
                name=name,
                category=category,
                location=location,
                assigned_to=(
                    employees[holder].display_name if holder else ""
                ),
            )
            self.stdout.write(f"Created: {asset}")
