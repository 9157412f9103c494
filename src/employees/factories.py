"""Factory Boy factories for employee test data."""

import datetime

import factory
from factory.django import DjangoModelFactory


class EmployeeFactory(DjangoModelFactory):
    class Meta:
        model = "employees.Employee"
        django_get_or_create = ("employee_id",)

    employee_id = factory.Sequence(lambda n: f"EMP{n:04d}")
    first_name = factory.Sequence(lambda n: f"First{n}")
    last_name = factory.Sequence(lambda n: f"Last{n}")
    email = factory.LazyAttribute(
        lambda o: f"{o.first_name}.{o.last_name}@example.com".lower()
    )
    phone = "5551234567"
    department = "IT"
    position = "Developer"
    hire_date = datetime.date(2023, 1, 9)
    location = "Head Office"
    status = "Active"


class HandoverFactory(DjangoModelFactory):
    """Handover for a relieved employee; pass ``assets_to_return``."""

    class Meta:
        model = "employees.Handover"

    employee = factory.SubFactory(EmployeeFactory, status="Relieved")
    handover_date = factory.LazyFunction(
        lambda: datetime.datetime(2024, 6, 1, tzinfo=datetime.timezone.utc)
    )
    handover_to = "Jane Doe"
    handover_reason = "Resignation"
    assets_to_return = factory.LazyFunction(list)
    handover_status = "Pending"
