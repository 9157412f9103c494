"""Shared pytest fixtures for AssetDesk tests."""

import pytest

from django.conf import settings

# Plain static storage for tests (no manifest from collectstatic)
settings.STORAGES["staticfiles"] = {
    "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
}

# Use in-memory cache for tests (avoids Redis connection errors)
settings.CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}


@pytest.fixture(autouse=True)
def _clear_cache():
    """Clear the in-memory cache before each test.

    Prevents rate-limit counters (django_ratelimit) from bleeding
    across tests.
    """
    from django.core.cache import cache

    cache.clear()


from assets.factories import AssetFactory, UserFactory  # noqa: E402
from employees.factories import EmployeeFactory  # noqa: E402

# --- User fixtures ---


@pytest.fixture
def password():
    return "testpass123!"


@pytest.fixture
def user(db, password):
    return UserFactory(
        username="testuser",
        email="test@example.com",
        password=password,
    )


@pytest.fixture
def admin_user(db, password):
    return UserFactory(
        username="admin",
        email="admin@example.com",
        password=password,
        is_staff=True,
        is_superuser=True,
    )


@pytest.fixture
def client_logged_in(client, user, password):
    client.login(username=user.username, password=password)
    return client


@pytest.fixture
def admin_client(client, admin_user, password):
    client.login(username=admin_user.username, password=password)
    return client


# --- Core model fixtures ---


@pytest.fixture
def employee(db):
    return EmployeeFactory(
        employee_id="EMP001",
        first_name="John",
        last_name="Doe",
        email="john.doe@example.com",
    )


@pytest.fixture
def other_employee(db):
    return EmployeeFactory(
        employee_id="EMP002",
        first_name="Sarah",
        last_name="Johnson",
        email="sarah.johnson@example.com",
    )


@pytest.fixture
def asset(db):
    return AssetFactory(
        asset_id="AST1",
        name="MacBook Pro",
        category="Electronics",
        location="IT Department",
    )


@pytest.fixture
def held_asset(employee):
    return AssetFactory(
        asset_id="AST2",
        name="Monitor",
        category="Electronics",
        location="IT Department",
        assigned_to=employee.display_name,
    )


@pytest.fixture
def free_asset(db):
    return AssetFactory(
        asset_id="AST3",
        name="Keyboard",
        category="IT Equipment",
        location="Store Room",
    )
