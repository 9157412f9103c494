"""Configurable catalog values (categories, statuses, departments...).

Forms take the catalog as an argument so tests and callers can inject
their own values instead of relying on global settings.
"""

from django.conf import settings

DEFAULT_CATALOG = {
    "asset_categories": ["Other"],
    "asset_statuses": ["Active", "Inactive"],
    "departments": [],
    "positions": [],
}


def get_catalog():
    """Return the configured catalog merged over the defaults."""
    configured = getattr(settings, "ASSETDESK_CATALOG", None) or {}
    catalog = {key: list(values) for key, values in DEFAULT_CATALOG.items()}
    for key, values in configured.items():
        catalog[key] = list(values)
    return catalog


def as_choices(values):
    return [(value, value) for value in values]
