"""Translation between the two identifiers every asset carries.

``internal_id`` is the system identifier persisted on handover records;
``asset_id`` is the human-facing identifier shown and toggled in the UI.
Both translations are total: an identifier that cannot be resolved in the
directory (for example because the asset was deleted after a handover was
recorded) is returned unchanged, so a stale reference round-trips as-is.
"""


def _lookup(directory, from_key, to_key, value):
    if value in (None, ""):
        return value
    for record in directory or ():
        if record.get(from_key) == value:
            resolved = record.get(to_key)
            return resolved if resolved else value
    return value


def to_display_id(internal_id, directory):
    """Return the ``asset_id`` for ``internal_id``, or ``internal_id``."""
    return _lookup(directory, "internal_id", "asset_id", internal_id)


def to_storage_id(asset_id, directory):
    """Return the ``internal_id`` for ``asset_id``, or ``asset_id``."""
    return _lookup(directory, "asset_id", "internal_id", asset_id)


def to_display_ids(internal_ids, directory):
    return [to_display_id(value, directory) for value in internal_ids or ()]


def to_storage_ids(asset_ids, directory, *fallback_directories):
    """Translate ``asset_ids`` trying each directory in turn.

    An id that no directory resolves is kept as-is.
    """
    result = []
    for asset_id in asset_ids or ():
        storage_id = to_storage_id(asset_id, directory)
        for extra in fallback_directories:
            if storage_id != asset_id:
                break
            storage_id = to_storage_id(asset_id, extra)
        result.append(storage_id)
    return result
