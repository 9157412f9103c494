"""Read-only asset directory handed to the assignment ledger."""

from ..models import Asset


class AssetDirectory:
    """Snapshot-style access to assets as plain records."""

    def __init__(self, queryset=None):
        self.queryset = (
            queryset if queryset is not None else Asset.objects.active()
        )

    def list(self):
        return [asset.to_record() for asset in self.queryset]

    def get(self, internal_id):
        asset = self.queryset.filter(internal_id=internal_id).first()
        return asset.to_record() if asset else None

    def get_by_asset_id(self, asset_id):
        asset = self.queryset.filter(
            asset_id__iexact=(asset_id or "").strip()
        ).first()
        return asset.to_record() if asset else None

    def available(self):
        """Assets nobody holds; the only ones offered for assignment."""
        return [asset.to_record() for asset in self.queryset.unassigned()]
