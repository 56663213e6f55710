"""
Knox Assignment Rule

A derived transition: writing a non-empty Knox ID onto an asset checks the
asset out to the acting user, unless the asset is already held under that
same Knox ID. The rule is evaluated after every asset field write (create,
edit, import) and its transition runs in the same unit of work as the write.
"""

from typing import Optional

from asset_tracker.data.core.asset_info.asset import Asset, AssetStatus


class KnoxAssignmentRule:
    """Predicate + transition pair for Knox-ID-triggered checkout"""

    NOTE_TEMPLATE = "Asset automatically checked out to KnoxID: {knox_id}"

    @staticmethod
    def already_satisfied(asset: Asset, knox_id: str) -> bool:
        """The asset is already held under exactly this Knox ID"""
        return asset.status in AssetStatus.CHECKED_OUT and asset.knox_id == knox_id

    @classmethod
    def applies(cls, asset: Asset, knox_id: Optional[str]) -> bool:
        """True when writing ``knox_id`` must trigger a checkout"""
        if not knox_id:
            return False
        return not cls.already_satisfied(asset, knox_id)

    @classmethod
    def checkout_note(cls, knox_id: str) -> str:
        return cls.NOTE_TEMPLATE.format(knox_id=knox_id)

    @classmethod
    def apply(cls, asset: Asset, knox_id: Optional[str], acting_user_id: Optional[int],
              expected_checkin_date=None) -> bool:
        """
        Run the transition when the predicate holds.

        Must be called inside an open unit of work; the Knox ID and the
        checkout are written by one conditional update.

        Returns:
            True if a checkout happened, False for a no-op
        """
        if not cls.applies(asset, knox_id):
            return False

        # Imported here to keep the rule importable without the manager
        from asset_tracker.buisness.assets.asset_lifecycle_manager import AssetLifecycleManager
        AssetLifecycleManager.checkout_staged(
            asset,
            acting_user_id,
            expected_checkin_date=expected_checkin_date,
            notes=cls.checkout_note(knox_id),
            knox_id=knox_id
        )
        return True
