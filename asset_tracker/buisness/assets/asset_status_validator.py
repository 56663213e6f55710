from __future__ import annotations

from asset_tracker.data.core.asset_info.asset import AssetStatus


class AssetStatusValidator:
    """
    Status moves an asset edit may make directly.

    Entering ``deployed`` from a resting status only happens through checkout,
    and leaving a checked-out status only through checkin; both carry holder
    fields that a plain edit cannot supply or clear consistently.
    """

    _EDIT_MOVES = {
        AssetStatus.AVAILABLE: {AssetStatus.PENDING, AssetStatus.ARCHIVED},
        AssetStatus.PENDING: {AssetStatus.AVAILABLE, AssetStatus.ARCHIVED},
        AssetStatus.ARCHIVED: {AssetStatus.AVAILABLE, AssetStatus.PENDING},
        AssetStatus.DEPLOYED: {AssetStatus.OVERDUE},
        AssetStatus.OVERDUE: {AssetStatus.DEPLOYED},
    }

    CHECKOUT_FROM = {AssetStatus.AVAILABLE}
    CHECKIN_FROM = AssetStatus.CHECKED_OUT

    @classmethod
    def can_edit_to(cls, current_status: str, new_status: str) -> bool:
        if current_status == new_status:
            return True
        return new_status in cls._EDIT_MOVES.get(current_status, set())

    @classmethod
    def can_checkout(cls, current_status: str) -> bool:
        return current_status in cls.CHECKOUT_FROM

    @classmethod
    def can_checkin(cls, current_status: str) -> bool:
        return current_status in cls.CHECKIN_FROM
