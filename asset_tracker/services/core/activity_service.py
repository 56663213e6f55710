"""
Activity Service
Read access to the audit trail, newest first.
"""

from typing import List, Optional
from asset_tracker.data.core.event_info.activity import Activity
from asset_tracker.buisness.core.activity_recorder import ItemType


class ActivityService:

    @staticmethod
    def build_activity_query(
        user_id: Optional[int] = None,
        item_type: Optional[str] = None,
        item_id: Optional[int] = None,
        action: Optional[str] = None
    ):
        query = Activity.query

        if user_id is not None:
            query = query.filter(Activity.user_id == user_id)

        if item_type:
            query = query.filter(Activity.item_type == item_type)

        if item_id is not None:
            query = query.filter(Activity.item_id == item_id)

        if action:
            query = query.filter(Activity.action == action)

        return query.order_by(Activity.timestamp.desc(), Activity.id.desc())

    @staticmethod
    def get_recent(limit: int = 100, **filters) -> List[Activity]:
        return ActivityService.build_activity_query(**filters).limit(limit).all()

    @staticmethod
    def for_asset(asset_id: int) -> List[Activity]:
        return ActivityService.build_activity_query(item_type=ItemType.ASSET, item_id=asset_id).all()

    @staticmethod
    def for_user(user_id: int) -> List[Activity]:
        return ActivityService.build_activity_query(user_id=user_id).all()
