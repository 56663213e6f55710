"""
Activity Recorder
Append-only audit sink used by every lifecycle mutator.

Activities are staged in the caller's session, so they commit together with
the change they describe and disappear with it on rollback.
"""

from datetime import datetime
from typing import Optional

from asset_tracker import db
from asset_tracker.data.core.event_info.activity import Activity
from asset_tracker.logger import get_logger

logger = get_logger("asset_tracker.buisness.core.activity")


class ItemType:
    ASSET = 'asset'
    LICENSE = 'license'
    USER = 'user'


class ActivityRecorder:
    """Stages Activity rows in the current session"""

    @staticmethod
    def record(
        action: str,
        item_type: str,
        item_id: int,
        user_id: Optional[int] = None,
        notes: Optional[str] = None,
        timestamp: Optional[datetime] = None
    ) -> Activity:
        """
        Record one activity.

        Args:
            action: What happened (create, update, delete, checkout, checkin, assign-seat)
            item_type: Kind of entity touched
            item_id: Entity id (0 for collection-wide summaries)
            user_id: Acting principal, if any
            notes: Human readable description
            timestamp: Defaults to now (UTC)

        Returns:
            The staged Activity
        """
        activity = Activity(
            action=action,
            item_type=item_type,
            item_id=item_id,
            user_id=user_id,
            timestamp=timestamp or datetime.utcnow(),
            notes=notes
        )
        db.session.add(activity)

        logger.debug(f"Activity staged: {action} {item_type}:{item_id} by user {user_id}")
        return activity
