"""
Query helpers shared by the tests
"""

from asset_tracker.data.core.event_info.activity import Activity


def activities_for(action, item_type='asset', item_id=None):
    """Activities with the given action, oldest first"""
    query = Activity.query.filter_by(action=action, item_type=item_type)
    if item_id is not None:
        query = query.filter_by(item_id=item_id)
    return query.order_by(Activity.id).all()
