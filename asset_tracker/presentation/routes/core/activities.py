"""
Activity routes
Read-only access to the audit trail
"""

from flask import jsonify, request
from asset_tracker.presentation.routes.core import api
from asset_tracker.services.core.activity_service import ActivityService


@api.get('/activities')
def list_activities():
    activities = ActivityService.get_recent(
        limit=min(request.args.get('limit', 100, type=int), 1000),
        item_type=request.args.get('itemType'),
        action=request.args.get('action')
    )
    return jsonify([a.to_dict(camel_case=True) for a in activities])
