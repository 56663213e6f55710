"""
User routes
Users are the people assets are checked out to
"""

from flask import jsonify
from asset_tracker.buisness.core.user_context import UserContext
from asset_tracker.data.core.user_info.user import User
from asset_tracker.presentation.routes.core import api
from asset_tracker.presentation.routes.core.request_utils import acting_user_id, snake_body
from asset_tracker.services.core.activity_service import ActivityService


def user_payload(user):
    data = user.to_dict(camel_case=True)
    data['displayName'] = user.display_name
    return data


@api.get('/users')
def list_users():
    users = User.query.filter_by(is_system=False).order_by(User.username).all()
    return jsonify([user_payload(u) for u in users])


@api.get('/users/<int:user_id>')
def get_user(user_id):
    return jsonify(user_payload(UserContext(user_id).user))


@api.post('/users')
def create_user():
    ctx = UserContext.create(snake_body(), acting_user_id())
    return jsonify(user_payload(ctx.user)), 201


@api.get('/users/<int:user_id>/activities')
def user_activities(user_id):
    ctx = UserContext(user_id)
    return jsonify([a.to_dict(camel_case=True) for a in ActivityService.for_user(ctx.user_id)])
