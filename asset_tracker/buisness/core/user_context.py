"""
User Context (Core)
Creation and lookup of the people assets are checked out to.
"""

from typing import Any, Dict, Optional

from asset_tracker import db
from asset_tracker.buisness.core.activity_recorder import ActivityRecorder, ItemType
from asset_tracker.buisness.core.exceptions import Conflict, NotFound
from asset_tracker.buisness.core.unit_of_work import unit_of_work
from asset_tracker.buisness.core.validation import USER_FIELD_PARSERS, parse_id, validate_fields
from asset_tracker.data.core.user_info.user import User
from asset_tracker.logger import get_logger

logger = get_logger("asset_tracker.buisness.core.user_context")


class UserContext:
    """Wraps a User and provides the user operations the API needs"""

    def __init__(self, user):
        if isinstance(user, User):
            self._user = user
        else:
            self._user = db.session.get(User, parse_id(user, 'user_id'))
            if self._user is None:
                raise NotFound(f"User {user} not found")

    @property
    def user(self) -> User:
        return self._user

    @property
    def user_id(self) -> int:
        return self._user.id

    @classmethod
    def create(cls, data: Dict[str, Any], acting_user_id: Optional[int] = None, commit: bool = True) -> 'UserContext':
        """
        Create a user.

        Raises:
            ValidationError: missing username or malformed field
            Conflict: username already taken
        """
        fields = validate_fields(data, USER_FIELD_PARSERS, required=('username',))
        if User.query.filter_by(username=fields['username']).first():
            raise Conflict(f"Username '{fields['username']}' already exists")

        with unit_of_work(commit):
            user = User.from_dict(fields)
            db.session.add(user)
            db.session.flush()
            ActivityRecorder.record(
                'create', ItemType.USER, user.id, acting_user_id,
                f"User {user.username} created"
            )
            logger.info(f"User created: {user.username} (ID: {user.id})")
            return cls(user)
