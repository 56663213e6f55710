"""
Build orchestrator for the Asset Tracker
Creates tables and the critical data every installation needs
"""

from asset_tracker import db
from asset_tracker.logger import get_logger

logger = get_logger("asset_tracker.build")

SYSTEM_USERNAME = 'system'


def ensure_system_user():
    """
    Make sure the system user exists. Batch jobs (Knox cleanup, license
    refresh) run as this user so their activities have an actor.

    Returns:
        The system User
    """
    from asset_tracker.data.core.user_info.user import User

    user, created = User.find_or_create_from_dict(
        {
            'username': SYSTEM_USERNAME,
            'first_name': 'System',
            'is_admin': True,
            'is_system': True,
        },
        lookup_fields=['username']
    )
    if created:
        logger.info(f"Created system user (ID: {user.id})")
    return user


def verify_critical_data():
    """
    Returns:
        bool: True if the system user is present
    """
    from asset_tracker.data.core.user_info.user import User
    return User.query.filter_by(username=SYSTEM_USERNAME, is_system=True).first() is not None


def build_database():
    """Create every table, then insert critical data when it is missing"""
    logger.info("Creating database tables")
    db.create_all()

    if verify_critical_data():
        logger.debug("Critical data already present")
    else:
        ensure_system_user()

    logger.info("Database build complete")
