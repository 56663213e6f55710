"""
Transaction boundary shared by the lifecycle managers.

Each public manager operation runs inside exactly one unit of work: all of
its writes and activities commit together, or none of them do.
"""

from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError

from asset_tracker import db
from asset_tracker.buisness.core.exceptions import Conflict
from asset_tracker.logger import get_logger

logger = get_logger("asset_tracker.buisness.core.unit_of_work")


@contextmanager
def unit_of_work(commit: bool = True):
    """
    Run a block as one atomic change.

    Args:
        commit: Commit on success. When False the changes are only flushed,
                leaving the caller in charge of the transaction.
    """
    try:
        yield db.session
        if commit:
            db.session.commit()
        else:
            db.session.flush()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning(f"Integrity violation, changes rolled back: {e.orig}")
        raise Conflict("The change conflicts with existing data") from e
    except Exception:
        db.session.rollback()
        raise
