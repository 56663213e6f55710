"""License seats - business logic layer"""

from asset_tracker.buisness.licenses.license_seat_manager import LicenseSeatManager
from asset_tracker.buisness.licenses.license_status import recompute_status

__all__ = [
    'LicenseSeatManager',
    'recompute_status'
]
