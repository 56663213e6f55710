"""
License status derivation.

recompute_status is the only place a license status is decided; every
mutator that touches assigned_seats or expiration_date calls it and stores
the result.
"""

from datetime import date
from typing import Optional

from asset_tracker.data.core.license_info.license import LicenseStatus


def recompute_status(expiration_date: Optional[date], assigned_seats: int, today: Optional[date] = None) -> str:
    """
    Derive a license status.

    1. expiration date strictly before today -> expired
    2. otherwise any assigned seat -> active
    3. otherwise -> unused
    """
    if today is None:
        today = date.today()
    if expiration_date is not None and expiration_date < today:
        return LicenseStatus.EXPIRED
    if (assigned_seats or 0) > 0:
        return LicenseStatus.ACTIVE
    return LicenseStatus.UNUSED
