"""
License status derivation
"""
from datetime import date, timedelta

import pytest

from asset_tracker.buisness.licenses import recompute_status
from asset_tracker.data.core.license_info.license import LicenseStatus

TODAY = date(2025, 6, 15)


@pytest.mark.parametrize('expiration, assigned, expected', [
    (None, 0, LicenseStatus.UNUSED),
    (None, 3, LicenseStatus.ACTIVE),
    (TODAY, 0, LicenseStatus.UNUSED),
    (TODAY, 1, LicenseStatus.ACTIVE),
    (TODAY - timedelta(days=1), 0, LicenseStatus.EXPIRED),
    (TODAY - timedelta(days=1), 5, LicenseStatus.EXPIRED),
    (TODAY + timedelta(days=30), 2, LicenseStatus.ACTIVE),
])
def test_recompute_status(expiration, assigned, expected):
    assert recompute_status(expiration, assigned, today=TODAY) == expected


def test_recompute_status_defaults_to_today():
    yesterday = date.today() - timedelta(days=1)
    assert recompute_status(yesterday, 1) == LicenseStatus.EXPIRED
    assert recompute_status(None, None) == LicenseStatus.UNUSED
