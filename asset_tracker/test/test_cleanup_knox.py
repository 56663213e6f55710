"""
Orphan Knox ID cleanup
"""
from datetime import date

from asset_tracker import db
from asset_tracker.buisness.assets import AssetLifecycleManager
from asset_tracker.data.core.asset_info.asset import Asset, AssetStatus
from asset_tracker.test.helpers import activities_for


def test_cleanup_clears_only_orphans(make_user, make_asset):
    admin = make_user(username='admin')
    holder = make_user()
    available = make_asset(knox_id='K-A', location='Shelf 1')
    pending = make_asset(status=AssetStatus.PENDING, knox_id='K-P')
    archived = make_asset(status=AssetStatus.ARCHIVED, knox_id='K-R')
    deployed = make_asset(status=AssetStatus.DEPLOYED, knox_id='K-D', assigned_to=holder.id,
                          checkout_date=date(2024, 1, 2))
    overdue = make_asset(status=AssetStatus.OVERDUE, knox_id='K-O', assigned_to=holder.id)
    clean = make_asset()

    corrected = AssetLifecycleManager.cleanup_orphan_knox_ids(acting_user_id=admin.id)

    assert sorted(a.id for a in corrected) == sorted([available.id, pending.id, archived.id])

    for asset_id in (available.id, pending.id, archived.id):
        assert db.session.get(Asset, asset_id).knox_id is None

    kept = db.session.get(Asset, deployed.id)
    assert kept.knox_id == 'K-D'
    assert kept.assigned_to == holder.id
    assert kept.checkout_date == date(2024, 1, 2)
    assert db.session.get(Asset, overdue.id).knox_id == 'K-O'

    # Other fields untouched
    reloaded = db.session.get(Asset, available.id)
    assert reloaded.status == AssetStatus.AVAILABLE
    assert reloaded.location == 'Shelf 1'
    assert db.session.get(Asset, pending.id).status == AssetStatus.PENDING
    assert db.session.get(Asset, clean.id).knox_id is None

    records = activities_for('cleanup-knox')
    assert len(records) == 4
    assert all(r.user_id == admin.id for r in records)
    summary = records[-1]
    assert summary.item_id == 0
    assert '3 assets' in summary.notes


def test_cleanup_is_idempotent(make_asset):
    make_asset(knox_id='K-A')

    assert len(AssetLifecycleManager.cleanup_orphan_knox_ids()) == 1
    assert AssetLifecycleManager.cleanup_orphan_knox_ids() == []
