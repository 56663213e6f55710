"""
Checkout, checkin and edit transitions of AssetLifecycleManager
"""
from datetime import date

import pytest

from asset_tracker import db
from asset_tracker.buisness.assets import AssetLifecycleManager
from asset_tracker.buisness.core.exceptions import (
    Conflict,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from asset_tracker.data.core.asset_info.asset import Asset, AssetStatus
from asset_tracker.test.helpers import activities_for


def test_checkout_available_asset(make_user, make_asset):
    user = make_user(first_name='Dana', last_name='Reyes')
    asset = make_asset()

    result = AssetLifecycleManager.checkout(asset.id, user.id, expected_checkin_date='2030-01-15')

    assert result.status == AssetStatus.DEPLOYED
    assert result.assigned_to == user.id
    assert result.checkout_date == date.today()
    assert result.expected_checkin_date == date(2030, 1, 15)

    checkouts = activities_for('checkout', item_id=asset.id)
    assert len(checkouts) == 1
    assert checkouts[0].user_id == user.id
    assert 'Dana Reyes' in checkouts[0].notes


def test_checkout_with_knox_id_sets_it(make_user, make_asset):
    user = make_user()
    asset = make_asset()

    result = AssetLifecycleManager.checkout(asset.id, user.id, knox_id='KNOX-7')

    assert result.knox_id == 'KNOX-7'
    assert result.status == AssetStatus.DEPLOYED


@pytest.mark.parametrize('status', [AssetStatus.DEPLOYED, AssetStatus.PENDING,
                                    AssetStatus.ARCHIVED, AssetStatus.OVERDUE])
def test_checkout_requires_available(make_user, make_asset, status):
    holder = make_user()
    other = make_user()
    asset = make_asset(status=status, assigned_to=holder.id if status in AssetStatus.CHECKED_OUT else None)

    with pytest.raises(InvalidTransition):
        AssetLifecycleManager.checkout(asset.id, other.id)

    reloaded = db.session.get(Asset, asset.id)
    assert reloaded.status == status
    assert activities_for('checkout') == []


def test_checkout_unknown_asset_or_user(make_user, make_asset):
    user = make_user()
    asset = make_asset()

    with pytest.raises(NotFound):
        AssetLifecycleManager.checkout(9999, user.id)
    with pytest.raises(NotFound):
        AssetLifecycleManager.checkout(asset.id, 9999)
    with pytest.raises(ValidationError):
        AssetLifecycleManager.checkout(asset.id, None)

    assert db.session.get(Asset, asset.id).status == AssetStatus.AVAILABLE


def test_checkout_loses_race_when_status_changed_underneath(make_user, make_asset):
    user = make_user()
    asset = make_asset()
    assert asset.status == AssetStatus.AVAILABLE

    # Another writer archives the row; the loaded object still says available
    Asset.query.filter_by(id=asset.id).update({'status': AssetStatus.ARCHIVED}, synchronize_session=False)

    with pytest.raises(InvalidTransition):
        AssetLifecycleManager.checkout_staged(asset, user.id)

    assert db.session.get(Asset, asset.id).status == AssetStatus.ARCHIVED
    assert activities_for('checkout') == []


@pytest.mark.parametrize('status', [AssetStatus.DEPLOYED, AssetStatus.OVERDUE])
def test_checkin_clears_holder_fields(make_user, make_asset, status):
    holder = make_user()
    asset = make_asset(
        status=status,
        assigned_to=holder.id,
        checkout_date=date(2024, 3, 1),
        expected_checkin_date=date(2024, 4, 1),
        knox_id='KNOX-1'
    )

    result = AssetLifecycleManager.checkin(asset.id)

    assert result.status == AssetStatus.AVAILABLE
    assert result.assigned_to is None
    assert result.checkout_date is None
    assert result.expected_checkin_date is None
    assert result.knox_id is None

    checkins = activities_for('checkin', item_id=asset.id)
    assert len(checkins) == 1
    assert checkins[0].user_id == holder.id


def test_checkin_records_acting_user(make_user, make_asset):
    holder = make_user()
    clerk = make_user()
    asset = make_asset(status=AssetStatus.DEPLOYED, assigned_to=holder.id)

    AssetLifecycleManager.checkin(asset.id, acting_user_id=clerk.id)

    assert activities_for('checkin', item_id=asset.id)[0].user_id == clerk.id


@pytest.mark.parametrize('status', [AssetStatus.AVAILABLE, AssetStatus.PENDING, AssetStatus.ARCHIVED])
def test_checkin_requires_checked_out(make_asset, status):
    asset = make_asset(status=status)

    with pytest.raises(InvalidTransition):
        AssetLifecycleManager.checkin(asset.id)

    assert db.session.get(Asset, asset.id).status == status


def test_checkin_unknown_asset():
    with pytest.raises(NotFound):
        AssetLifecycleManager.checkin(424242)


def test_create_asset_records_activity(make_user):
    user = make_user()

    asset = AssetLifecycleManager.create_asset(
        {'asset_tag': 'LT-100', 'name': 'ThinkPad', 'purchase_date': '2024-02-10'},
        acting_user_id=user.id
    )

    assert asset.status == AssetStatus.AVAILABLE
    assert asset.purchase_date == date(2024, 2, 10)
    assert asset.created_by_id == user.id
    assert len(activities_for('create', item_id=asset.id)) == 1


def test_create_asset_rejects_duplicate_tag(make_asset):
    make_asset(asset_tag='LT-1')

    with pytest.raises(Conflict):
        AssetLifecycleManager.create_asset({'asset_tag': 'LT-1', 'name': 'Second'})

    assert Asset.query.count() == 1


def test_create_asset_validation():
    with pytest.raises(ValidationError):
        AssetLifecycleManager.create_asset({'name': 'No tag'})
    with pytest.raises(ValidationError):
        AssetLifecycleManager.create_asset({'asset_tag': 'X', 'name': 'Bad date', 'purchase_date': 'soon'})
    with pytest.raises(ValidationError):
        AssetLifecycleManager.create_asset({'asset_tag': 'X', 'name': 'Deployed', 'status': 'deployed'})
    with pytest.raises(ValidationError):
        AssetLifecycleManager.create_asset({'asset_tag': 'X', 'name': 'Held', 'assigned_to': 1})

    assert Asset.query.count() == 0


def test_update_asset_rejects_duplicate_tag(make_asset):
    make_asset(asset_tag='LT-1')
    second = make_asset(asset_tag='LT-2')

    with pytest.raises(Conflict):
        AssetLifecycleManager.update_asset(second.id, {'asset_tag': 'LT-1'})

    assert db.session.get(Asset, second.id).asset_tag == 'LT-2'


def test_update_asset_keeps_own_tag(make_asset):
    asset = make_asset(asset_tag='LT-1')

    result = AssetLifecycleManager.update_asset(asset.id, {'asset_tag': 'LT-1', 'location': 'Berlin'})

    assert result.location == 'Berlin'
    updates = activities_for('update', item_id=asset.id)
    assert len(updates) == 1
    assert 'location' in updates[0].notes


@pytest.mark.parametrize('current, target', [
    (AssetStatus.AVAILABLE, AssetStatus.ARCHIVED),
    (AssetStatus.ARCHIVED, AssetStatus.PENDING),
    (AssetStatus.PENDING, AssetStatus.AVAILABLE),
    (AssetStatus.DEPLOYED, AssetStatus.OVERDUE),
    (AssetStatus.OVERDUE, AssetStatus.DEPLOYED),
])
def test_update_allowed_status_moves(make_user, make_asset, current, target):
    holder = make_user()
    asset = make_asset(status=current, assigned_to=holder.id if current in AssetStatus.CHECKED_OUT else None)

    result = AssetLifecycleManager.update_asset(asset.id, {'status': target})

    assert result.status == target


@pytest.mark.parametrize('current, target', [
    (AssetStatus.AVAILABLE, AssetStatus.DEPLOYED),
    (AssetStatus.AVAILABLE, AssetStatus.OVERDUE),
    (AssetStatus.DEPLOYED, AssetStatus.AVAILABLE),
    (AssetStatus.OVERDUE, AssetStatus.ARCHIVED),
])
def test_update_forbidden_status_moves(make_user, make_asset, current, target):
    holder = make_user()
    asset = make_asset(status=current, assigned_to=holder.id if current in AssetStatus.CHECKED_OUT else None)

    with pytest.raises(InvalidTransition):
        AssetLifecycleManager.update_asset(asset.id, {'status': target})

    assert db.session.get(Asset, asset.id).status == current


def test_set_finance_updated(make_asset):
    asset = make_asset()

    result = AssetLifecycleManager.set_finance_updated(asset.id, True)

    assert result.finance_updated is True
    assert 'Updated' in activities_for('update', item_id=asset.id)[0].notes


def test_delete_asset(make_asset):
    asset = make_asset()
    asset_id = asset.id

    AssetLifecycleManager.delete_asset(asset_id)

    assert db.session.get(Asset, asset_id) is None
    assert len(activities_for('delete', item_id=asset_id)) == 1
    with pytest.raises(NotFound):
        AssetLifecycleManager.delete_asset(asset_id)


def test_import_assets_all_or_nothing(make_asset):
    make_asset(asset_tag='EXISTING')

    with pytest.raises(Conflict):
        AssetLifecycleManager.import_assets([
            {'asset_tag': 'NEW-1', 'name': 'One'},
            {'asset_tag': 'EXISTING', 'name': 'Two'},
        ])
    assert Asset.query.count() == 1

    with pytest.raises(Conflict):
        AssetLifecycleManager.import_assets([
            {'asset_tag': 'NEW-1', 'name': 'One'},
            {'asset_tag': 'NEW-1', 'name': 'Again'},
        ])
    assert Asset.query.count() == 1

    with pytest.raises(ValidationError, match='Row 2'):
        AssetLifecycleManager.import_assets([
            {'asset_tag': 'NEW-1', 'name': 'One'},
            {'asset_tag': 'NEW-2'},
        ])
    assert Asset.query.count() == 1

    created = AssetLifecycleManager.import_assets([
        {'asset_tag': 'NEW-1', 'name': 'One'},
        {'asset_tag': 'NEW-2', 'name': 'Two'},
    ])
    assert [a.asset_tag for a in created] == ['NEW-1', 'NEW-2']
    assert Asset.query.count() == 3


def test_import_assets_rejects_empty_batch():
    with pytest.raises(ValidationError):
        AssetLifecycleManager.import_assets([])
    with pytest.raises(ValidationError):
        AssetLifecycleManager.import_assets({'asset_tag': 'X'})
