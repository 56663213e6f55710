from datetime import date

from asset_tracker.buisness.core.data_insertion_mixin import to_camel, to_snake
from asset_tracker.data.core.asset_info.asset import Asset
from asset_tracker.data.core.user_info.user import User


def test_key_mapping():
    assert to_camel('asset_tag') == 'assetTag'
    assert to_camel('expected_checkin_date') == 'expectedCheckinDate'
    assert to_camel('name') == 'name'
    assert to_snake('knoxId') == 'knox_id'
    assert to_snake('assignedSeats') == 'assigned_seats'


def test_from_dict_ignores_unknown_keys_and_stamps_audit(make_user):
    actor = make_user(username='actor')
    asset = Asset.from_dict(
        {'asset_tag': 'TAG-9', 'name': 'Laptop', 'status': 'available', 'colour': 'red'},
        actor.id,
    )
    assert asset.asset_tag == 'TAG-9'
    assert not hasattr(asset, 'colour')
    assert asset.created_by_id == actor.id
    assert asset.updated_by_id == actor.id


def test_to_dict_camel_case_and_dates(make_asset):
    asset = make_asset(purchase_date=date(2024, 3, 1))
    data = asset.to_dict(camel_case=True)
    assert data['assetTag'] == asset.asset_tag
    assert data['purchaseDate'] == '2024-03-01'

    plain = asset.to_dict(include_audit_fields=False)
    assert 'created_at' not in plain
    assert 'asset_tag' in plain


def test_find_or_create_is_idempotent(app):
    first, created = User.find_or_create_from_dict({'username': 'seed'}, lookup_fields=['username'])
    second, created_again = User.find_or_create_from_dict({'username': 'seed'}, lookup_fields=['username'])
    assert created is True
    assert created_again is False
    assert first.id == second.id
