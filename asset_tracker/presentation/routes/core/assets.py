"""
Asset routes
List, edit and lifecycle transitions for assets
"""

from flask import jsonify, request
from asset_tracker import limiter
from asset_tracker.buisness.assets import AssetLifecycleManager
from asset_tracker.logger import get_logger
from asset_tracker.presentation.routes.core import api
from asset_tracker.presentation.routes.core.request_utils import (
    acting_user_id,
    list_response,
    loggable_body,
    raw_body,
    snake_body,
)
from asset_tracker.services.core.activity_service import ActivityService
from asset_tracker.services.core.asset_service import AssetService

logger = get_logger("asset_tracker.routes.assets")


def asset_payload(asset):
    data = asset.to_dict(camel_case=True)
    data['assignedUser'] = asset.assignee.display_name if asset.assignee else None
    return data


@api.get('/assets')
def list_assets():
    return list_response(AssetService.get_list_query(request), asset_payload)


@api.get('/assets/<int:asset_id>')
def get_asset(asset_id):
    return jsonify(asset_payload(AssetLifecycleManager.get_asset(asset_id)))


@api.post('/assets')
def create_asset():
    logger.debug(f"Create asset: {loggable_body()}")
    asset = AssetLifecycleManager.create_asset(snake_body(), acting_user_id())
    return jsonify(asset_payload(asset)), 201


@api.patch('/assets/<int:asset_id>')
def update_asset(asset_id):
    logger.debug(f"Update asset {asset_id}: {loggable_body()}")
    asset = AssetLifecycleManager.update_asset(asset_id, snake_body(), acting_user_id())
    return jsonify(asset_payload(asset))


@api.delete('/assets/<int:asset_id>')
def delete_asset(asset_id):
    AssetLifecycleManager.delete_asset(asset_id, acting_user_id())
    return '', 204


@api.post('/assets/import')
def import_assets():
    logger.debug(f"Import assets: {loggable_body()}")
    body = raw_body()
    rows = body.get('assets') if isinstance(body, dict) else body
    if isinstance(rows, list):
        rows = [snake_body(row) for row in rows]
    assets = AssetLifecycleManager.import_assets(rows, acting_user_id())
    return jsonify([asset_payload(a) for a in assets]), 201


@api.post('/assets/<int:asset_id>/checkout')
def checkout_asset(asset_id):
    body = snake_body()
    user_id = body.get('user_id') or acting_user_id()
    asset = AssetLifecycleManager.checkout(
        asset_id,
        user_id,
        expected_checkin_date=body.get('expected_checkin_date'),
        notes=body.get('notes'),
        knox_id=body.get('knox_id')
    )
    return jsonify(asset_payload(asset))


@api.post('/assets/<int:asset_id>/checkin')
def checkin_asset(asset_id):
    asset = AssetLifecycleManager.checkin(asset_id, acting_user_id())
    return jsonify(asset_payload(asset))


@api.post('/assets/<int:asset_id>/finance')
def set_finance_updated(asset_id):
    body = snake_body()
    asset = AssetLifecycleManager.set_finance_updated(asset_id, body.get('finance_updated'), acting_user_id())
    return jsonify(asset_payload(asset))


@api.post('/assets/cleanup-knox')
@limiter.limit("10 per minute")
def cleanup_knox():
    corrected = AssetLifecycleManager.cleanup_orphan_knox_ids(acting_user_id())
    return jsonify({
        'message': f"Cleaned up Knox IDs for {len(corrected)} assets that were not checked out",
        'count': len(corrected),
        'updatedAssets': [
            {'id': a.id, 'assetTag': a.asset_tag, 'name': a.name, 'status': a.status}
            for a in corrected
        ],
    })


@api.get('/assets/<int:asset_id>/activities')
def asset_activities(asset_id):
    AssetLifecycleManager.get_asset(asset_id)
    return jsonify([a.to_dict(camel_case=True) for a in ActivityService.for_asset(asset_id)])
