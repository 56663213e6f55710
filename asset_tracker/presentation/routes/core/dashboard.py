"""
Dashboard routes
Summary counts and health check
"""

from flask import jsonify
from sqlalchemy import text
from asset_tracker import db
from asset_tracker.buisness.licenses import LicenseSeatManager
from asset_tracker.presentation.routes.core import api
from asset_tracker.services.core.asset_service import AssetService
from asset_tracker.services.core.license_service import LicenseService


@api.get('/stats')
def stats():
    LicenseSeatManager.refresh_expired_statuses()
    return jsonify({
        'assets': AssetService.get_status_counts(),
        'licenses': LicenseService.get_status_counts(),
    })


@api.get('/health')
def health():
    db.session.execute(text('SELECT 1'))
    return jsonify({'status': 'ok'})
