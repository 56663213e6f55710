"""
License routes
License CRUD and seat assignment
"""

from flask import jsonify, request
from asset_tracker.buisness.licenses import LicenseSeatManager
from asset_tracker.logger import get_logger
from asset_tracker.presentation.routes.core import api
from asset_tracker.presentation.routes.core.request_utils import (
    acting_user_id,
    list_response,
    loggable_body,
    snake_body,
)
from asset_tracker.services.core.license_service import LicenseService

logger = get_logger("asset_tracker.routes.licenses")


def refresh_expired():
    """Move licenses whose expiration date has passed to expired before they are read"""
    LicenseSeatManager.refresh_expired_statuses()


@api.get('/licenses')
def list_licenses():
    refresh_expired()
    return list_response(LicenseService.get_list_query(request), lambda l: l.to_dict(camel_case=True))


@api.get('/licenses/<int:license_id>')
def get_license(license_id):
    refresh_expired()
    return jsonify(LicenseSeatManager.get_license(license_id).to_dict(camel_case=True))


@api.post('/licenses')
def create_license():
    logger.debug(f"Create license: {loggable_body()}")
    license = LicenseSeatManager.create_license(snake_body(), acting_user_id())
    return jsonify(license.to_dict(camel_case=True)), 201


@api.patch('/licenses/<int:license_id>')
def update_license(license_id):
    logger.debug(f"Update license {license_id}: {loggable_body()}")
    license = LicenseSeatManager.update_license(license_id, snake_body(), acting_user_id())
    return jsonify(license.to_dict(camel_case=True))


@api.delete('/licenses/<int:license_id>')
def delete_license(license_id):
    LicenseSeatManager.delete_license(license_id, acting_user_id())
    return '', 204


@api.get('/licenses/<int:license_id>/assignments')
def license_assignments(license_id):
    return jsonify([a.to_dict(camel_case=True) for a in LicenseSeatManager.get_assignments(license_id)])


@api.post('/licenses/<int:license_id>/assign')
def assign_seat(license_id):
    body = snake_body()
    assignment, license = LicenseSeatManager.assign_seat(
        license_id,
        body.get('assigned_to'),
        notes=body.get('notes'),
        acting_user_id=acting_user_id()
    )
    return jsonify({
        'assignment': assignment.to_dict(camel_case=True),
        'license': license.to_dict(camel_case=True),
    }), 201
