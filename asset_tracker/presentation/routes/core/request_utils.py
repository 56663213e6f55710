"""
Request helpers shared by the api routes
"""

from typing import Any, Dict, Optional
from flask import jsonify, request
from flask_login import current_user
from asset_tracker.buisness.core.data_insertion_mixin import to_snake
from asset_tracker.buisness.core.exceptions import ValidationError
from asset_tracker.utils.logging_sanitizer import sanitize_dict, sanitize_form_data


def acting_user_id() -> Optional[int]:
    """Id of the principal resolved from X-User-Id, None when anonymous"""
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None


def raw_body() -> Any:
    """Parsed JSON body, or the submitted form; empty dict when there is neither"""
    if request.is_json:
        body = request.get_json(silent=True)
        if body is None and request.get_data():
            raise ValidationError("Request body is not valid JSON")
        return body if body is not None else {}
    return dict(request.form)


def snake_body(body: Any = None) -> Dict[str, Any]:
    """Request body with camelCase keys mapped to model column names"""
    if body is None:
        body = raw_body()
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return {to_snake(key): value for key, value in body.items()}


def loggable_body() -> Dict[str, Any]:
    if request.form:
        return sanitize_form_data(request.form)
    body = request.get_json(silent=True)
    if isinstance(body, list):
        return {'items': len(body)}
    return sanitize_dict(body) if isinstance(body, dict) else {}


DEFAULT_PER_PAGE = 50
MAX_PER_PAGE = 500


def list_response(query, serialize):
    """
    JSON array of every row, or one page of rows when ``page`` is given.

    A paged response is an object: items, page, perPage, total, pages.
    """
    page = request.args.get('page', type=int)
    if page is None:
        return jsonify([serialize(item) for item in query.all()])

    per_page = max(1, min(request.args.get('perPage', DEFAULT_PER_PAGE, type=int), MAX_PER_PAGE))
    pagination = query.paginate(page=page, per_page=per_page, error_out=False)
    return jsonify({
        'items': [serialize(item) for item in pagination.items],
        'page': pagination.page,
        'perPage': pagination.per_page,
        'total': pagination.total,
        'pages': pagination.pages,
    })
