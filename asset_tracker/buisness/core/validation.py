"""
Shared validation and uniqueness helpers.

Every manager runs its input through these before the first write so a
malformed payload never leaves a partial change behind.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from asset_tracker.buisness.core.exceptions import ValidationError, Conflict
from asset_tracker.data.core.asset_info.asset import Asset, AssetStatus
from asset_tracker.data.core.license_info.license import UNLIMITED_SEATS


def parse_date(value: Any, field: str) -> Optional[date]:
    """Accept a date, a datetime, an ISO string or empty; anything else is malformed"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            # Plain dates and full ISO timestamps are both accepted
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)")


def parse_string(value: Any, field: str, max_length: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ValidationError(f"{field} must be a string")
    text = str(value).strip()
    if max_length and len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text or None


def parse_required_string(value: Any, field: str, max_length: Optional[int] = None) -> str:
    text = parse_string(value, field, max_length)
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def parse_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('true', '1', 'yes', 'on', 'false', '0', 'no', 'off'):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValidationError(f"{field} must be a boolean")


def parse_non_negative_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a non-negative integer")
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    if isinstance(value, int) and value >= 0:
        return value
    raise ValidationError(f"{field} must be a non-negative integer")


def parse_id(value: Any, field: str) -> int:
    """Positive integer id, from JSON numbers or digit strings"""
    number = parse_non_negative_int(value, field)
    if number == 0:
        raise ValidationError(f"{field} must be a positive integer")
    return number


def parse_seats(value: Any) -> str:
    """Seat capacity is either a non-negative integer (stored as string) or 'Unlimited'"""
    if isinstance(value, str) and value.strip().lower() == UNLIMITED_SEATS.lower():
        return UNLIMITED_SEATS
    try:
        return str(parse_non_negative_int(value, 'seats'))
    except ValidationError:
        raise ValidationError(f"seats must be a non-negative integer or '{UNLIMITED_SEATS}'")


def parse_asset_status(value: Any) -> str:
    status = parse_required_string(value, 'status').lower()
    if status not in AssetStatus.ALL:
        raise ValidationError(f"status must be one of: {', '.join(sorted(AssetStatus.ALL))}")
    return status


def normalize_knox_id(value: Any) -> Optional[str]:
    """Blank knox IDs are treated as absent"""
    return parse_string(value, 'knox_id', max_length=100)


ASSET_FIELD_PARSERS: Dict[str, Callable[[Any], Any]] = {
    'asset_tag': lambda v: parse_required_string(v, 'asset_tag', 100),
    'name': lambda v: parse_required_string(v, 'name', 200),
    'category': lambda v: parse_string(v, 'category', 100),
    'status': parse_asset_status,
    'serial_number': lambda v: parse_string(v, 'serial_number', 100),
    'model': lambda v: parse_string(v, 'model', 100),
    'manufacturer': lambda v: parse_string(v, 'manufacturer', 100),
    'location': lambda v: parse_string(v, 'location', 100),
    'purchase_date': lambda v: parse_date(v, 'purchase_date'),
    'purchase_cost': lambda v: parse_string(v, 'purchase_cost', 50),
    'notes': lambda v: parse_string(v, 'notes'),
    'knox_id': normalize_knox_id,
    'expected_checkin_date': lambda v: parse_date(v, 'expected_checkin_date'),
    'finance_updated': lambda v: parse_bool(v, 'finance_updated'),
}

LICENSE_FIELD_PARSERS: Dict[str, Callable[[Any], Any]] = {
    'name': lambda v: parse_required_string(v, 'name', 200),
    'key': lambda v: parse_string(v, 'key', 255),
    'seats': parse_seats,
    'assigned_seats': lambda v: parse_non_negative_int(v, 'assigned_seats'),
    'expiration_date': lambda v: parse_date(v, 'expiration_date'),
    'manufacturer': lambda v: parse_string(v, 'manufacturer', 100),
    'purchase_date': lambda v: parse_date(v, 'purchase_date'),
    'purchase_cost': lambda v: parse_string(v, 'purchase_cost', 50),
    'notes': lambda v: parse_string(v, 'notes'),
}

USER_FIELD_PARSERS: Dict[str, Callable[[Any], Any]] = {
    'username': lambda v: parse_required_string(v, 'username', 80),
    'first_name': lambda v: parse_string(v, 'first_name', 80),
    'last_name': lambda v: parse_string(v, 'last_name', 80),
    'email': lambda v: parse_string(v, 'email', 120),
    'department': lambda v: parse_string(v, 'department', 120),
    'is_admin': lambda v: parse_bool(v, 'is_admin'),
}


def validate_fields(data: Dict[str, Any], parsers: Dict[str, Callable[[Any], Any]],
                    required=(), rejected=()) -> Dict[str, Any]:
    """
    Parse every known field of ``data``.

    Args:
        data: snake_case field values as supplied by the caller
        parsers: field name -> parser; unknown fields are ignored
        required: fields that must be present
        rejected: fields the caller may not set directly

    Returns:
        dict of parsed values, containing only the fields that were supplied
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    for field in rejected:
        if field in data:
            raise ValidationError(f"{field} cannot be set directly")

    for field in required:
        if data.get(field) in (None, ''):
            raise ValidationError(f"{field} is required")

    return {field: parsers[field](value) for field, value in data.items() if field in parsers}


def ensure_unique_asset_tag(asset_tag: str, exclude_id: Optional[int] = None) -> None:
    """Raise Conflict when another asset already carries ``asset_tag``"""
    query = Asset.query.filter(Asset.asset_tag == asset_tag)
    if exclude_id is not None:
        query = query.filter(Asset.id != exclude_id)
    if query.first() is not None:
        raise Conflict(f"Asset tag '{asset_tag}' already exists")
