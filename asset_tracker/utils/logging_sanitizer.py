"""
Logging Sanitizer Utility

Provides utilities to sanitize request payloads before logging.
License keys and credentials never reach the log files.
"""

from typing import Any, Dict, Optional
from werkzeug.datastructures import ImmutableMultiDict


# Fields that should never be logged (compared lower-case, camelCase and snake_case)
SENSITIVE_FIELDS = {
    'password',
    'secret',
    'token',
    'api_key',
    'apikey',
    'auth_token',
    'access_token',
    'refresh_token',
    'session_id',
    'key',
    'license_key',
    'licensekey',
    'product_key',
    'productkey',
}


def _is_sensitive(key: str) -> bool:
    return key.lower() in SENSITIVE_FIELDS


def sanitize_dict(data: Optional[Dict[str, Any]], redact_text: str = '[REDACTED]') -> Optional[Dict[str, Any]]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Args:
        data: Dictionary to sanitize
        redact_text: Text to use for redacted values (default: '[REDACTED]')

    Returns:
        Sanitized dictionary with sensitive values replaced

    Example:
        >>> sanitize_dict({'name': 'Office 365', 'key': 'ABCD-1234'})
        {'name': 'Office 365', 'key': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if _is_sensitive(str(key)):
            sanitized[key] = redact_text
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, redact_text)
        elif isinstance(value, list):
            sanitized[key] = [
                sanitize_dict(item, redact_text) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized


def sanitize_form_data(form_data: ImmutableMultiDict, redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """Sanitize Flask request.form data for safe logging."""
    return sanitize_dict(dict(form_data), redact_text)


def sanitize_exception_message(exception: Exception) -> str:
    """
    Sanitize exception messages to ensure they don't contain sensitive data.

    Args:
        exception: Exception to sanitize

    Returns:
        Sanitized exception message
    """
    message = str(exception)

    # 'key' alone is too common in database error text to act as a marker
    markers = SENSITIVE_FIELDS - {'key'}
    if any(field in message.lower() for field in markers):
        return f"{type(exception).__name__}: [Message contains sensitive data]"

    return message
