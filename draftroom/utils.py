"""
Utility functions for the draft room application.

Contains clock helpers, response helpers, request parsing and input
validation used across the application.
"""

import time
from typing import Any, Dict, Optional, Tuple

from flask import jsonify, request

from draftroom.constants import CLIENT_ID_HEADER, MAX_DISPLAY_NAME_LENGTH


# ==================== CLOCK ====================

def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


# ==================== RESPONSE HELPERS ====================

def success_response(
    data: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    **kwargs: Any
) -> Tuple[Dict[str, Any], int]:
    """
    Create a standardized success response.

    Args:
        data: Optional data dictionary to include
        message: Optional success message
        **kwargs: Additional key-value pairs to include

    Returns:
        Tuple of (response, status code)
    """
    response = {'success': True}
    if message:
        response['message'] = message
    if data:
        response.update(data)
    response.update(kwargs)
    return jsonify(response), 200


def error_response(
    error: str,
    status_code: int = 400,
    **kwargs: Any
) -> Tuple[Dict[str, Any], int]:
    """
    Create a standardized error response.

    Args:
        error: Error message
        status_code: HTTP status code (default: 400)
        **kwargs: Additional key-value pairs to include

    Returns:
        Tuple of (response, status code)
    """
    response = {'success': False, 'error': error}
    response.update(kwargs)
    return jsonify(response), status_code


# ==================== REQUEST HELPERS ====================

def get_json_body() -> Dict[str, Any]:
    """Return the JSON request body, or an empty dict when absent."""
    return request.get_json(silent=True) or {}


def get_client_id() -> str:
    """Client identity of the caller, taken from the X-Client-Id header."""
    return (request.headers.get(CLIENT_ID_HEADER) or '').strip()


# ==================== INPUT VALIDATION ====================

def validate_positive_int(
    value: Any,
    field_name: str,
    allow_zero: bool = False
) -> Tuple[Optional[int], Optional[str]]:
    """
    Validate and convert value to positive integer.

    Booleans and fractional numbers are rejected.

    Args:
        value: Value to validate
        field_name: Name of field for error message
        allow_zero: Whether to allow zero value

    Returns:
        Tuple of (converted value or None, error message or None)
    """
    if isinstance(value, bool):
        return None, f"{field_name} must be a valid integer"
    try:
        if isinstance(value, float) and not value.is_integer():
            return None, f"{field_name} must be a whole number"
        int_value = int(value)
    except (TypeError, ValueError):
        return None, f"{field_name} must be a valid integer"

    if allow_zero:
        if int_value < 0:
            return None, f"{field_name} must be non-negative"
    elif int_value <= 0:
        return None, f"{field_name} must be positive"
    return int_value, None


def clean_display_name(name: Optional[str]) -> str:
    """Trim a display name and cut it to the maximum length."""
    return (name or '').strip()[:MAX_DISPLAY_NAME_LENGTH]
