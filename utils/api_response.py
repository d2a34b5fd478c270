"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:    {"success": true, "data": {...}, "message": "..."}
    Error:      {"success": false, "error": "not_found", "message": "..."}
    Rejection:  {"success": false, "error": "schedule_conflict", "message": "...", "conflict": {...}}

Usage:
    from utils.api_response import api_success, api_error, api_result

    return api_success(data=assignment, status=201)
    return api_error('validation_error', 'quantity must be greater than zero', status=400)
    return api_result(reserve_equipment(...), status=201)
"""

from flask import jsonify, request
from typing import Any

from utils.errors import ValidationError


def api_success(
    data: Any = None,
    message: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields to include in the response.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, message: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Machine readable error code.
        message: Human readable explanation.
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., field, retryable).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error, 'message': message}

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_result(result: dict, status: int = 200, rejection_status: int = 409) -> tuple:
    """
    Convert an orchestrator result dict into a response.

    Successful results carry their remaining keys under 'data'; business rejections
    are passed through unchanged with a 409 status.

    Args:
        result: Dict returned by an orchestrator operation.
        status: Status for a successful result.
        rejection_status: Status for a business rejection.

    Returns:
        Tuple of (Response, status_code)
    """
    if result.get('success'):
        payload = {key: value for key, value in result.items() if key != 'success'}
        return api_success(data=payload, status=status)

    return jsonify(result), rejection_status


def get_json_payload() -> dict:
    """
    JSON object body of the current request.

    Raises:
        ValidationError: If the body is missing or not a JSON object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
