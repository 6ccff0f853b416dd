"""
Standardized response envelope for API endpoints.

Every endpoint answers with {status_code, message, data, error}.
"""

from typing import Any
from fastapi import status
from fastapi.responses import JSONResponse

from tradejournal.shared.exceptions import AppException


def success_response(
    status_code: int,
    message: str,
    data: Any = None
) -> dict:
    """
    Create a success response.

    Example:
        >>> success_response(201, "Transfer completed", {"id": "123"})
        {"status_code": 201, "message": "Transfer completed", "data": {"id": "123"}, "error": None}
    """
    return {
        "status_code": status_code,
        "message": message,
        "data": data,
        "error": None
    }


def error_response(
    status_code: int,
    message: str,
    error_code: str,
    error_message: str
) -> dict:
    """
    Create an error response.

    Example:
        >>> error_response(404, "Transfer failed", "ACCOUNT_NOT_FOUND", "Account 42 not found")
        {"status_code": 404, "message": "Transfer failed", "data": None,
         "error": {"code": "ACCOUNT_NOT_FOUND", "message": "Account 42 not found"}}
    """
    return {
        "status_code": status_code,
        "message": message,
        "data": None,
        "error": {
            "code": error_code,
            "message": error_message
        }
    }


def error_json_response(status_code: int, message: str, error_code: str, error_message: str) -> JSONResponse:
    """JSON error response carrying the envelope and the matching HTTP status."""
    return JSONResponse(
        status_code=status_code,
        content=error_response(
            status_code=status_code,
            message=message,
            error_code=error_code,
            error_message=error_message
        )
    )


def app_exception_response(exc: AppException, message: str) -> JSONResponse:
    """Render an AppException with its own status and code."""
    return error_json_response(
        status_code=exc.status_code,
        message=message,
        error_code=exc.code,
        error_message=exc.message
    )


def internal_error_response(message: str) -> JSONResponse:
    """Generic 500 that doesn't leak internals."""
    return error_json_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
        error_code="INTERNAL_SERVER_ERROR",
        error_message="An unexpected error occurred"
    )
