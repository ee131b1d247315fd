"""
Custom exception classes for the application.

Services raise these; the handlers registered in main.py turn them into
the response envelope with the matching HTTP status.
"""

from typing import Any, Dict, Optional, Sequence

from blog_api.core.response_codes import ResponseCode


class BlogAPIError(Exception):
    """Base application exception."""

    status_code: int = 500
    code: ResponseCode = ResponseCode.OPERATION_FAILED
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[ResponseCode] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# ============================================================
# 400
# ============================================================

class ValidationFailedError(BlogAPIError):
    status_code = 400
    code = ResponseCode.VALIDATION_FAILED
    default_message = "Validation failed"


class MissingFieldsError(BlogAPIError):
    status_code = 400
    code = ResponseCode.MISSING_FIELDS
    default_message = "All fields are required"


class InvalidPageError(BlogAPIError):
    status_code = 400
    code = ResponseCode.INVALID_PAGE
    default_message = "Requested page is out of range"


# ============================================================
# 401
# ============================================================

class UnauthorizedError(BlogAPIError):
    status_code = 401
    code = ResponseCode.UNAUTHORIZED
    default_message = "Unauthorized User Access"


class TokenMissingError(BlogAPIError):
    status_code = 401
    code = ResponseCode.HEADER_TOKEN_MISSING
    default_message = "Authorization token missing"


class TokenInvalidError(BlogAPIError):
    status_code = 401
    code = ResponseCode.HEADER_TOKEN_INVALID
    default_message = "Invalid or expired token"


class InvalidCredentialsError(BlogAPIError):
    status_code = 401
    code = ResponseCode.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


# ============================================================
# 403
# ============================================================

class InactiveAccountError(BlogAPIError):
    status_code = 403
    code = ResponseCode.INACTIVE_ACCOUNT
    default_message = "Unauthorized access"


class AccountNotVerifiedError(BlogAPIError):
    status_code = 403
    code = ResponseCode.OTP_NOT_VERIFIED
    default_message = "User not verified"


class OperationNotAllowedError(BlogAPIError):
    status_code = 403
    code = ResponseCode.OPERATION_NOT_ALLOWED
    default_message = "Operation not allowed"


# ============================================================
# 404 / 409 / 500
# ============================================================

class NotFoundError(BlogAPIError):
    status_code = 404
    code = ResponseCode.NO_DATA_FOUND
    default_message = "No data found"


class AccountNotFoundError(BlogAPIError):
    status_code = 404
    code = ResponseCode.USER_ACCOUNT_NOT_FOUND
    default_message = "User not found"


class AlreadyExistsError(BlogAPIError):
    status_code = 409
    code = ResponseCode.ALREADY_EXISTS
    default_message = "Resource already exists"


class OperationFailedError(BlogAPIError):
    status_code = 500
    code = ResponseCode.OPERATION_FAILED


# ============================================================
# Validation error messages
# ============================================================

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}
_VALUE_ERROR_PREFIX = "Value error, "


def _strip_value_error(msg: str) -> str:
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX):]
    return msg


def _field_name(loc: Sequence[Any]) -> Optional[str]:
    parts = [str(part) for part in loc if part not in _LOCATION_PREFIXES]
    return parts[-1] if parts else None


def format_validation_error(errors: Sequence[Dict[str, Any]]) -> str:
    """
    Build a human readable message from the first validation error.

    Custom messages raised by validators are returned unchanged; built-in
    pydantic errors are rephrased to name the offending field.
    """
    if not errors:
        return "Validation failed"

    error = errors[0]
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    field = _field_name(error.get("loc", ()))

    if error_type == "json_invalid":
        return "Request body is not valid JSON"

    if field is None:
        if error_type == "missing":
            return "Request body is required"
        if error_type == "value_error" and "error" in ctx:
            return str(ctx["error"])
        return _strip_value_error(error.get("msg", "Validation failed"))

    if error_type == "missing":
        return f'"{field}" is required'
    if error_type == "value_error":
        if "reason" in ctx:
            return f'"{field}" must be a valid email'
        if "error" in ctx:
            return str(ctx["error"])
        return _strip_value_error(error.get("msg", "is invalid"))
    if error_type == "string_too_short":
        min_length = ctx.get("min_length", 1)
        if min_length <= 1:
            return f'"{field}" is not allowed to be empty'
        return f'"{field}" length must be at least {min_length} characters long'
    if error_type == "string_too_long":
        return f'"{field}" length must be less than or equal to {ctx.get("max_length")} characters long'
    if error_type == "string_pattern_mismatch":
        return f'"{field}" with value fails to match the required pattern'
    if error_type == "string_type":
        return f'"{field}" must be a string'
    if error_type in ("int_parsing", "int_type", "int_from_float"):
        return f'"{field}" must be a number'
    if error_type == "less_than_equal":
        return f'"{field}" must be less than or equal to {ctx.get("le")}'
    if error_type == "greater_than_equal":
        return f'"{field}" must be greater than or equal to {ctx.get("ge")}'
    if error_type == "url_too_long":
        return f'"{field}" length must be less than or equal to {ctx.get("max_length")} characters long'
    if error_type.startswith("url"):
        return f'"{field}" must be a valid uri'

    msg = error.get("msg", "is invalid")
    return f'"{field}" {msg[:1].lower()}{msg[1:]}'
