"""
Response Codes

Application-level result codes carried in the ``code`` field of every
response envelope. They are independent of the HTTP status code.
"""

from enum import IntEnum


class ResponseCode(IntEnum):
    SUCCESS = 200
    VALIDATION_FAILED = 400
    UNAUTHORIZED = 401
    INVALID_CREDENTIALS = 402
    INACTIVE_ACCOUNT = 403
    NO_DATA_FOUND = 404
    HEADER_TOKEN_MISSING = 405
    HEADER_TOKEN_INVALID = 406
    OTP_NOT_VERIFIED = 407
    USER_ACCOUNT_NOT_FOUND = 408
    ALREADY_EXISTS = 409
    INVALID_PAGE = 410
    MISSING_FIELDS = 411
    OPERATION_NOT_ALLOWED = 412
    OPERATION_FAILED = 500
