"""
Response Envelope

Every endpoint answers with ``{code, message?, data?, pagination?}``.
Keys without a value are left out of the body.
"""

import math
from typing import Any, Dict, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from blog_api.core.response_codes import ResponseCode


def envelope(
    code: ResponseCode = ResponseCode.SUCCESS,
    message: Optional[str] = None,
    data: Any = None,
    pagination: Optional[Dict[str, int]] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Build the JSON response envelope."""
    content: Dict[str, Any] = {"code": int(code)}
    if message is not None:
        content["message"] = message
    if data is not None:
        content["data"] = jsonable_encoder(data)
    if pagination is not None:
        content["pagination"] = pagination
    return JSONResponse(status_code=status_code, content=content)


def build_pagination(page: int, limit: int, total: int, total_key: str) -> Dict[str, int]:
    """Pagination block, e.g. ``{currentPage, totalPages, totalPosts}``."""
    return {
        "currentPage": page,
        "totalPages": math.ceil(total / limit),
        total_key: total,
    }


def parse_page(raw: Optional[str]) -> int:
    """Page numbers are lenient: anything missing, non-numeric or below 1 means page 1."""
    try:
        page = int(raw) if raw is not None else 1
    except ValueError:
        return 1
    return page if page >= 1 else 1
