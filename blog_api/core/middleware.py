import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp

from blog_api.core.exceptions import UnauthorizedError
from blog_api.core.responses import envelope
from blog_api.core.security import api_key_matches

logger = logging.getLogger(__name__)


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Gate every request under ``prefix`` on the ``x-api-key`` header.

    Runs before routing, so a bad key wins over unknown routes and
    unparseable bodies. The OpenAPI document stays public.

    ``key_provider`` is resolved through ``app.dependency_overrides`` on each
    request, so overriding it in tests swaps the expected key.
    """

    def __init__(self, app: ASGIApp, key_provider: Callable[[], str], prefix: str):
        super().__init__(app)
        self.key_provider = key_provider
        self.prefix = prefix.rstrip("/")

    def _is_guarded(self, request: Request) -> bool:
        path = request.url.path
        if path == request.app.openapi_url:
            return False
        return path == self.prefix or path.startswith(self.prefix + "/")

    async def dispatch(self, request: Request, call_next):
        # CORS preflight never carries custom headers
        if request.method == "OPTIONS" or not self._is_guarded(request):
            return await call_next(request)

        provider = request.app.dependency_overrides.get(self.key_provider, self.key_provider)
        if not api_key_matches(request.headers.get("x-api-key"), provider()):
            logger.warning(f"Rejected request: invalid API key on {request.url.path}")
            # Errors raised here would skip the app's exception handlers
            error = UnauthorizedError("Invalid API key")
            return envelope(code=error.code, message=error.message, status_code=error.status_code)

        return await call_next(request)
