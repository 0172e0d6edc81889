from typing import Awaitable, Callable, Sequence

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from .core.exceptions import SocialChainException, to_error_body, to_http_status
from .core.logging import get_logger

logger = get_logger("auth")

PROTECTED_PREFIXES = ("/auth/verify", "/users")


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Admits requests to protected paths only with a valid session token."""

    def __init__(self, app: ASGIApp, protected_prefixes: Sequence[str] = PROTECTED_PREFIXES):
        super().__init__(app)
        self.protected_prefixes = tuple(protected_prefixes)

    def is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix.rstrip("/") + "/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        # CORS preflight requests carry no credentials
        if request.method == "OPTIONS" or not self.is_protected(request.url.path):
            return await call_next(request)

        auth_service = request.app.state.auth_service
        try:
            request.state.user = auth_service.admit(request.headers.get("Authorization"))
        except SocialChainException as e:
            logger.warning(f"Rejected request to {request.url.path}: {e.code}")
            return JSONResponse(status_code=to_http_status(e), content=to_error_body(e))

        return await call_next(request)
