import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from redis import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from remixflow.core.config import settings
from remixflow.core.redis import get_redis

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; "
        "style-src 'self' 'unsafe-inline'; img-src 'self' data: https:; "
        "connect-src 'self' https:;"
    ),
}


def rate_limit_key(client_ip: str) -> str:
    return f"rate-limit:{client_ip}"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window request quota per client IP for API routes.

    The counter lives in the shared store; if the store is unreachable the
    request is let through.
    """

    def __init__(self, app, *, limit: int | None = None, window: int | None = None):
        super().__init__(app)
        self.limit = settings.RATE_LIMIT_REQUESTS if limit is None else limit
        self.window = settings.RATE_LIMIT_WINDOW if window is None else window

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(settings.API_V1_STR):
            return await call_next(request)

        client_ip = request.client.host if request.client else "anonymous"
        key = rate_limit_key(client_ip)
        now = int(time.time())

        try:
            store = get_redis()
            current_count = int(store.get(key) or 0)
            ttl = store.ttl(key)
            reset_at = str(now + (ttl if ttl > 0 else self.window))

            if current_count >= self.limit:
                return JSONResponse(
                    {"error": "Rate limit exceeded"},
                    status_code=429,
                    headers={
                        "X-RateLimit-Limit": str(self.limit),
                        "X-RateLimit-Remaining": "0",
                        "X-RateLimit-Reset": reset_at,
                    },
                )

            store.incr(key)
            if current_count == 0:
                store.expire(key, self.window)
        except RedisError as exc:
            logger.error("Error applying rate limit: %s", exc)
            return await call_next(request)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(max(self.limit - current_count - 1, 0))
        response.headers["X-RateLimit-Reset"] = reset_at
        return response
