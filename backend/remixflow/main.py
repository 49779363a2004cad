import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis import RedisError
from starlette.exceptions import HTTPException as StarletteHTTPException

from remixflow.api.main import api_router
from remixflow.core.config import settings
from remixflow.core.middleware import RateLimitMiddleware, SecurityHeadersMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

# Security headers wrap the rate limiter so 429 responses carry them too.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": _describe_validation_error(exc)}, status_code=400)


@app.exception_handler(RedisError)
async def store_exception_handler(request: Request, exc: RedisError) -> JSONResponse:
    logger.error("Data store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": "Failed to access the data store"}, status_code=500)


app.include_router(api_router, prefix=settings.API_V1_STR)
