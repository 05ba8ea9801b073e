import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import api_router
from .api.middleware import BodySizeLimitMiddleware, RateLimitMiddleware, SecurityHeadersMiddleware
from .api.ratelimit import FixedWindowRateLimiter
from .core.config import get_settings
from .core.logging import configure_logging
from .features.shared.errors import error_response

logger = logging.getLogger(__name__)

settings = get_settings()

chat_rate_limiter = FixedWindowRateLimiter(
    limit=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window_seconds,
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings.log_level)
    logger.info("Chatbot server running on port %d", settings.port)
    logger.info("CORS allowed origin: %s", ", ".join(settings.allowed_origin_list))
    yield


app = FastAPI(title="Bridgewater Chat Relay", docs_url=None, redoc_url=None, lifespan=lifespan)
app.include_router(api_router)

# Added innermost first; security headers wrap everything, including 413/429.
app.add_middleware(
    RateLimitMiddleware,
    limiter=chat_rate_limiter,
    paths=["/api/chat"],
    trust_proxy_headers=settings.trust_proxy_headers,
)
app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origin_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)
app.add_middleware(SecurityHeadersMiddleware)


def _validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        loc = tuple(error.get("loc") or ())
        if loc[:2] == ("body", "message"):
            return 'The "message" field must be a string.'
        if loc[:2] == ("body", "files"):
            return 'The "files" field must be a list.'
        if loc == ("body",) and error.get("type") == "missing":
            return "A message or at least one file is required."
    return "Request body must be a JSON object."


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(404, "Not found.")
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError):
    return error_response(400, _validation_message(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Internal server error.")


@app.get("/health")
async def health_check() -> dict:
    return {"status": "ok", "service": settings.service_name}
