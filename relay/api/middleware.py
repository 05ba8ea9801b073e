from __future__ import annotations

import logging
from collections.abc import Iterable

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from relay.features.shared.errors import error_response

from .ratelimit import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

BODY_TOO_LARGE_MESSAGE = "Request body is too large."
RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment and try again."

# Same defaults helmet applies to an Express app.
SECURITY_HEADERS: dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware:
    def __init__(self, app: ASGIApp, headers: dict[str, str] | None = None) -> None:
        self.app = app
        self.headers = headers if headers is not None else SECURITY_HEADERS

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.headers.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_with_headers)


class BodySizeLimitMiddleware:
    """Rejects request bodies over ``max_body_bytes`` with a 413.

    The declared Content-Length is checked up front; chunked bodies are
    counted as they are received.
    """

    def __init__(self, app: ASGIApp, *, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_body_bytes:
            logger.info("Rejected request body of %s bytes on %s.", declared, scope.get("path"))
            await error_response(413, BODY_TOO_LARGE_MESSAGE)(scope, receive, send)
            return

        received = 0
        response_started = False
        rejected = False

        async def limited_receive() -> Message:
            nonlocal received, rejected
            if rejected:
                return {"type": "http.disconnect"}
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes and not response_started:
                    rejected = True
                    logger.info("Rejected streamed request body over %d bytes.", self.max_body_bytes)
                    await error_response(413, BODY_TOO_LARGE_MESSAGE)(scope, receive, send)
                    # The app sees a disconnect and its own response is dropped.
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if rejected:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        await self.app(scope, limited_receive, guarded_send)


def client_address(scope: Scope, *, trust_proxy_headers: bool = False) -> str:
    if trust_proxy_headers:
        forwarded = Headers(scope=scope).get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    client = scope.get("client")
    if client:
        return str(client[0])
    return "unknown"


class RateLimitMiddleware:
    def __init__(
        self,
        app: ASGIApp,
        *,
        limiter: FixedWindowRateLimiter,
        paths: Iterable[str],
        trust_proxy_headers: bool = False,
    ) -> None:
        self.app = app
        self.limiter = limiter
        self.paths = frozenset(paths)
        self.trust_proxy_headers = trust_proxy_headers

    def _rate_limit_headers(self, remaining: int, reset_after: int) -> dict[str, str]:
        return {
            "RateLimit-Policy": f"{self.limiter.limit};w={self.limiter.window_seconds}",
            "RateLimit-Limit": str(self.limiter.limit),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(reset_after),
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if (
            scope["type"] != "http"
            or scope.get("path") not in self.paths
            or scope.get("method") == "OPTIONS"
        ):
            await self.app(scope, receive, send)
            return

        key = client_address(scope, trust_proxy_headers=self.trust_proxy_headers)
        decision = self.limiter.hit(key)
        rate_headers = self._rate_limit_headers(decision.remaining, decision.reset_after_seconds)

        if not decision.allowed:
            logger.info("Rate limit exceeded for %s on %s.", key, scope.get("path"))
            response = error_response(
                429,
                RATE_LIMITED_MESSAGE,
                headers={**rate_headers, "Retry-After": str(decision.reset_after_seconds)},
            )
            await response(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in rate_headers.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)
