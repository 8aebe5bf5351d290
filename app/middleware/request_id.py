"""Request ID middleware.

Generates or forwards X-Request-ID, exposes it to logging for the duration of
the request, and sets it on the response. Client-provided values are sanitized
(length + character set) to prevent log injection. Raw ASGI (no
BaseHTTPMiddleware).
"""

import re
import uuid
from typing import Callable

from app.shared.context import reset_request_id, set_request_id

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if valid and safe; otherwise a new UUID."""
    if not raw or not REQUEST_ID_ALLOWED_PATTERN.match(raw.strip()):
        return str(uuid.uuid4())
    return raw.strip()


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request id on each request and response."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((header_name.encode(), request_id.encode()))
                message["headers"] = headers
            await send(message)

        token = set_request_id(request_id)
        try:
            await app(scope, receive, send_wrapper)
        finally:
            reset_request_id(token)

    return asgi_app
