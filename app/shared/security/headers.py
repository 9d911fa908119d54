"""
Secure HTTP headers middleware.

Adds security-related headers to every response. API responses
carry member and loan data, so they are also marked as non-cacheable.

No business logic. Pure cross-cutting concern.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Cache-Control": "no-store",
}

# Swagger UI loads scripts and styles, so the strict CSP is skipped there.
DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds secure HTTP headers to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        is_docs = request.url.path.startswith(DOCS_PATHS)
        for header_name, header_value in SECURE_HEADERS.items():
            if is_docs and header_name == "Content-Security-Policy":
                continue
            response.headers[header_name] = header_value
        return response
