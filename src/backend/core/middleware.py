"""
Security headers middleware.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    - X-Content-Type-Options: no MIME sniffing
    - X-Frame-Options: API responses are never framed
    - Referrer-Policy: origin only on cross-origin requests
    - Content-Security-Policy: JSON responses load nothing
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        # Story pages change as stories expire
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
