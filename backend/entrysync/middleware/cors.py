"""
EntrySync Backend — Open CORS Middleware
==========================================

What:  Answers every OPTIONS request as a CORS preflight and stamps
       Access-Control-Allow-Origin on every other response.
How:   Starlette BaseHTTPMiddleware wrapping the whole app.

Browser clients of the entries API run on arbitrary origins (file://,
extension pages, static hosts), so preflights are answered unconditionally:
Starlette's CORSMiddleware only reacts when an Origin header is present,
while this one also covers plain OPTIONS probes and error responses.

Unexpected exceptions escaping the routes are rendered here as the 500 JSON
error, so those responses carry the CORS headers as well.

Preflight response:
    204 No Content, empty body
    Access-Control-Allow-Origin:  *
    Access-Control-Allow-Methods: GET, POST, DELETE, OPTIONS
    Access-Control-Allow-Headers: Content-Type
"""

import logging
from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

ALLOWED_METHODS = "GET, POST, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type"
EXPOSED_HEADERS = "X-Request-ID, X-Total-Count"

logger = logging.getLogger(__name__)


class OpenCORSMiddleware(BaseHTTPMiddleware):
    """CORS for all origins on every response, including 4xx/5xx."""

    def __init__(self, app: ASGIApp, allow_origin: str = "*"):
        super().__init__(app)
        self.allow_origin = allow_origin

    def _headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Expose-Headers": EXPOSED_HEADERS,
        }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            headers = self._headers()
            headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
            headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
            return Response(status_code=204, headers=headers)

        try:
            response = await call_next(request)
        except Exception as exc:
            response = self._unexpected_error(request, exc)
        response.headers.update(self._headers())
        return response

    @staticmethod
    def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        rid = getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
            headers={"X-Request-ID": rid} if rid else None,
        )
