"""
MindScribe Backend — Error Envelope & Unhandled Error Middleware
=================================================================

What:  `error_response` builds the `{success: false, error: {message, stack?}}`
       body used by every exception handler. `UnhandledErrorMiddleware` turns
       exceptions no handler claimed into that envelope with status 500.
How:   The middleware is registered first, so it sits inside CORS and the
       request-ID middleware; unexpected 500s still get CORS headers,
       `X-Request-ID` and an access-log line.
"""

import logging
import traceback
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


def error_response(
    request: Request,
    status_code: int,
    message: str,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    """`stack` is included only when the app runs with ENVIRONMENT=development."""
    error = {"message": message}
    if exc is not None and request.app.state.settings.is_development:
        error["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


class UnhandledErrorMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            rid = getattr(request.state, "request_id", "")
            logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
            return error_response(request, 500, str(exc) or "Internal Server Error", exc)
