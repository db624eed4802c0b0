"""
MindScribe Backend — Request ID Middleware
============================================

What:  Tags every request with a correlation ID and echoes it in the
       `X-Request-ID` response header.
How:   A client-supplied `X-Request-ID` (up to 64 characters) is reused;
       otherwise a short hex ID is generated. The ID is stored on
       `request.state` and in a ContextVar read by the exception handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_CLIENT_ID_LENGTH = 64

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
        rid = supplied if 0 < len(supplied) <= MAX_CLIENT_ID_LENGTH else new_request_id()

        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
