"""Request correlation ids"""

from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .errors import REQUEST_ID_HEADER, create_request_id


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request an id, stored on ``request.state.request_id``
    and echoed in the ``x-request-id`` response header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = create_request_id()
        response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, request.state.request_id)
        return response
