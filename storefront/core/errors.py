"""
API error envelope

Every failed request is answered with the same JSON body:

    {"code": "...", "message": "...", "fieldErrors": {"field.path": "..."}}

and an ``x-request-id`` header that matches the id written to the log.
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


class ApiError(Exception):
    """Error raised by routes and services, rendered as the JSON envelope"""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        field_errors: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
        detail: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.field_errors = field_errors or {}
        self.headers = headers or {}
        self.detail = detail


def create_request_id() -> str:
    return str(uuid.uuid4())


def get_request_id(request: Request) -> str:
    """Request id assigned by the middleware, or a fresh one"""
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = create_request_id()
        request.state.request_id = request_id
    return request_id


def get_client_ip(request: Request) -> str:
    """Best-effort client address for rate limiting"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        return first or "unknown"

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def log_api_error(
    request_id: str,
    endpoint: str,
    code: str,
    message: str,
    error: Any = None,
) -> None:
    suffix = f" | detail={error}" if error else ""
    logger.error(f"[{request_id}] {endpoint} {code}: {message}{suffix}")


def build_error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    field_errors: Optional[dict[str, str]] = None,
    headers: Optional[dict[str, str]] = None,
    error: Any = None,
) -> JSONResponse:
    """Log the failure and render the error envelope"""
    request_id = get_request_id(request)
    endpoint = f"{request.method} {request.url.path}"
    log_api_error(request_id, endpoint, code, message, error)

    return JSONResponse(
        status_code=status_code,
        content={
            "code": code,
            "message": message,
            "fieldErrors": field_errors or {},
        },
        headers={REQUEST_ID_HEADER: request_id, **(headers or {})},
    )


def _field_path(loc: tuple) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path", "header", "cookie"):
        parts = parts[1:]
    return ".".join(parts) or "body"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return build_error_response(
        request,
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        field_errors=exc.field_errors,
        headers=exc.headers,
        error=exc.detail,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return build_error_response(
            request,
            status_code=400,
            code="INVALID_JSON",
            message="Request body is not valid JSON.",
        )

    field_errors: dict[str, str] = {}
    for err in errors:
        path = _field_path(tuple(err.get("loc", ())))
        # First message per field is the one shown next to the control
        field_errors.setdefault(path, err.get("msg", "Invalid value"))

    return build_error_response(
        request,
        status_code=400,
        code="VALIDATION_ERROR",
        message="Request values are invalid.",
        field_errors=field_errors,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return build_error_response(
        request,
        status_code=500,
        code="SERVER_ERROR",
        message="An unexpected error occurred.",
        error=exc,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on an application"""
    from ..services.backend import BackendError

    async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
        return build_error_response(
            request,
            status_code=500,
            code="SERVER_ERROR",
            message="The storage backend could not complete the request.",
            error=exc,
        )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
