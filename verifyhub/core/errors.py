import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from verifyhub.core.config import get_settings
from verifyhub.core.request_context import REQUEST_ID_HEADER, request_id_ctx

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    error: str
    error_code: str
    request_id: str
    details: str | None = None


class ApiException(Exception):
    status_code: int = 500
    error_code: str = "API_ERROR"
    default_message: str = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        details: str | None = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details


class ValidationError(ApiException):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Request payload is invalid"


class ConfigurationError(ApiException):
    status_code = 500
    error_code = "CONFIGURATION_ERROR"
    default_message = "Server is not configured"


class UpstreamError(ApiException):
    status_code = 400
    error_code = "UPSTREAM_ERROR"
    default_message = "Upstream provider rejected the request"


class AuthenticationError(ApiException):
    status_code = 401
    error_code = "AUTHENTICATION_FAILED"
    default_message = "Authentication is required"


class PermissionDeniedError(ApiException):
    status_code = 403
    error_code = "PERMISSION_DENIED"
    default_message = "You do not have access to this resource"


class NotFoundError(ApiException):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class InternalError(ApiException):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"


def current_request_id(request: Request) -> str:
    # Uncaught exceptions are handled after the middleware has reset the contextvar.
    return getattr(request.state, "request_id", None) or request_id_ctx.get()


def error_payload(exc: ApiException, request_id: str | None = None) -> dict[str, Any]:
    return ErrorResponse(
        error=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        request_id=request_id or request_id_ctx.get(),
    ).model_dump(exclude_none=True)


def _error_response(exc: ApiException, request: Request) -> JSONResponse:
    # Handlers for bare Exception run outside the middleware stack, so the
    # cross-origin and request id headers are attached here as well.
    request_id = current_request_id(request)
    headers = {"Access-Control-Allow-Origin": get_settings().CORS_ALLOW_ORIGIN}
    if request_id != "-":
        headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc, request_id),
        headers=headers,
    )


def _summarize_validation_errors(errors: list[dict[str, Any]]) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiException)
    async def handle_api_exception(request: Request, exc: ApiException):
        return _error_response(exc, request)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _error_response(
            ValidationError(details=_summarize_validation_errors(list(exc.errors()))),
            request,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        settings = get_settings()
        if (
            exc.status_code == 404
            and request.method == "GET"
            and not request.url.path.startswith(settings.API_PREFIX + "/")
        ):
            return RedirectResponse(url="/", status_code=307)
        message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
        return _error_response(
            ApiException(
                message,
                status_code=exc.status_code,
                error_code=f"HTTP_{exc.status_code}",
            ),
            request,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc.__class__.__name__)
        return _error_response(InternalError(), request)
