"""
Binds the GlobalExceptionHandler to a FastAPI application.

Framework errors (request validation, routing 404/405, HTTPException) are
mapped onto catalog error codes so every error leaves the service in the
same ApiErrorResponse shape.
"""

from __future__ import annotations

from typing import Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api_errors.config import LocaleConfig
from api_errors.error_codes import ErrorCode
from api_errors.exceptions import BusinessException, ExternalServiceException, TechnicalException
from api_errors.handler import GlobalExceptionHandler

from .errors import get_request_id, resolve_locale, to_json_response


HTTP_STATUS_ERROR_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.INVALID_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.ACCESS_DENIED,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.RESOURCE_ALREADY_EXISTS,
    415: ErrorCode.UNSUPPORTED_MEDIA_TYPE,
    429: ErrorCode.TOO_MANY_REQUESTS,
    500: ErrorCode.INTERNAL_SERVER_ERROR,
    502: ErrorCode.EXTERNAL_SERVICE_FAILURE,
    503: ErrorCode.SERVICE_UNAVAILABLE,
    504: ErrorCode.EXTERNAL_SERVICE_TIMEOUT,
}

# Upstream failures surfaced by a route go through the external-service branch.
EXTERNAL_STATUSES = frozenset({502, 504})


def map_http_exception(exc: StarletteHTTPException) -> Exception:
    """
    Convert a framework HTTPException into a typed exception.

    502 and 504 become external service failures. Unmapped 5xx statuses
    become a technical internal error; any other unmapped status becomes an
    invalid request.
    """
    error_code = HTTP_STATUS_ERROR_CODES.get(exc.status_code)
    if error_code is not None:
        if exc.status_code in EXTERNAL_STATUSES:
            return ExternalServiceException(error_code)
        if error_code.http_status >= 500:
            return TechnicalException(error_code)
        return BusinessException(error_code)
    if exc.status_code >= 500:
        return TechnicalException(ErrorCode.INTERNAL_SERVER_ERROR)
    return BusinessException(ErrorCode.INVALID_REQUEST)


def register_exception_handlers(
    app: FastAPI,
    handler: GlobalExceptionHandler,
    locale_config: LocaleConfig,
) -> None:
    """Register the error translation handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
        handler: Dispatcher that turns exceptions into ApiErrorResponse records.
        locale_config: Locales the Accept-Language header is negotiated against.
    """

    def _respond(
        request: Request,
        exc: BaseException,
        headers: Optional[Mapping[str, str]] = None,
    ) -> JSONResponse:
        locale = resolve_locale(
            request,
            supported=locale_config.supported_locales,
            default=locale_config.default_locale,
        )
        api_error = handler.handle(exc, locale)
        return to_json_response(
            api_error,
            request_id=get_request_id(request),
            locale=locale,
            headers=headers,
        )

    async def handle_coded_exception(request: Request, exc: Exception):
        return _respond(request, exc)

    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _respond(request, BusinessException(ErrorCode.VALIDATION_FAILED))

    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _respond(request, map_http_exception(exc), headers=getattr(exc, "headers", None))

    async def handle_unexpected(request: Request, exc: Exception):
        """Catch-all for unexpected errors. Never exposes internals."""
        return _respond(request, exc)

    app.add_exception_handler(BusinessException, handle_coded_exception)
    app.add_exception_handler(TechnicalException, handle_coded_exception)
    app.add_exception_handler(ExternalServiceException, handle_coded_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
