"""
HTTP routes exposing the error catalog to client developers.
No business logic lives here.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from api_errors.error_codes import ErrorCode
from api_errors.logging_utils import configure_logger

from ..errors import CONTENT_LANGUAGE_HEADER, resolve_locale
from ..schemas.errors import ErrorCatalogEntry

logger = configure_logger(__name__)

router = APIRouter(
    prefix="/errors",
    tags=["errors"],
)


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="List every error code the API can return",
    response_model=list[ErrorCatalogEntry],
)
def list_error_codes(request: Request, response: Response) -> list[ErrorCatalogEntry]:
    message_source = request.app.state.message_source
    locale_config = request.app.state.locale_config

    locale = resolve_locale(
        request,
        supported=locale_config.supported_locales,
        default=locale_config.default_locale,
    )
    response.headers[CONTENT_LANGUAGE_HEADER] = locale.replace("_", "-")

    logger.info(
        "error_catalog_request",
        extra={"event": "errors.catalog_request", "locale": locale},
    )

    return [
        ErrorCatalogEntry(
            code=error_code.code,
            status=error_code.http_status,
            translation_key=error_code.translation_key,
            message=message_source.get_message(error_code.translation_key, None, None, locale),
        )
        for error_code in ErrorCode
    ]
