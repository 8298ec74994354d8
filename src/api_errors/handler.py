from __future__ import annotations

import logging
from typing import Optional

from .error_codes import ErrorCode
from .exceptions import (
    BusinessException,
    CodedException,
    ExternalServiceException,
    FailureKind,
    TechnicalException,
    classify,
)
from .logging_utils import configure_logger
from .messages import MessageSource
from .schemas import ApiErrorResponse

INTERNAL_ERROR_KEY = "error.internal"
INTERNAL_ERROR_DEFAULT_MESSAGE = "An internal server error occurred."


class GlobalExceptionHandler:
    """
    Translates exceptions into localized ApiErrorResponse records.

    Responsibilities:
        - Classify the exception (business, technical, external, unclassified).
        - Log it with the severity and detail of its kind.
        - Resolve the localized message through the injected MessageSource.

    Business, technical and external failures only differ in how they are
    logged; the response shape is the same. Anything else gets the generic
    internal error response and never exposes its own text.

    Holds no mutable state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        message_source: MessageSource,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._message_source = message_source
        self._logger = logger or configure_logger("api_errors.handler")

    @property
    def message_source(self) -> MessageSource:
        return self._message_source

    def handle(self, exc: BaseException, locale: Optional[str]) -> ApiErrorResponse:
        """
        Translate any exception into an ApiErrorResponse for `locale`.
        """
        kind = classify(exc)

        if kind is FailureKind.BUSINESS:
            return self.handle_business_exception(exc, locale)
        if kind is FailureKind.TECHNICAL:
            return self.handle_technical_exception(exc, locale)
        if kind is FailureKind.EXTERNAL:
            return self.handle_external_service_exception(exc, locale)
        return self.handle_generic_exception(exc, locale)

    # ------------------------------------------------------------
    # Per-kind handlers
    # ------------------------------------------------------------
    def handle_business_exception(self, exc: BusinessException, locale: Optional[str]) -> ApiErrorResponse:
        """Handle validation or domain rule violations."""
        self._logger.warning(
            "Business exception: %s - %s",
            exc.error_code.code,
            exc.message,
            extra=self._log_extra("error.business_exception", FailureKind.BUSINESS, exc.error_code, locale),
        )
        return self._coded_response(exc, locale)

    def handle_technical_exception(self, exc: TechnicalException, locale: Optional[str]) -> ApiErrorResponse:
        """Handle infrastructure and system failures such as database issues."""
        self._logger.error(
            "Technical exception: %s - %s",
            exc.error_code.code,
            exc.message,
            exc_info=exc,
            extra=self._log_extra("error.technical_exception", FailureKind.TECHNICAL, exc.error_code, locale),
        )
        return self._coded_response(exc, locale)

    def handle_external_service_exception(
        self,
        exc: ExternalServiceException,
        locale: Optional[str],
    ) -> ApiErrorResponse:
        """Handle failures of payment providers or other third-party APIs."""
        self._logger.warning(
            "External service failure: %s - %s",
            exc.error_code.code,
            exc.message,
            extra=self._log_extra(
                "error.external_service_exception",
                FailureKind.EXTERNAL,
                exc.error_code,
                locale,
            ),
        )
        return self._coded_response(exc, locale)

    def handle_generic_exception(self, exc: BaseException, locale: Optional[str]) -> ApiErrorResponse:
        """Handle every exception not raised through the typed exceptions."""
        fallback = ErrorCode.INTERNAL_SERVER_ERROR
        extra = self._log_extra("error.unhandled_exception", FailureKind.UNCLASSIFIED, fallback, locale)
        extra["exception_type"] = type(exc).__name__

        self._logger.error("Unhandled exception: %s", exc, exc_info=exc, extra=extra)

        message = self._message_source.get_message(
            INTERNAL_ERROR_KEY,
            None,
            INTERNAL_ERROR_DEFAULT_MESSAGE,
            locale,
        )
        # The short code, not the translation key, is part of the existing contract here.
        return ApiErrorResponse(
            status=str(fallback.http_status),
            code=fallback.code,
            message=message,
        )

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------
    def _translate_message(self, error_code: ErrorCode, locale: Optional[str]) -> str:
        """
        Retrieve the localized message for `error_code`.

        Falling back to the base locale is the message source's job.
        """
        return self._message_source.get_message(error_code.translation_key, None, None, locale)

    def _coded_response(self, exc: CodedException, locale: Optional[str]) -> ApiErrorResponse:
        error_code = exc.error_code
        return ApiErrorResponse(
            status=str(error_code.http_status),
            code=error_code.translation_key,
            message=self._translate_message(error_code, locale),
        )

    @staticmethod
    def _log_extra(
        event: str,
        kind: FailureKind,
        error_code: ErrorCode,
        locale: Optional[str],
    ) -> dict:
        return {
            "event": event,
            "failure_kind": kind.value,
            "error_code": error_code.code,
            "http_status": error_code.http_status,
            "locale": locale,
        }
