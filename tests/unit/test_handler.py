"""
Tests for GlobalExceptionHandler.

Uses MagicMock message sources to check the exact resolver calls, and a
StaticMessageSource for locale and fallback behaviour.
"""

import logging
from unittest.mock import MagicMock

import pytest

from api_errors.error_codes import ErrorCode
from api_errors.exceptions import BusinessException, ExternalServiceException, TechnicalException
from api_errors.handler import GlobalExceptionHandler
from api_errors.messages import BUNDLED_MESSAGES, StaticMessageSource
from api_errors.schemas import ApiErrorResponse


TYPED_EXCEPTIONS = [BusinessException, TechnicalException, ExternalServiceException]


@pytest.fixture
def message_source():
    return MagicMock()


@pytest.fixture
def logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def handler(message_source, logger):
    return GlobalExceptionHandler(message_source, logger=logger)


@pytest.fixture
def static_handler(logger):
    return GlobalExceptionHandler(StaticMessageSource(BUNDLED_MESSAGES, logger=MagicMock()), logger=logger)


# ---------------------------------------------------------------------------
# 1. Business exception
# ---------------------------------------------------------------------------

def test_business_exception_english(handler, message_source):
    message_source.get_message.return_value = "Invalid request data"

    response = handler.handle(BusinessException(ErrorCode.INVALID_REQUEST), "en")

    assert response == ApiErrorResponse(
        status="400",
        code="error.invalid.request",
        message="Invalid request data",
    )
    message_source.get_message.assert_called_once_with("error.invalid.request", None, None, "en")


def test_business_exception_german(handler, message_source):
    german = "Die Anfrage konnte aufgrund fehlender oder ungültiger Informationen nicht verarbeitet werden."
    message_source.get_message.return_value = german

    response = handler.handle(BusinessException(ErrorCode.INVALID_REQUEST), "de_DE")

    assert response.status == "400"
    assert response.code == "error.invalid.request"
    assert response.message == german
    message_source.get_message.assert_called_once_with("error.invalid.request", None, None, "de_DE")


def test_business_exception_logs_warning_without_traceback(handler, logger, message_source):
    message_source.get_message.return_value = "x"

    handler.handle(BusinessException(ErrorCode.INVALID_REQUEST), "en")

    logger.warning.assert_called_once()
    logger.error.assert_not_called()
    args, kwargs = logger.warning.call_args
    assert args == ("Business exception: %s - %s", "INVALID_REQUEST", "error.invalid.request")
    assert "exc_info" not in kwargs
    assert kwargs["extra"]["event"] == "error.business_exception"
    assert kwargs["extra"]["failure_kind"] == "business"
    assert kwargs["extra"]["http_status"] == 400


# ---------------------------------------------------------------------------
# 2. Technical exception
# ---------------------------------------------------------------------------

def test_technical_exception_english(handler, message_source):
    message_source.get_message.return_value = "Internal server error"

    response = handler.handle(TechnicalException(ErrorCode.INTERNAL_SERVER_ERROR), "en")

    assert response.status == "500"
    assert response.code == "error.internal"
    assert response.message == "Internal server error"
    message_source.get_message.assert_called_once_with("error.internal", None, None, "en")


def test_technical_exception_german(handler, message_source):
    message_source.get_message.return_value = "Es ist ein interner Serverfehler aufgetreten."

    response = handler.handle(TechnicalException(ErrorCode.INTERNAL_SERVER_ERROR), "de_DE")

    assert response.status == "500"
    assert response.code == "error.internal"
    assert response.message == "Es ist ein interner Serverfehler aufgetreten."


def test_technical_exception_logs_error_with_traceback(handler, logger, message_source):
    message_source.get_message.return_value = "x"
    exc = TechnicalException(ErrorCode.SERVICE_UNAVAILABLE)

    handler.handle(exc, "en")

    logger.error.assert_called_once()
    logger.warning.assert_not_called()
    args, kwargs = logger.error.call_args
    assert args == ("Technical exception: %s - %s", "SERVICE_UNAVAILABLE", "error.service.unavailable")
    assert kwargs["exc_info"] is exc
    assert kwargs["extra"]["event"] == "error.technical_exception"


# ---------------------------------------------------------------------------
# 3. External service exception
# ---------------------------------------------------------------------------

def test_external_service_exception_english(handler, message_source):
    message_source.get_message.return_value = "External service failed"

    response = handler.handle(ExternalServiceException(ErrorCode.EXTERNAL_SERVICE_FAILURE), "en")

    assert response.status == "502"
    assert response.code == "error.external.service.failure"
    assert response.message == "External service failed"
    message_source.get_message.assert_called_once_with("error.external.service.failure", None, None, "en")


def test_external_service_exception_german(handler, message_source):
    message_source.get_message.return_value = "Externer Dienstfehler"

    response = handler.handle(ExternalServiceException(ErrorCode.EXTERNAL_SERVICE_FAILURE), "de_DE")

    assert response.status == "502"
    assert response.code == "error.external.service.failure"
    assert response.message == "Externer Dienstfehler"


def test_external_service_exception_logs_warning(handler, logger, message_source):
    message_source.get_message.return_value = "x"

    handler.handle(ExternalServiceException(ErrorCode.EXTERNAL_SERVICE_TIMEOUT), "en")

    logger.warning.assert_called_once()
    logger.error.assert_not_called()
    args, kwargs = logger.warning.call_args
    assert args[0] == "External service failure: %s - %s"
    assert args[1] == "EXTERNAL_SERVICE_TIMEOUT"
    assert kwargs["extra"]["event"] == "error.external_service_exception"


# ---------------------------------------------------------------------------
# 4. Generic (unclassified) exception
# ---------------------------------------------------------------------------

def test_generic_exception_english(handler, message_source):
    message_source.get_message.return_value = "An internal server error occurred."

    response = handler.handle(Exception("Some unexpected error"), "en")

    assert response.status == "500"
    assert response.code == "INTERNAL_SERVER_ERROR"
    assert response.message == "An internal server error occurred."
    message_source.get_message.assert_called_once_with(
        "error.internal",
        None,
        "An internal server error occurred.",
        "en",
    )


def test_generic_exception_german(handler, message_source):
    message_source.get_message.return_value = "Ein interner Serverfehler ist aufgetreten."

    response = handler.handle(Exception("Some unexpected error"), "de_DE")

    assert response.status == "500"
    assert response.code == "INTERNAL_SERVER_ERROR"
    assert response.message == "Ein interner Serverfehler ist aufgetreten."


def test_generic_exception_logs_error_with_traceback(handler, logger, message_source):
    message_source.get_message.return_value = "x"
    exc = RuntimeError("db password is hunter2")

    handler.handle(exc, "en")

    logger.error.assert_called_once()
    args, kwargs = logger.error.call_args
    assert args == ("Unhandled exception: %s", exc)
    assert kwargs["exc_info"] is exc
    assert kwargs["extra"]["event"] == "error.unhandled_exception"
    assert kwargs["extra"]["exception_type"] == "RuntimeError"
    assert kwargs["extra"]["error_code"] == "INTERNAL_SERVER_ERROR"


# ---------------------------------------------------------------------------
# Properties over the whole catalog
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("exc_type", TYPED_EXCEPTIONS)
def test_every_code_maps_status_and_translation_key(static_handler, exc_type):
    for error_code in ErrorCode:
        response = static_handler.handle(exc_type(error_code), "en")

        assert response.status == str(error_code.http_status)
        assert response.code == error_code.translation_key
        assert response.code != error_code.code


def test_unclassified_code_is_short_code_not_translation_key(static_handler):
    response = static_handler.handle(KeyError("missing"), "en")

    assert response.code == ErrorCode.INTERNAL_SERVER_ERROR.code
    assert response.code != ErrorCode.INTERNAL_SERVER_ERROR.translation_key
    assert response.status == str(ErrorCode.INTERNAL_SERVER_ERROR.http_status)


@pytest.mark.parametrize("exc_type", TYPED_EXCEPTIONS)
def test_locale_changes_only_message(static_handler, exc_type):
    exc = exc_type(ErrorCode.RESOURCE_NOT_FOUND)

    english = static_handler.handle(exc, "en")
    german = static_handler.handle(exc, "de")

    assert (english.status, english.code) == (german.status, german.code)
    assert english.message != german.message


def test_unclassified_locale_changes_only_message(static_handler):
    exc = Exception("Some unexpected error")

    english = static_handler.handle(exc, "en")
    german = static_handler.handle(exc, "de")

    assert english.message == "An internal server error occurred."
    assert german.message == "Es ist ein interner Serverfehler aufgetreten."
    assert (english.status, english.code) == (german.status, german.code)


@pytest.mark.parametrize("locale", ["fr", "pt_BR", None])
def test_unknown_locale_still_yields_message(static_handler, locale):
    for error_code in ErrorCode:
        response = static_handler.handle(BusinessException(error_code), locale)
        assert response.message
        assert response.message == BUNDLED_MESSAGES["en"][error_code.translation_key]


def test_empty_catalog_still_yields_message(logger):
    handler = GlobalExceptionHandler(StaticMessageSource({"en": {}}, logger=MagicMock()), logger=logger)

    classified = handler.handle(BusinessException(ErrorCode.ACCOUNT_LOCKED), "de")
    unclassified = handler.handle(Exception("boom"), "de")

    assert classified.message
    assert unclassified.message == "An internal server error occurred."


@pytest.mark.parametrize(
    "exc",
    [
        Exception("Some unexpected error"),
        ValueError("SELECT * FROM users WHERE id = 1"),
        RuntimeError("Traceback: secret token abc123"),
        ZeroDivisionError("division by zero"),
    ],
)
def test_unclassified_message_never_leaks_internal_text(static_handler, exc):
    for locale in ("en", "de"):
        response = static_handler.handle(exc, locale)
        assert str(exc) not in response.message
        assert response.message == BUNDLED_MESSAGES[locale]["error.internal"]


def test_handler_is_stateless_across_calls(static_handler):
    first = static_handler.handle(BusinessException(ErrorCode.INVALID_REQUEST), "de")
    static_handler.handle(Exception("other"), "en")
    second = static_handler.handle(BusinessException(ErrorCode.INVALID_REQUEST), "de")

    assert first == second


def test_per_kind_methods_match_dispatch(handler, message_source):
    message_source.get_message.return_value = "text"
    exc = BusinessException(ErrorCode.TOKEN_EXPIRED)

    assert handler.handle_business_exception(exc, "en") == handler.handle(exc, "en")


def test_default_logger_is_configured():
    handler = GlobalExceptionHandler(MagicMock())
    assert handler._logger.name == "api_errors.handler"
    assert handler._logger.propagate is False
