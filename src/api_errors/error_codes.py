from __future__ import annotations

from enum import Enum, unique
from http import HTTPStatus
from typing import Mapping


@unique
class ErrorCode(Enum):
    """
    Standardized error codes shared by all services.

    Each member carries:
        code: Stable identifier for the error (e.g. "VALIDATION_FAILED").
        http_status: Transport status returned to the client.
        translation_key: Key used to look up the localized message.

    These values are part of the public API contract and must remain stable.
    """

    # ------------------------------------------------------------
    # 1. General errors (system-wide issues)
    # ------------------------------------------------------------
    INTERNAL_SERVER_ERROR = ("INTERNAL_SERVER_ERROR", HTTPStatus.INTERNAL_SERVER_ERROR, "error.internal")
    SERVICE_UNAVAILABLE = ("SERVICE_UNAVAILABLE", HTTPStatus.SERVICE_UNAVAILABLE, "error.service.unavailable")
    UNKNOWN_ERROR = ("UNKNOWN_ERROR", HTTPStatus.INTERNAL_SERVER_ERROR, "error.unknown")

    # ------------------------------------------------------------
    # 2. Validation & input errors
    # ------------------------------------------------------------
    VALIDATION_FAILED = ("VALIDATION_FAILED", HTTPStatus.BAD_REQUEST, "error.validation.failed")
    INVALID_REQUEST = ("INVALID_REQUEST", HTTPStatus.BAD_REQUEST, "error.invalid.request")
    UNSUPPORTED_MEDIA_TYPE = (
        "UNSUPPORTED_MEDIA_TYPE",
        HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
        "error.unsupported.media.type",
    )
    METHOD_NOT_ALLOWED = ("METHOD_NOT_ALLOWED", HTTPStatus.METHOD_NOT_ALLOWED, "error.method.not.allowed")

    # ------------------------------------------------------------
    # 3. Authentication & security errors
    # ------------------------------------------------------------
    UNAUTHORIZED = ("UNAUTHORIZED", HTTPStatus.UNAUTHORIZED, "error.unauthorized")
    AUTHENTICATION_FAILED = ("AUTHENTICATION_FAILED", HTTPStatus.UNAUTHORIZED, "error.authentication.failed")
    TOKEN_EXPIRED = ("TOKEN_EXPIRED", HTTPStatus.UNAUTHORIZED, "error.token.expired")
    ACCESS_DENIED = ("ACCESS_DENIED", HTTPStatus.FORBIDDEN, "error.access.denied")
    ACCOUNT_LOCKED = ("ACCOUNT_LOCKED", HTTPStatus.FORBIDDEN, "error.account.locked")

    # ------------------------------------------------------------
    # 4. Resource errors (data retrieval issues)
    # ------------------------------------------------------------
    RESOURCE_NOT_FOUND = ("RESOURCE_NOT_FOUND", HTTPStatus.NOT_FOUND, "error.resource.not.found")
    RESOURCE_ALREADY_EXISTS = ("RESOURCE_ALREADY_EXISTS", HTTPStatus.CONFLICT, "error.resource.exists")
    DATA_INTEGRITY_VIOLATION = (
        "DATA_INTEGRITY_VIOLATION",
        HTTPStatus.CONFLICT,
        "error.data.integrity.violation",
    )

    # ------------------------------------------------------------
    # 5. Business logic errors (custom rules)
    # ------------------------------------------------------------
    BUSINESS_VALIDATION_FAILED = (
        "BUSINESS_VALIDATION_FAILED",
        HTTPStatus.BAD_REQUEST,
        "error.business.validation.failed",
    )
    OPERATION_NOT_PERMITTED = ("OPERATION_NOT_PERMITTED", HTTPStatus.FORBIDDEN, "error.operation.not.permitted")

    # ------------------------------------------------------------
    # 6. Rate limiting & network issues
    # ------------------------------------------------------------
    TOO_MANY_REQUESTS = ("TOO_MANY_REQUESTS", HTTPStatus.TOO_MANY_REQUESTS, "error.too.many.requests")
    NETWORK_FAILURE = ("NETWORK_FAILURE", HTTPStatus.SERVICE_UNAVAILABLE, "error.network.failure")

    # ------------------------------------------------------------
    # 7. External service errors (3rd party APIs)
    # ------------------------------------------------------------
    EXTERNAL_SERVICE_FAILURE = ("EXTERNAL_SERVICE_FAILURE", HTTPStatus.BAD_GATEWAY, "error.external.service.failure")
    EXTERNAL_SERVICE_TIMEOUT = ("EXTERNAL_SERVICE_TIMEOUT", HTTPStatus.GATEWAY_TIMEOUT, "error.external.service.timeout")

    def __init__(self, code: str, http_status: HTTPStatus, translation_key: str) -> None:
        self._code = code
        self._http_status = http_status
        self._translation_key = translation_key

    @property
    def code(self) -> str:
        return self._code

    @property
    def http_status(self) -> int:
        return int(self._http_status)

    @property
    def translation_key(self) -> str:
        return self._translation_key

    def __str__(self) -> str:
        return f"[{self.http_status}] {self.code}"


def verify_catalog(members: Mapping[str, ErrorCode]) -> None:
    """
    Fail at import time if two members share a code or a translation key.

    A reused translation key would make localization ambiguous; a reused code
    would break clients matching on it.
    """
    for attr in ("code", "translation_key"):
        seen: dict[str, str] = {}
        for name, member in members.items():
            value = getattr(member, attr)
            if value in seen:
                raise RuntimeError(
                    f"Duplicate {attr} {value!r} on {seen[value]} and {name}"
                )
            seen[value] = name


# __members__ includes aliases, which iterating the enum skips.
verify_catalog(ErrorCode.__members__)
