"""
Typed failures raised by application code.

Each exception wraps exactly one catalog ErrorCode. Its message is the
ErrorCode's translation key, so logs and traces always carry a stable,
grep-able identifier rather than free text.

Anything not raised as one of these three types is treated as unclassified
by the dispatcher.
"""

from __future__ import annotations

from enum import Enum

from .error_codes import ErrorCode


class CodedException(Exception):
    """Base for exceptions that carry a catalog ErrorCode."""

    def __init__(self, error_code: ErrorCode) -> None:
        if not isinstance(error_code, ErrorCode):
            raise TypeError(f"error_code must be an ErrorCode, got {type(error_code).__name__}")
        self._error_code = error_code
        super().__init__(error_code.translation_key)

    @property
    def error_code(self) -> ErrorCode:
        return self._error_code

    @property
    def message(self) -> str:
        return self._error_code.translation_key


class BusinessException(CodedException):
    """Raised when a business rule is violated."""


class TechnicalException(CodedException):
    """Raised for technical errors like database failures or system malfunctions."""


class ExternalServiceException(CodedException):
    """Raised when an external service (e.g. a payment provider) fails."""


class FailureKind(str, Enum):
    BUSINESS = "business"
    TECHNICAL = "technical"
    EXTERNAL = "external"
    UNCLASSIFIED = "unclassified"


def classify(exc: BaseException) -> FailureKind:
    """
    Determine the failure kind of an exception.

    Matching is priority-ordered: business, technical, external, then the
    unclassified catch-all for everything else.
    """
    if isinstance(exc, BusinessException):
        return FailureKind.BUSINESS
    if isinstance(exc, TechnicalException):
        return FailureKind.TECHNICAL
    if isinstance(exc, ExternalServiceException):
        return FailureKind.EXTERNAL
    return FailureKind.UNCLASSIFIED
