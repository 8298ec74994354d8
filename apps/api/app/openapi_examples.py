from __future__ import annotations

from typing import Any, Dict

from api_errors.error_codes import ErrorCode
from api_errors.handler import INTERNAL_ERROR_DEFAULT_MESSAGE
from api_errors.messages import BUNDLED_MESSAGES

EXAMPLE_LOCALE = "en"


def _error_example(code: ErrorCode) -> Dict[str, Any]:
    """
    Build a canonical error example matching the runtime error shape:
    {"status": "...", "code": "<translation key>", "message": "..."}
    """
    return {
        "status": str(code.http_status),
        "code": code.translation_key,
        "message": BUNDLED_MESSAGES[EXAMPLE_LOCALE].get(code.translation_key, code.translation_key),
    }


def standard_error_responses() -> Dict[int, Dict[str, Any]]:
    """
    Reusable error response docs for FastAPI routes.
    - One entry per transport status in the catalog
    - Examples are generated from ErrorCode (no scattered raw strings)
    - The 500 example is the unclassified fallback, which carries the short code
    """
    grouped: Dict[int, list[ErrorCode]] = {}
    for code in ErrorCode:
        grouped.setdefault(code.http_status, []).append(code)

    responses: Dict[int, Dict[str, Any]] = {}
    for http_status, codes in sorted(grouped.items()):
        examples = {
            code.code: {"summary": str(code), "value": _error_example(code)}
            for code in codes
        }
        responses[http_status] = {
            "description": ", ".join(code.code for code in codes),
            "content": {"application/json": {"examples": examples}},
        }

    fallback = ErrorCode.INTERNAL_SERVER_ERROR
    responses[fallback.http_status]["content"]["application/json"]["examples"]["UNHANDLED"] = {
        "summary": "Unclassified failure",
        "value": {
            "status": str(fallback.http_status),
            "code": fallback.code,
            "message": INTERNAL_ERROR_DEFAULT_MESSAGE,
        },
    }
    return responses
