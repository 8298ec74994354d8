# apps/api/app/errors.py
from __future__ import annotations

from typing import Mapping, Optional, Sequence

from fastapi import Request
from fastapi.responses import JSONResponse

from api_errors.messages import normalize_locale
from api_errors.schemas import ApiErrorResponse


UNKNOWN_REQUEST_ID = "unknown"
REQUEST_ID_HEADER = "X-Request-ID"
CONTENT_LANGUAGE_HEADER = "Content-Language"


def get_request_id(request: Request) -> str:
    """
    Return the request correlation id if present.

    This helper expects a middleware to set `request.state.request_id`.
    If missing, it returns a stable sentinel value rather than generating a new id.
    """
    rid = getattr(request.state, "request_id", None)
    if isinstance(rid, str) and rid.strip():
        return rid
    return UNKNOWN_REQUEST_ID


def parse_accept_language(header: Optional[str]) -> list[str]:
    """
    Parse an Accept-Language header into tags ordered by preference.

    Entries with q=0 or an unparsable weight are dropped. Ties keep header order.
    """
    if not header:
        return []

    weighted: list[tuple[float, int, str]] = []
    for position, item in enumerate(header.split(",")):
        parts = [p.strip() for p in item.split(";")]
        tag = parts[0]
        if not tag:
            continue

        quality = 1.0
        for param in parts[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0

        if quality > 0:
            weighted.append((-quality, position, tag))

    return [tag for _, _, tag in sorted(weighted)]


def resolve_locale(request: Request, supported: Sequence[str], default: str) -> str:
    """
    Negotiate the response locale from the request's Accept-Language header.

    A tag matches a supported locale exactly or by its language part
    ("de-AT" matches "de"). Falls back to `default`.
    """
    for tag in parse_accept_language(request.headers.get("accept-language")):
        if tag == "*":
            return default
        normalized = normalize_locale(tag)
        if normalized is None:
            continue
        if normalized in supported:
            return normalized
        language = normalized.split("_")[0]
        if language in supported:
            return language
    return default


def to_json_response(
    api_error: ApiErrorResponse,
    request_id: str,
    locale: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """
    Serialize an ApiErrorResponse with its transport status.

    Notes:
    - `request_id` must match the `X-Request-ID` response header.
    - The HTTP status code is taken from the record's `status` field.
    - `headers` carries extra headers such as `Allow` on 405 responses.
    """
    response_headers = dict(headers or {})
    response_headers[REQUEST_ID_HEADER] = request_id
    if locale:
        response_headers[CONTENT_LANGUAGE_HEADER] = locale.replace("_", "-")

    return JSONResponse(
        status_code=int(api_error.status),
        content=api_error.model_dump(),
        headers=response_headers,
    )
