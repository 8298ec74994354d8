from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorCatalogEntry(BaseModel):
    code: str = Field(
        ...,
        description="Stable error code",
        json_schema_extra={"example": "INVALID_REQUEST"},
    )
    status: int = Field(
        ...,
        description="Transport status returned for this error",
        json_schema_extra={"example": 400},
    )
    translation_key: str = Field(
        ...,
        description="Value clients receive in the `code` field of an error response",
        json_schema_extra={"example": "error.invalid.request"},
    )
    message: str = Field(
        ...,
        description="Message in the negotiated locale",
        json_schema_extra={"example": "Invalid request data"},
    )
