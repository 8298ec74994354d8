from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ApiErrorResponse(BaseModel):
    """
    Standardized API error response for all services.
    """

    model_config = ConfigDict(frozen=True)

    status: str = Field(
        ...,
        description="Transport status as a string",
        json_schema_extra={"example": "400"},
    )
    code: str = Field(
        ...,
        description="Translation key for classified errors, stable error code otherwise",
        json_schema_extra={"example": "error.invalid.request"},
    )
    message: str = Field(
        ...,
        description="Localized, human-readable message",
        json_schema_extra={"example": "Invalid request data"},
    )
