"""REST API error response models, used in OpenAPI `responses` declarations."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """One field-level failure inside a validation error."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "sale_price",
                "message": "must be > 0",
                "code": "INVALID_VALUE",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error body returned by every handler."""

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None
    context: dict[str, Any] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "detail": "Deal with identifier '6f1c...' not found",
                    "code": "NOT_FOUND",
                    "context": {"resource": "Deal", "identifier": "6f1c..."},
                },
                {
                    "detail": "sale_price must be > 0",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {"field": "sale_price", "message": "must be > 0", "code": "INVALID_VALUE"}
                    ],
                },
                {
                    "detail": "Cannot move deal from 'delivered' to 'pending_manager'",
                    "code": "INVALID_TRANSITION",
                    "context": {
                        "current_status": "delivered",
                        "requested_status": "pending_manager",
                        "allowed": [],
                    },
                },
            ]
        }
    )
