"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Body of every non-view error (bad token, not signed in, missing profile)."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "NOT_SIGNED_IN",
                "message": "Sign in required",
                "details": None,
            }
        }
    )

    error_code: str
    message: str
    details: Any | None = None


AUTH_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing, invalid or signed-out token"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
}
