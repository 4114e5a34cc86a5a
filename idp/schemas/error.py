"""Error payload schemas for the internal and OAuth surfaces."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ErrorEntry(BaseModel):
    """Single error reported inside the internal-API envelope."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    error_code: str = Field(alias="errorCode")
    error_message: str = Field(alias="errorMessage")


class ResponseWrapper(BaseModel):
    """Internal-API response envelope."""

    errors: list[ErrorEntry] = Field(min_length=1)


class OAuthError(BaseModel):
    """OAuth2 error response body."""

    model_config = ConfigDict(frozen=True)

    error: str
    error_description: str
