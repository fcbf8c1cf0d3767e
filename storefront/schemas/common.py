"""
Shared schema primitives used across the API.
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldError(BaseModel):
    """A single field-level validation error."""
    field: str
    message: str
    type: str


class ErrorDetails(BaseModel):
    """One observed failure, as handed to the error tracking sink."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    message: str
    code: Optional[str] = None
    status_code: Optional[int] = None
    stack: Optional[str] = None
    timestamp: str
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    context: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ApiErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: Literal[False] = False
    error: str
    message: str
    code: str
    details: Optional[dict[str, Any]] = None
    timestamp: str
    request_id: Optional[str] = Field(default=None, alias="requestId")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
