"""
Outward rendering of errors.

`create_api_error_response` is the only way an error leaves the process over
HTTP. Defects are always described generically; stack and context appear
only when the caller says it is running in development.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from storefront.core.errors import DEFAULT_CODE, classify, jsonable_context
from storefront.schemas.common import ApiErrorResponse

GENERIC_MESSAGE = "An unexpected error occurred"
BOUNDARY_TITLE = "Something went wrong"
BOUNDARY_MESSAGE = "We encountered an unexpected error. Please try again."


def utc_timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def create_api_error_response(
    error: BaseException,
    *,
    development: bool,
    request_id: Optional[str] = None,
) -> ApiErrorResponse:
    info = classify(error)

    if info.is_defect:
        code, message = DEFAULT_CODE, GENERIC_MESSAGE
    else:
        code, message = info.code or DEFAULT_CODE, info.message or GENERIC_MESSAGE

    details: Optional[dict[str, Any]] = None
    if development:
        details = {**jsonable_context(info.context), "stack": info.stack}

    return ApiErrorResponse(
        error=code,
        message=message,
        code=code,
        details=details,
        timestamp=utc_timestamp(),
        request_id=request_id,
    )


def error_boundary_props(error: BaseException, *, development: bool) -> dict[str, Any]:
    """Props for a rendered error page. Raw text only in development."""
    info = classify(error)
    props: dict[str, Any] = {
        "title": BOUNDARY_TITLE,
        "message": info.message if development else BOUNDARY_MESSAGE,
        "show_details": development,
    }
    if development:
        props["error_details"] = {
            "message": info.message,
            "stack": info.stack,
            "timestamp": utc_timestamp(),
        }
    return props
