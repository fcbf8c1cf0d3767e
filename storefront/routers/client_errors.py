"""
Client error reports.

POST /api/client-errors: browser-side failures forwarded to error tracking
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from storefront.core.deps import get_error_logger
from storefront.core.error_logger import ErrorLogger
from storefront.schemas.client_error import ClientErrorReport

router = APIRouter(prefix="/api/client-errors", tags=["errors"])


class ClientSideError(Exception):
    """Carrier for an error that was raised in the browser, not in this process."""


@router.post(
    "",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Report a client-side error",
)
async def report_client_error(
    report: ClientErrorReport,
    request: Request,
    error_logger: ErrorLogger = Depends(get_error_logger),
):
    """
    Logs the report through the shared error logger with the caller's user
    agent and page url added to its context and the browser stack as the
    record's stack. Always accepted, even when the tracking service is down.
    """
    context = {
        **report.context,
        "source": "client",
        "errorName": report.name or "Error",
        "userAgent": request.headers.get("user-agent", "unknown"),
        "url": report.url or request.headers.get("referer", "unknown"),
    }
    await error_logger.log_error(
        ClientSideError(report.message),
        context,
        user_id=report.user_id,
        request_id=getattr(request.state, "request_id", None),
        stack=report.stack,
    )
    return {"success": True}
