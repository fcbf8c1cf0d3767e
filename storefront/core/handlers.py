"""
FastAPI exception handlers.

Every handler funnels into `respond_with_error`: log through the shared
ErrorLogger, then render the envelope for the classified status.
"""
from __future__ import annotations

from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.errors import (
    HTTP_STATUS_VARIANTS,
    AppError,
    NotFoundError,
    ValidationError,
    classify,
)
from storefront.core.middleware import REQUEST_ID_HEADER
from storefront.core.responses import create_api_error_response
from storefront.schemas.common import FieldError


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def _phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "HTTP error"


async def respond_with_error(request: Request, exc: BaseException) -> JSONResponse:
    request_id = _request_id(request)
    error_logger = getattr(request.app.state, "error_logger", None)
    if error_logger is not None:
        await error_logger.log_error(
            exc,
            {"method": request.method, "path": request.url.path},
            request_id=request_id,
        )

    settings = request.app.state.settings
    envelope = create_api_error_response(
        exc, development=settings.is_development, request_id=request_id
    )
    response = JSONResponse(
        status_code=classify(exc).status_code,
        content=envelope.to_payload(),
    )
    # Defect responses are rendered outside RequestIdMiddleware.
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return await respond_with_error(request, exc)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request-body problems as VALIDATION_ERROR with per-field detail."""
    field_errors = [
        FieldError(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump()
        for error in exc.errors()
    ]
    wrapped = ValidationError("Request validation failed.", context={"errors": field_errors})
    return await respond_with_error(request, wrapped)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) and exc.detail else _phrase(exc.status_code)
    variant = HTTP_STATUS_VARIANTS.get(exc.status_code)
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        wrapped: AppError = NotFoundError()
    elif variant is not None:
        wrapped = variant(detail)
    else:
        wrapped = AppError(detail, status_code=exc.status_code, code=f"HTTP_{exc.status_code}")
    return await respond_with_error(request, wrapped)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return await respond_with_error(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    # Most specific first.
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
