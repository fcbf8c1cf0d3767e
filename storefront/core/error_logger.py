"""
Error logging facade.

Public API
----------
ErrorLogger.log_error(error, context, ...)   → ErrorDetails | None   (never raises)
ErrorLogger.forward(details)                 → bool           (sink, then fallback)
log_errors(error_logger)                     → decorator for coroutine functions

One ErrorLogger is built by the application lifespan and shared through
`app.state`. Sinks are best-effort: a failing sink degrades to a local log
line and is never surfaced to the caller.
"""
from __future__ import annotations

import contextlib
import functools
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, TypeVar

import httpx

from storefront.core.errors import classify, jsonable_context
from storefront.core.logging_config import get_logger
from storefront.core.responses import utc_timestamp
from storefront.schemas.common import ErrorDetails

UNKNOWN_CODE = "UNKNOWN_ERROR"

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------

class ErrorTrackingSink(Protocol):
    async def send(self, details: ErrorDetails) -> None: ...


class LogSink:
    """Stand-in tracking service used when no ERROR_TRACKING_URL is configured."""

    def __init__(self, *, development: bool, logger: Any = None) -> None:
        self._development = development
        self._logger = logger or get_logger("storefront.error_sink")

    async def send(self, details: ErrorDetails) -> None:
        if self._development:
            self._logger.info(
                "would send to error tracking service",
                error_details=details.to_payload(),
            )


class HttpErrorTrackingSink:
    """POSTs each record as JSON to an external tracking endpoint."""

    def __init__(self, http_client: httpx.AsyncClient, url: str) -> None:
        self._client = http_client
        self._url = url

    async def send(self, details: ErrorDetails) -> None:
        response = await self._client.post(self._url, json=details.to_payload())
        response.raise_for_status()


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

class ErrorLogger:
    def __init__(
        self,
        sink: ErrorTrackingSink,
        *,
        development: bool,
        logger: Any = None,
    ) -> None:
        self._sink = sink
        self._development = development
        self._logger = logger or get_logger("storefront.errors")

    @property
    def development(self) -> bool:
        return self._development

    @property
    def sink(self) -> ErrorTrackingSink:
        return self._sink

    def build_details(
        self,
        error: BaseException,
        context: Optional[Mapping[str, Any]] = None,
        *,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        stack: Optional[str] = None,
    ) -> ErrorDetails:
        """
        Snapshot `error` as an ErrorDetails record.

        Caller context is applied first and the error's own context second,
        so the error wins when both define the same key. `stack` replaces the
        local traceback, for errors that were raised in another process.
        """
        info = classify(error)
        merged: dict[str, Any] = {**(context or {}), **info.context}
        return ErrorDetails(
            message=info.message,
            code=UNKNOWN_CODE if info.is_defect else info.code,
            status_code=info.status_code,
            stack=stack or info.stack,
            timestamp=utc_timestamp(),
            user_id=user_id,
            request_id=request_id,
            context=jsonable_context(merged),
        )

    async def log_error(
        self,
        error: BaseException,
        context: Optional[Mapping[str, Any]] = None,
        *,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        stack: Optional[str] = None,
    ) -> Optional[ErrorDetails]:
        try:
            details = self.build_details(
                error, context, user_id=user_id, request_id=request_id, stack=stack
            )
            if self._development:
                self._logger.error("error details", error_details=details.to_payload())
        except Exception as exc:
            with contextlib.suppress(Exception):
                self._logger.warning(
                    "failed to record error", error_type=type(error).__name__, reason=repr(exc)
                )
            return None

        await self.forward(details)
        return details

    async def forward(self, details: ErrorDetails) -> bool:
        """Hand `details` to the sink. False means the fallback line was written instead."""
        try:
            await self._sink.send(details)
        except Exception as exc:
            self.write_fallback(details, exc)
            return False
        return True

    def write_fallback(self, details: ErrorDetails, reason: BaseException) -> None:
        try:
            self._logger.error(
                "failed to log error to tracking service",
                reason=repr(reason),
                code=details.code,
                error_message=details.message,
                request_id=details.request_id,
            )
        except Exception:
            # Nothing left to report to.
            pass


def log_errors(
    error_logger: ErrorLogger,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Log any exception escaping the wrapped coroutine function, then re-raise it."""

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await fn(*args, **kwargs)
            except Exception as exc:
                await error_logger.log_error(
                    exc,
                    {"function": fn.__name__, "arguments": {"args": args, "kwargs": kwargs}},
                )
                raise

        return wrapper

    return decorator
