"""
Tests for the error logging facade.

Covers:
- ErrorDetails contents for classified and defect errors
- Context precedence (the error's own context wins)
- Development-only diagnostic writes
- Sink failure falls back to a local line and never raises
- LogSink / HttpErrorTrackingSink behaviour
- log_errors decorator
"""
import json
from unittest.mock import MagicMock

import httpx
import pytest

from storefront.core.error_logger import (
    ErrorLogger,
    HttpErrorTrackingSink,
    LogSink,
    log_errors,
)
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.schemas.common import ErrorDetails


def raised(exc):
    try:
        raise exc
    except Exception as caught:
        return caught


def _details(**overrides) -> ErrorDetails:
    data = {"message": "x", "code": "NOT_FOUND", "status_code": 404, "timestamp": "2026-01-01T00:00:00+00:00"}
    data.update(overrides)
    return ErrorDetails(**data)


# ---------------------------------------------------------------------------
# build_details
# ---------------------------------------------------------------------------

class TestBuildDetails:
    def test_classified_error(self, error_logger):
        details = error_logger.build_details(
            NotFoundError("Product"), user_id="u-1", request_id="r-1"
        )
        assert details.message == "Product not found"
        assert details.code == "NOT_FOUND"
        assert details.status_code == 404
        assert details.user_id == "u-1"
        assert details.request_id == "r-1"
        assert details.timestamp

    def test_defect_keeps_raw_message_with_unknown_code(self, error_logger):
        details = error_logger.build_details(raised(RuntimeError("disk full")))
        assert details.message == "disk full"
        assert details.code == "UNKNOWN_ERROR"
        assert details.status_code == 500
        assert "RuntimeError: disk full" in details.stack

    def test_error_context_wins_over_caller_context(self, error_logger):
        error = ValidationError("bad", context={"field": "email", "source": "error"})
        details = error_logger.build_details(error, {"source": "caller", "path": "/api"})
        assert details.context == {"field": "email", "source": "error", "path": "/api"}

    def test_details_are_immutable(self, error_logger):
        details = error_logger.build_details(NotFoundError())
        with pytest.raises(Exception):
            details.message = "changed"

    def test_payload_uses_camel_case(self, error_logger):
        payload = error_logger.build_details(
            NotFoundError(), user_id="u-1", request_id="r-1"
        ).to_payload()
        assert payload["statusCode"] == 404
        assert payload["userId"] == "u-1"
        assert payload["requestId"] == "r-1"

    def test_stack_override_replaces_local_traceback(self, error_logger):
        details = error_logger.build_details(
            RuntimeError("from the browser"), stack="Error: from the browser\n    at app.js:1:1"
        )
        assert details.stack == "Error: from the browser\n    at app.js:1:1"


# ---------------------------------------------------------------------------
# log_error
# ---------------------------------------------------------------------------

class TestLogError:
    @pytest.mark.asyncio
    async def test_forwards_to_sink(self, error_logger, recording_sink):
        details = await error_logger.log_error(ConflictError("dup"))
        recording_sink.send.assert_awaited_once_with(details)

    @pytest.mark.asyncio
    async def test_development_writes_diagnostic_line(self, error_logger, diagnostic_logger):
        await error_logger.log_error(NotFoundError())
        diagnostic_logger.error.assert_called_once()
        assert diagnostic_logger.error.call_args.args[0] == "error details"

    @pytest.mark.asyncio
    async def test_production_skips_diagnostic_line(self, recording_sink, diagnostic_logger):
        error_logger = ErrorLogger(recording_sink, development=False, logger=diagnostic_logger)
        await error_logger.log_error(NotFoundError())
        diagnostic_logger.error.assert_not_called()
        recording_sink.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failing_sink_never_raises(self, failing_sink, diagnostic_logger):
        error_logger = ErrorLogger(failing_sink, development=False, logger=diagnostic_logger)
        details = await error_logger.log_error(raised(RuntimeError("original failure")))
        assert details is not None
        assert details.message == "original failure"
        failing_sink.send.assert_awaited_once()
        diagnostic_logger.error.assert_called_once()
        assert diagnostic_logger.error.call_args.args[0] == "failed to log error to tracking service"

    @pytest.mark.asyncio
    async def test_failing_sink_and_failing_fallback_never_raise(self, failing_sink):
        broken_logger = MagicMock()
        broken_logger.error.side_effect = OSError("stdout closed")
        error_logger = ErrorLogger(failing_sink, development=False, logger=broken_logger)
        assert await error_logger.log_error(NotFoundError()) is not None

    @pytest.mark.asyncio
    async def test_unserialisable_context_is_accepted(self, error_logger, recording_sink):
        details = await error_logger.log_error(NotFoundError(), {"conn": object()})
        assert isinstance(details.context["conn"], str)
        recording_sink.send.assert_awaited_once()


class TestForward:
    @pytest.mark.asyncio
    async def test_success_returns_true(self, error_logger, diagnostic_logger):
        assert await error_logger.forward(_details()) is True
        diagnostic_logger.error.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_returns_false_and_writes_fallback(self, failing_sink, diagnostic_logger):
        error_logger = ErrorLogger(failing_sink, development=True, logger=diagnostic_logger)
        details = _details(request_id="r-9")
        assert await error_logger.forward(details) is False
        kwargs = diagnostic_logger.error.call_args.kwargs
        assert kwargs["request_id"] == "r-9"
        assert "tracking service unavailable" in kwargs["reason"]


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------

class TestLogSink:
    @pytest.mark.asyncio
    async def test_development_logs(self):
        logger = MagicMock()
        await LogSink(development=True, logger=logger).send(_details())
        logger.info.assert_called_once()
        assert logger.info.call_args.kwargs["error_details"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_production_is_silent(self):
        logger = MagicMock()
        await LogSink(development=False, logger=logger).send(_details())
        logger.info.assert_not_called()


TRACKING_URL = "https://errors.example.com/ingest"


class TestHttpErrorTrackingSink:
    @pytest.mark.asyncio
    async def test_posts_camel_case_json(self, respx_mock):
        route = respx_mock.post(TRACKING_URL).mock(return_value=httpx.Response(202))
        details = _details(user_id="u-1")

        async with httpx.AsyncClient() as http_client:
            await HttpErrorTrackingSink(http_client, TRACKING_URL).send(details)

        assert route.call_count == 1
        body = json.loads(route.calls.last.request.content)
        assert body == details.to_payload()
        assert body["userId"] == "u-1"

    @pytest.mark.asyncio
    async def test_http_error_is_contained_by_facade(self, respx_mock, diagnostic_logger):
        respx_mock.post(TRACKING_URL).mock(return_value=httpx.Response(503))

        async with httpx.AsyncClient() as http_client:
            sink = HttpErrorTrackingSink(http_client, TRACKING_URL)
            error_logger = ErrorLogger(sink, development=False, logger=diagnostic_logger)
            details = await error_logger.log_error(NotFoundError())

        assert details is not None
        diagnostic_logger.error.assert_called_once()
        assert "503" in diagnostic_logger.error.call_args.kwargs["reason"]

    @pytest.mark.asyncio
    async def test_connect_error_is_contained_by_facade(self, respx_mock, diagnostic_logger):
        respx_mock.post(TRACKING_URL).mock(side_effect=httpx.ConnectError("refused"))

        async with httpx.AsyncClient() as http_client:
            sink = HttpErrorTrackingSink(http_client, TRACKING_URL)
            error_logger = ErrorLogger(sink, development=False, logger=diagnostic_logger)
            assert await error_logger.forward(_details()) is False


# ---------------------------------------------------------------------------
# log_errors decorator
# ---------------------------------------------------------------------------

class TestLogErrorsDecorator:
    @pytest.mark.asyncio
    async def test_logs_and_reraises(self, error_logger, recording_sink):
        @log_errors(error_logger)
        async def charge_card(order_id, amount=0):
            raise ValueError("card declined")

        with pytest.raises(ValueError, match="card declined"):
            await charge_card(17, amount=99)

        details = recording_sink.send.call_args.args[0]
        assert details.context["function"] == "charge_card"
        assert details.context["arguments"] == {"args": [17], "kwargs": {"amount": 99}}

    @pytest.mark.asyncio
    async def test_passes_result_through(self, error_logger, recording_sink):
        @log_errors(error_logger)
        async def total(a, b):
            return a + b

        assert await total(2, 3) == 5
        recording_sink.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_preserves_function_name(self, error_logger):
        @log_errors(error_logger)
        async def fetch_inventory():
            return []

        assert fetch_inventory.__name__ == "fetch_inventory"
