"""
Shared pytest fixtures.

Each client fixture builds its own app through `create_app`, so the product
catalog and the error logger are fresh per test. Two extra routes raise on
purpose to exercise the error handlers.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.core.error_logger import ErrorLogger
from storefront.core.errors import ConflictError
from storefront.main import create_app
from storefront.services.catalog import ProductCatalog


def _add_failing_routes(app: FastAPI) -> None:
    @app.get("/_test/defect")
    async def defect():
        raise RuntimeError("database password is hunter2")

    @app.get("/_test/conflict")
    async def conflict():
        raise ConflictError("Order already placed", context={"orderId": 42})


def _make_client(settings: Settings):
    app = create_app(settings)
    _add_failing_routes(app)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def dev_settings():
    return Settings(_env_file=None, APP_ENV="development", LOG_FORMAT="json")


@pytest.fixture()
def prod_settings():
    return Settings(_env_file=None, APP_ENV="production")


@pytest.fixture()
def client(dev_settings):
    with _make_client(dev_settings) as c:
        yield c


@pytest.fixture()
def prod_client(prod_settings):
    with _make_client(prod_settings) as c:
        yield c


@pytest.fixture()
def catalog():
    return ProductCatalog()


@pytest.fixture()
def failing_sink():
    sink = AsyncMock()
    sink.send.side_effect = RuntimeError("tracking service unavailable")
    return sink


@pytest.fixture()
def recording_sink():
    return AsyncMock()


@pytest.fixture()
def diagnostic_logger():
    return MagicMock()


@pytest.fixture()
def error_logger(recording_sink, diagnostic_logger):
    return ErrorLogger(recording_sink, development=True, logger=diagnostic_logger)
