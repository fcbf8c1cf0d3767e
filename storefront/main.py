from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from storefront.core.config import Settings, settings as default_settings
from storefront.core.error_logger import ErrorLogger, ErrorTrackingSink, HttpErrorTrackingSink, LogSink
from storefront.core.handlers import register_exception_handlers
from storefront.core.logging_config import configure_logging, get_logger
from storefront.core.middleware import RequestIdMiddleware
from storefront.routers import client_errors as client_errors_router
from storefront.routers import products as products_router
from storefront.services.catalog import ProductCatalog


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings)
    logger = get_logger("storefront.main")

    http_client: Optional[httpx.AsyncClient] = None
    sink: ErrorTrackingSink
    if settings.ERROR_TRACKING_URL:
        http_client = httpx.AsyncClient(timeout=settings.ERROR_TRACKING_TIMEOUT_SECONDS)
        sink = HttpErrorTrackingSink(http_client, settings.ERROR_TRACKING_URL)
    else:
        sink = LogSink(development=settings.is_development)

    app.state.error_logger = ErrorLogger(sink, development=settings.is_development)
    app.state.catalog = ProductCatalog()
    logger.info(
        "storefront started",
        env=settings.APP_ENV,
        error_sink=type(sink).__name__,
    )
    try:
        yield
    finally:
        if http_client is not None:
            await http_client.aclose()
        logger.info("storefront stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title="Storefront API",
        description=(
            "**Demo storefront backend**\n\n"
            "Mock product catalog over an in-memory list plus client error reporting.\n\n"
            "All error responses follow the "
            "`{success: false, error, message, code, details?, timestamp, requestId?}` envelope. "
            "`details` is only present in development."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # --- Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    # --- Exception handlers ---
    register_exception_handlers(app)

    # --- Routers ---
    app.include_router(products_router.router)
    app.include_router(client_errors_router.router)

    @app.get("/health", tags=["health"], summary="Health check")
    def health(request: Request):
        """Liveness probe."""
        return {"status": "ok", "env": request.app.state.settings.APP_ENV}

    return app


app = create_app()
