"""
Request-scoped accessors for the components built at startup.
"""
from fastapi import Request

from storefront.core.config import Settings
from storefront.core.error_logger import ErrorLogger
from storefront.services.catalog import ProductCatalog


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_error_logger(request: Request) -> ErrorLogger:
    return request.app.state.error_logger


def get_catalog(request: Request) -> ProductCatalog:
    return request.app.state.catalog
