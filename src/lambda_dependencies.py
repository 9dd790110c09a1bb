"""Shared dependency factory for the Lambda handler.

Dependencies are created once and reused across invocations within the same
Lambda container to keep cold starts cheap.
"""

import logging
from typing import Any

from fastapi import FastAPI

from restaurant_pos_service.bootstrap import (
    ServiceContainer,
    build_services,
    create_dynamodb_resource,
)
from restaurant_pos_service.config import Settings
from restaurant_pos_service.handlers.api_handler import create_app
from restaurant_pos_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_settings: Settings | None = None
_dynamodb_resource: Any | None = None
_services: ServiceContainer | None = None
_fastapi_app: FastAPI | None = None


def get_settings() -> Settings:
    """Load settings from the environment once per container."""
    global _settings

    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is None:
        _dynamodb_resource = create_dynamodb_resource(get_settings())
    return _dynamodb_resource


def get_services() -> ServiceContainer:
    """Create or retrieve the cached POS services.

    Returns:
        ServiceContainer sharing the cached DynamoDB resource
    """
    global _services

    if _services is None:
        _services = build_services(get_settings(), get_dynamodb_resource())
        logger.info("POS services initialized")
    return _services


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    settings = get_settings()
    services = get_services()

    _fastapi_app = create_app(
        catalog_service=services.catalog_service,
        billing_service=services.billing_service,
        inventory_service=services.inventory_service,
        identity_service=services.identity_service,
        cors_origins=settings.cors_origins,
    )
    setup_observability(_fastapi_app, environment=settings.environment)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(get_settings().log_level)

    logger.info("Lambda environment initialized")
