"""Main application entry point for the restaurant POS service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from restaurant_pos_service.bootstrap import build_services, create_dynamodb_resource
from restaurant_pos_service.config import Settings
from restaurant_pos_service.handlers.api_handler import create_app
from restaurant_pos_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)


def create_application(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Loads settings from the environment (unless given)
    2. Configures logging
    3. Creates the DynamoDB resource
    4. Wires repositories and services
    5. Creates the FastAPI app and sets up observability

    Args:
        settings: Settings to use instead of reading the environment

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    logger.info("Initializing restaurant POS service...")

    dynamodb_resource = create_dynamodb_resource(settings)
    services = build_services(settings, dynamodb_resource)

    app = create_app(
        catalog_service=services.catalog_service,
        billing_service=services.billing_service,
        inventory_service=services.inventory_service,
        identity_service=services.identity_service,
        cors_origins=settings.cors_origins,
    )
    setup_observability(app, environment=settings.environment)

    logger.info("Restaurant POS service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    settings = Settings.from_env()

    logger.info(f"Starting development server on {settings.host}:{settings.port}")
    logger.info(f"API documentation available at http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
