"""FastAPI application for the restaurant POS API."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from restaurant_pos_service.handlers import (
    auth_routes,
    billing_routes,
    inventory_routes,
    menu_routes,
)
from restaurant_pos_service.handlers.responses import register_exception_handlers
from restaurant_pos_service.services.billing_service import BillingService
from restaurant_pos_service.services.catalog_service import CatalogService
from restaurant_pos_service.services.identity_service import IdentityService
from restaurant_pos_service.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


def create_app(
    catalog_service: CatalogService,
    billing_service: BillingService,
    inventory_service: InventoryService,
    identity_service: IdentityService,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        catalog_service: Menu catalog service
        billing_service: Billing service
        inventory_service: Kitchen inventory service
        identity_service: Staff identity service
        cors_origins: Allowed CORS origins, all origins if omitted

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant POS API",
        description="Menu, kitchen inventory, billing and staff login for the restaurant POS",
        version=API_VERSION,
    )

    # Store services in app state for access in route handlers
    app.state.catalog_service = catalog_service
    app.state.billing_service = billing_service
    app.state.inventory_service = inventory_service
    app.state.identity_service = identity_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    register_exception_handlers(app)

    @app.get("/", tags=["Health"])
    async def root() -> dict[str, object]:
        return {
            "success": True,
            "message": "Restaurant POS API is running",
            "version": API_VERSION,
            "endpoints": {
                "auth": "/api/auth",
                "menuItems": "/api/menu-items",
                "billing": "/api/billing",
                "kitchenInventory": "/api/kitchen-inventory",
            },
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    app.include_router(auth_routes.router)
    app.include_router(menu_routes.router)
    app.include_router(billing_routes.router)
    app.include_router(inventory_routes.router)

    return app
