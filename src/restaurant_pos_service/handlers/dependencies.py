"""FastAPI dependencies resolving services stored on the application state."""

from fastapi import Request

from restaurant_pos_service.services.billing_service import BillingService
from restaurant_pos_service.services.catalog_service import CatalogService
from restaurant_pos_service.services.identity_service import IdentityService
from restaurant_pos_service.services.inventory_service import InventoryService


def get_catalog_service(request: Request) -> CatalogService:
    service: CatalogService = request.app.state.catalog_service
    return service


def get_billing_service(request: Request) -> BillingService:
    service: BillingService = request.app.state.billing_service
    return service


def get_inventory_service(request: Request) -> InventoryService:
    service: InventoryService = request.app.state.inventory_service
    return service


def get_identity_service(request: Request) -> IdentityService:
    service: IdentityService = request.app.state.identity_service
    return service
