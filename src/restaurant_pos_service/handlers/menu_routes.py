"""Menu item endpoints under /api/menu-items."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from restaurant_pos_service.handlers.dependencies import get_catalog_service
from restaurant_pos_service.handlers.responses import list_response, success_response
from restaurant_pos_service.models.common import CAMEL_CASE_CONFIG
from restaurant_pos_service.models.menu_models import MenuItem, MenuItemPatch
from restaurant_pos_service.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/menu-items", tags=["Menu Items"])


class MenuItemCreateRequest(BaseModel):
    """Request body for creating a menu item."""

    model_config = CAMEL_CASE_CONFIG

    item_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    stock: int = 0
    low_stock_threshold: int = 10
    is_kitchen: bool = False


class StockChangeRequest(BaseModel):
    """Signed stock delta."""

    quantity: int


@router.get("")
async def list_menu_items(catalog: CatalogService = Depends(get_catalog_service)) -> JSONResponse:
    return list_response(await catalog.get_all())


@router.get("/bar")
async def list_bar_items(catalog: CatalogService = Depends(get_catalog_service)) -> JSONResponse:
    return list_response(await catalog.get_by_type(is_kitchen=False))


@router.get("/kitchen")
async def list_kitchen_items(
    catalog: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return list_response(await catalog.get_by_type(is_kitchen=True))


@router.get("/low-stock")
async def list_low_stock_items(
    catalog: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return list_response(await catalog.get_low_stock())


@router.get("/{item_id}")
async def get_menu_item(
    item_id: str, catalog: CatalogService = Depends(get_catalog_service)
) -> JSONResponse:
    return success_response(data=await catalog.get_by_id(item_id))


@router.post("")
async def create_menu_item(
    body: MenuItemCreateRequest, catalog: CatalogService = Depends(get_catalog_service)
) -> JSONResponse:
    """Create a menu item. Responds 409 if the itemId is taken."""
    item = await catalog.create(MenuItem(**body.model_dump()))
    return success_response(status_code=201, data=item)


@router.put("/{item_id}")
async def update_menu_item(
    item_id: str, patch: MenuItemPatch, catalog: CatalogService = Depends(get_catalog_service)
) -> JSONResponse:
    """Update mutable fields of a menu item. Unknown fields are rejected."""
    return success_response(data=await catalog.update(item_id, patch))


@router.patch("/{item_id}/stock")
async def change_menu_item_stock(
    item_id: str,
    body: StockChangeRequest,
    catalog: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return success_response(data=await catalog.update_stock(item_id, body.quantity))


@router.delete("/{item_id}")
async def delete_menu_item(
    item_id: str, catalog: CatalogService = Depends(get_catalog_service)
) -> JSONResponse:
    item = await catalog.delete(item_id)
    return success_response(data=item, message="Item deleted successfully")
