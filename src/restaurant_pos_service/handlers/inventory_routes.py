"""Kitchen inventory endpoints under /api/kitchen-inventory."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from restaurant_pos_service.handlers.dependencies import get_inventory_service
from restaurant_pos_service.handlers.responses import list_response, success_response
from restaurant_pos_service.models.common import CAMEL_CASE_CONFIG
from restaurant_pos_service.models.inventory_models import InventoryStatus, derive_stock_status
from restaurant_pos_service.services.inventory_service import InventoryService

router = APIRouter(prefix="/api/kitchen-inventory", tags=["Kitchen Inventory"])


class InventoryItemRequest(BaseModel):
    """Body for creating or fully updating an inventory item."""

    model_config = CAMEL_CASE_CONFIG

    name: str = Field(..., min_length=1)
    quantity: Decimal = Field(Decimal("0"), ge=0)
    unit: str = "pcs"
    min_stock: Decimal = Field(Decimal("10"), ge=0)
    category: str = "general"

    @property
    def status(self) -> InventoryStatus:
        return derive_stock_status(self.quantity, self.min_stock)


class InventoryStatusRequest(BaseModel):
    status: InventoryStatus


class RefillRequest(BaseModel):
    quantity: Decimal = Field(..., ge=0)


@router.get("")
async def list_inventory(
    inventory: InventoryService = Depends(get_inventory_service),
) -> JSONResponse:
    return list_response(await inventory.get_all())


@router.get("/low-stock")
async def list_low_inventory(
    inventory: InventoryService = Depends(get_inventory_service),
) -> JSONResponse:
    return list_response(await inventory.get_low_stock())


@router.get("/{inventory_id}")
async def get_inventory_item(
    inventory_id: str, inventory: InventoryService = Depends(get_inventory_service)
) -> JSONResponse:
    return success_response(data=await inventory.get_by_id(inventory_id))


@router.post("")
async def create_inventory_item(
    body: InventoryItemRequest, inventory: InventoryService = Depends(get_inventory_service)
) -> JSONResponse:
    item = await inventory.create(
        name=body.name,
        quantity=body.quantity,
        unit=body.unit,
        min_stock=body.min_stock,
        category=body.category,
        status=body.status,
    )
    return success_response(status_code=201, data=item)


@router.put("/{inventory_id}")
async def update_inventory_item(
    inventory_id: str,
    body: InventoryItemRequest,
    inventory: InventoryService = Depends(get_inventory_service),
) -> JSONResponse:
    item = await inventory.update(
        inventory_id,
        name=body.name,
        quantity=body.quantity,
        unit=body.unit,
        min_stock=body.min_stock,
        category=body.category,
        status=body.status,
    )
    return success_response(data=item)


@router.patch("/{inventory_id}/status")
async def set_inventory_status(
    inventory_id: str,
    body: InventoryStatusRequest,
    inventory: InventoryService = Depends(get_inventory_service),
) -> JSONResponse:
    return success_response(data=await inventory.update_status(inventory_id, body.status))


@router.patch("/{inventory_id}/refill")
async def refill_inventory_item(
    inventory_id: str,
    body: RefillRequest,
    inventory: InventoryService = Depends(get_inventory_service),
) -> JSONResponse:
    return success_response(data=await inventory.refill(inventory_id, body.quantity))


@router.delete("/{inventory_id}")
async def delete_inventory_item(
    inventory_id: str, inventory: InventoryService = Depends(get_inventory_service)
) -> JSONResponse:
    await inventory.delete(inventory_id)
    return success_response(message="Inventory item deleted")
