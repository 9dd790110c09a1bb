"""Kitchen inventory models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from restaurant_pos_service.models.common import CAMEL_CASE_CONFIG, to_iso


class InventoryStatus(str, Enum):
    """Stock level of a raw inventory item."""

    AVAILABLE = "available"
    LOW = "low"
    OUT = "out"


def derive_stock_status(quantity: Decimal | int, min_stock: Decimal | int) -> InventoryStatus:
    """Derive an inventory status from quantity and minimum stock.

    Args:
        quantity: Units on hand
        min_stock: Level at or below which the item is low

    Returns:
        InventoryStatus: OUT at zero, LOW at or below min_stock, else AVAILABLE
    """
    if quantity == 0:
        return InventoryStatus.OUT
    if quantity <= min_stock:
        return InventoryStatus.LOW
    return InventoryStatus.AVAILABLE


class InventoryItem(BaseModel):
    """Raw kitchen stock item.

    ``status`` is stored as given; callers derive it with ``derive_stock_status``.
    """

    model_config = CAMEL_CASE_CONFIG

    inventory_id: str = Field(..., description="INV-<epoch millis>-<suffix>")
    name: str = Field(..., description="Item name")
    quantity: Decimal = Field(default=Decimal("0"), description="Quantity on hand", ge=0)
    unit: str = Field(default="pcs", description="Unit of measure")
    min_stock: Decimal = Field(default=Decimal("10"), description="Low stock level", ge=0)
    status: InventoryStatus = Field(default=InventoryStatus.AVAILABLE)
    category: str = Field(default="general")
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_refilled: datetime | None = None

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "inventoryId": self.inventory_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "minStock": self.min_stock,
            "status": self.status.value,
            "category": self.category,
            "lastRefilled": to_iso(self.last_refilled) if self.last_refilled else None,
        }

        if self.created_at is not None:
            item["createdAt"] = to_iso(self.created_at)

        if self.updated_at is not None:
            item["updatedAt"] = to_iso(self.updated_at)

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "InventoryItem":
        """Create InventoryItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            InventoryItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "inventory_id": item["inventoryId"],
            "name": item["name"],
            "quantity": item.get("quantity", 0),
            "unit": item.get("unit", "pcs"),
            "min_stock": item.get("minStock", 10),
            "status": InventoryStatus(item.get("status", InventoryStatus.AVAILABLE.value)),
            "category": item.get("category", "general"),
        }

        for attribute, field_name in (
            ("createdAt", "created_at"),
            ("updatedAt", "updated_at"),
            ("lastRefilled", "last_refilled"),
        ):
            if item.get(attribute):
                data[field_name] = datetime.fromisoformat(item[attribute])

        return cls(**data)
