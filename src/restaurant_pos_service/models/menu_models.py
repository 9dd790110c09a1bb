"""Menu catalog models.

Menu items are keyed by a caller-supplied ``itemId`` and carry the stock count
that bills draw down.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from restaurant_pos_service.models.common import CAMEL_CASE_CONFIG, to_iso


class MenuItem(BaseModel):
    """Menu item model.

    ``stock`` is allowed to go negative; oversell is reconciled manually.
    """

    model_config = CAMEL_CASE_CONFIG

    item_id: str = Field(..., description="Caller-supplied unique identifier", min_length=1)
    name: str = Field(..., description="Item name")
    price: Decimal = Field(..., description="Item price in currency units", ge=0)
    category: str = Field(..., description="Menu category")
    stock: int = Field(default=0, description="Units on hand")
    low_stock_threshold: int = Field(default=10, description="Stock level considered low")
    is_kitchen: bool = Field(default=False, description="Routed to the kitchen rather than the bar")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")

    @property
    def is_low_stock(self) -> bool:
        """Whether stock has reached the low-stock threshold."""
        return self.stock <= self.low_stock_threshold

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "itemId": self.item_id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "stock": self.stock,
            "lowStockThreshold": self.low_stock_threshold,
            "isKitchen": self.is_kitchen,
        }

        if self.created_at is not None:
            item["createdAt"] = to_iso(self.created_at)

        if self.updated_at is not None:
            item["updatedAt"] = to_iso(self.updated_at)

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "item_id": item["itemId"],
            "name": item["name"],
            "price": item["price"],
            "category": item.get("category", ""),
            "stock": int(item.get("stock", 0)),
            "low_stock_threshold": int(item.get("lowStockThreshold", 10)),
            "is_kitchen": bool(item.get("isKitchen", False)),
        }

        if "createdAt" in item:
            data["created_at"] = datetime.fromisoformat(item["createdAt"])

        if "updatedAt" in item:
            data["updated_at"] = datetime.fromisoformat(item["updatedAt"])

        return cls(**data)


class MenuItemPatch(BaseModel):
    """Partial update for a menu item.

    Only the listed fields may change; anything else (``itemId`` included) is
    rejected.
    """

    model_config = ConfigDict(**CAMEL_CASE_CONFIG, extra="forbid")

    name: str | None = None
    price: Decimal | None = Field(None, ge=0)
    category: str | None = None
    stock: int | None = None
    low_stock_threshold: int | None = None
    is_kitchen: bool | None = None

    def to_dynamodb_values(self) -> dict[str, Any]:
        """Return the set fields keyed by their stored attribute names."""
        return self.model_dump(by_alias=True, exclude_none=True)
