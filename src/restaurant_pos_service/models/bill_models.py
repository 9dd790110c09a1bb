"""Billing models.

A bill aggregates line items for one customer. Totals and the bar/kitchen
partition are derived from ``items`` so they cannot drift from it.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from restaurant_pos_service.models.common import CAMEL_CASE_CONFIG, round_half_up, to_iso

TAX_RATE = Decimal("0.05")


def _without_floats(value: Any) -> Any:
    """DynamoDB rejects floats, so free-form values are stored as Decimal."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: _without_floats(inner) for key, inner in value.items()}
    if isinstance(value, list):
        return [_without_floats(inner) for inner in value]
    return value


class BillStatus(str, Enum):
    """Enumeration of bill status values."""

    OPEN = "open"
    PENDING = "pending"
    COMPLETED = "completed"


class Customer(BaseModel):
    """Customer details attached to a bill. Phone is the same-day merge key."""

    model_config = ConfigDict(**CAMEL_CASE_CONFIG, extra="allow")

    name: str = ""
    phone: str = ""

    @model_validator(mode="after")
    def decimal_extras(self) -> "Customer":
        if self.__pydantic_extra__:
            for key, value in self.__pydantic_extra__.items():
                self.__pydantic_extra__[key] = _without_floats(value)
        return self

    @property
    def normalized_phone(self) -> str:
        return (self.phone or "").strip()


class LineItem(BaseModel):
    """A single ordered menu item within a bill."""

    model_config = CAMEL_CASE_CONFIG

    item_id: str = Field(default="", description="Menu item identifier, empty for ad-hoc lines")
    name: str = Field(..., description="Item name at time of order")
    price: Decimal = Field(..., description="Unit price", ge=0)
    quantity: int = Field(..., description="Units ordered", gt=0)
    is_kitchen: bool = Field(default=False, description="Routed to the kitchen")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dynamodb_item(self) -> dict[str, Any]:
        return {
            "itemId": self.item_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "isKitchen": self.is_kitchen,
        }


def calculate_subtotal(items: list[LineItem]) -> Decimal:
    """Sum of price times quantity over all lines."""
    return sum((item.line_total for item in items), Decimal("0"))


def calculate_tax(subtotal: Decimal) -> Decimal:
    """Tax is rounded on its own before being added to the subtotal."""
    return round_half_up(subtotal * TAX_RATE)


class Bill(BaseModel):
    """Customer bill.

    Stored in DynamoDB with ``billId`` as partition key. ``barItems``,
    ``kitchenItems``, ``subtotal``, ``tax`` and ``total`` are written alongside
    ``items`` for readers of the table but always recomputed on load.
    """

    model_config = CAMEL_CASE_CONFIG

    bill_id: str = Field(..., description="BILL-<epoch millis>-<suffix>")
    customer: Customer = Field(default_factory=Customer)
    items: list[LineItem] = Field(default_factory=list)
    status: BillStatus = Field(default=BillStatus.OPEN)
    payment_method: str = Field(default="cash")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")

    @computed_field(alias="barItems")  # type: ignore[prop-decorator]
    @property
    def bar_items(self) -> list[LineItem]:
        return [item for item in self.items if not item.is_kitchen]

    @computed_field(alias="kitchenItems")  # type: ignore[prop-decorator]
    @property
    def kitchen_items(self) -> list[LineItem]:
        return [item for item in self.items if item.is_kitchen]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def subtotal(self) -> Decimal:
        return calculate_subtotal(self.items)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tax(self) -> Decimal:
        return calculate_tax(self.subtotal)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax

    def content_values(self) -> dict[str, Any]:
        """Attributes rewritten whenever the bill's items change.

        Returns:
            dict: Stored attribute names mapped to values
        """
        values: dict[str, Any] = {
            "customer": self.customer.model_dump(by_alias=True),
            "items": [item.to_dynamodb_item() for item in self.items],
            "barItems": [item.to_dynamodb_item() for item in self.bar_items],
            "kitchenItems": [item.to_dynamodb_item() for item in self.kitchen_items],
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "status": self.status.value,
        }

        if self.updated_at is not None:
            values["updatedAt"] = to_iso(self.updated_at)

        return values

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "billId": self.bill_id,
            "paymentMethod": self.payment_method,
            "createdAt": to_iso(self.created_at),
        }
        item.update(self.content_values())
        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Bill":
        """Create Bill from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Bill: Parsed model instance
        """
        data: dict[str, Any] = {
            "bill_id": item["billId"],
            "customer": Customer.model_validate(item.get("customer") or {}),
            "items": [LineItem.model_validate(line) for line in item.get("items", [])],
            "status": BillStatus(item.get("status", BillStatus.OPEN.value)),
            "payment_method": item.get("paymentMethod", "cash"),
            "created_at": datetime.fromisoformat(item["createdAt"]),
        }

        if item.get("updatedAt"):
            data["updated_at"] = datetime.fromisoformat(item["updatedAt"])

        return cls(**data)


class KitchenOrder(BaseModel):
    """Kitchen ticket derived from a bill. Never persisted."""

    model_config = CAMEL_CASE_CONFIG

    bill_id: str
    customer: Customer
    items: list[LineItem]
    status: BillStatus = BillStatus.PENDING

    @classmethod
    def from_bill(cls, bill: Bill) -> "KitchenOrder | None":
        """Build the kitchen view of a bill, or None when it has no kitchen items."""
        kitchen_items = bill.kitchen_items
        if not kitchen_items:
            return None
        return cls(bill_id=bill.bill_id, customer=bill.customer, items=kitchen_items)
