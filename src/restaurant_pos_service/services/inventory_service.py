"""Kitchen inventory service."""

import logging
from decimal import Decimal

from restaurant_pos_service.errors import NotFoundError
from restaurant_pos_service.models.common import generate_entity_id, to_iso, utc_now
from restaurant_pos_service.models.inventory_models import InventoryItem, InventoryStatus
from restaurant_pos_service.repositories.pos_repositories import InventoryRepository

logger = logging.getLogger(__name__)


class InventoryService:
    """Service for raw kitchen stock.

    The status passed in on create/update is stored as is; callers keep it in
    line with quantity using ``derive_stock_status``.
    """

    def __init__(self, inventory_repository: InventoryRepository) -> None:
        """Initialize the InventoryService.

        Args:
            inventory_repository: Repository for inventory items
        """
        self.inventory_repository = inventory_repository

    async def create(
        self,
        name: str,
        quantity: Decimal,
        unit: str,
        min_stock: Decimal,
        category: str,
        status: InventoryStatus,
    ) -> InventoryItem:
        """Create an inventory item with a fresh INV- identifier."""
        now = utc_now()
        item = InventoryItem(
            inventory_id=generate_entity_id("INV"),
            name=name,
            quantity=quantity,
            unit=unit,
            min_stock=min_stock,
            status=status,
            category=category,
            created_at=now,
            updated_at=now,
        )
        self.inventory_repository.save(item)
        logger.info(f"Created inventory item {item.inventory_id} ({name})")
        return item

    async def get_all(self) -> list[InventoryItem]:
        """List all items sorted by name."""
        return sorted(self.inventory_repository.list_all(), key=lambda item: item.name.lower())

    async def get_by_id(self, inventory_id: str) -> InventoryItem:
        item = self.inventory_repository.get(inventory_id)
        if item is None:
            raise NotFoundError("Inventory item not found")
        return item

    async def get_low_stock(self) -> list[InventoryItem]:
        items = await self.get_all()
        return [item for item in items if item.status in (InventoryStatus.LOW, InventoryStatus.OUT)]

    async def update(
        self,
        inventory_id: str,
        name: str,
        quantity: Decimal,
        unit: str,
        min_stock: Decimal,
        category: str,
        status: InventoryStatus,
    ) -> InventoryItem:
        """Overwrite every mutable field of an inventory item."""
        return self.inventory_repository.update_fields(
            inventory_id,
            {
                "name": name,
                "quantity": quantity,
                "unit": unit,
                "minStock": min_stock,
                "status": status.value,
                "category": category,
            },
        )

    async def update_status(self, inventory_id: str, status: InventoryStatus) -> InventoryItem:
        return self.inventory_repository.update_status(inventory_id, status)

    async def refill(self, inventory_id: str, quantity: Decimal) -> InventoryItem:
        """Set a new quantity, mark the item available and stamp lastRefilled.

        Args:
            inventory_id: Inventory item identifier
            quantity: New quantity on hand

        Returns:
            The refilled item
        """
        item = self.inventory_repository.update_fields(
            inventory_id,
            {
                "quantity": quantity,
                "status": InventoryStatus.AVAILABLE.value,
                "lastRefilled": to_iso(utc_now()),
            },
        )
        logger.info(f"Refilled inventory item {inventory_id} to {quantity}")
        return item

    async def delete(self, inventory_id: str) -> None:
        if self.inventory_repository.delete(inventory_id) is None:
            raise NotFoundError("Inventory item not found")
        logger.info(f"Deleted inventory item {inventory_id}")
