"""Catalog service for menu items and their stock counts."""

import logging

from restaurant_pos_service.errors import NotFoundError
from restaurant_pos_service.models.common import utc_now
from restaurant_pos_service.models.menu_models import MenuItem, MenuItemPatch
from restaurant_pos_service.repositories.pos_repositories import MenuItemRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """Service owning the menu catalog.

    Stock adjustments are single additive store updates. Stock may go
    negative; nothing here refuses an order for lack of stock.
    """

    def __init__(self, menu_item_repository: MenuItemRepository) -> None:
        """Initialize the CatalogService.

        Args:
            menu_item_repository: Repository for menu items
        """
        self.menu_item_repository = menu_item_repository

    async def create(self, item: MenuItem) -> MenuItem:
        """Create a menu item.

        Args:
            item: Item to create; timestamps are stamped here

        Returns:
            The stored item

        Raises:
            DuplicateKeyError: If an item with the same itemId exists
        """
        now = utc_now()
        new_item = item.model_copy(update={"created_at": now, "updated_at": now})
        created = self.menu_item_repository.create(new_item)
        logger.info(f"Created menu item {created.item_id}")
        return created

    async def get_all(self) -> list[MenuItem]:
        return self.menu_item_repository.list_all()

    async def get_by_type(self, is_kitchen: bool) -> list[MenuItem]:
        """List kitchen items (True) or bar items (False)."""
        return self.menu_item_repository.list_by_type(is_kitchen)

    async def get_by_id(self, item_id: str) -> MenuItem:
        item = self.menu_item_repository.get(item_id)
        if item is None:
            raise NotFoundError("Item not found")
        return item

    async def update(self, item_id: str, patch: MenuItemPatch) -> MenuItem:
        return self.menu_item_repository.update(item_id, patch)

    async def update_stock(self, item_id: str, delta: int) -> MenuItem:
        """Apply a signed stock delta to a menu item.

        Args:
            item_id: Menu item identifier
            delta: Positive to restock, negative to draw down

        Returns:
            The item with its new stock count

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self.menu_item_repository.increment_stock(item_id, delta)
        logger.debug(f"Stock for {item_id} adjusted by {delta} to {item.stock}")
        return item

    async def delete(self, item_id: str) -> MenuItem:
        item = self.menu_item_repository.delete(item_id)
        if item is None:
            raise NotFoundError("Item not found")
        logger.info(f"Deleted menu item {item_id}")
        return item

    async def get_low_stock(self) -> list[MenuItem]:
        """List items whose stock is at or below their threshold."""
        return [item for item in self.menu_item_repository.list_all() if item.is_low_stock]
