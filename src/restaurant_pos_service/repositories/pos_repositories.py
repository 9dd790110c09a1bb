"""DynamoDB repository classes for the POS entities.

Each repository maps one entity to its table through the shared
``DynamoDBStore`` gateway. Store failures surface as typed errors from the
gateway; a missing item on read is reported as None.
"""

import logging
from datetime import datetime
from typing import Any

from boto3.dynamodb.conditions import Attr

from restaurant_pos_service.models.bill_models import Bill, BillStatus
from restaurant_pos_service.models.common import to_iso, utc_now
from restaurant_pos_service.models.inventory_models import InventoryItem, InventoryStatus
from restaurant_pos_service.models.menu_models import MenuItem, MenuItemPatch
from restaurant_pos_service.models.user_models import User
from restaurant_pos_service.repositories.dynamodb_store import DynamoDBStore

logger = logging.getLogger(__name__)


class MenuItemRepository:
    """Repository for menu items, keyed by itemId."""

    def __init__(self, store: DynamoDBStore, table_name: str) -> None:
        """Initialize repository.

        Args:
            store: DynamoDB gateway
            table_name: Name of the menu items table
        """
        self.store = store
        self.table_name = table_name

    def create(self, item: MenuItem) -> MenuItem:
        """Insert a new menu item. Raises DuplicateKeyError if the id exists."""
        self.store.put(self.table_name, item.to_dynamodb_item(), unique_key="itemId")
        return item

    def get(self, item_id: str) -> MenuItem | None:
        item = self.store.get(self.table_name, {"itemId": item_id})
        return MenuItem.from_dynamodb_item(item) if item else None

    def list_all(self) -> list[MenuItem]:
        return [MenuItem.from_dynamodb_item(item) for item in self.store.scan(self.table_name)]

    def list_by_type(self, is_kitchen: bool) -> list[MenuItem]:
        items = self.store.scan(self.table_name, Attr("isKitchen").eq(is_kitchen))
        return [MenuItem.from_dynamodb_item(item) for item in items]

    def update(self, item_id: str, patch: MenuItemPatch) -> MenuItem:
        """Apply a partial update. Raises NotFoundError if the item is missing."""
        values = patch.to_dynamodb_values()
        values["updatedAt"] = to_iso(utc_now())
        attributes = self.store.update(self.table_name, {"itemId": item_id}, values=values)
        return MenuItem.from_dynamodb_item(attributes)

    def increment_stock(self, item_id: str, delta: int) -> MenuItem:
        """Add a signed delta to stock in a single store-level update.

        The update is conditioned on the item existing, so a missing item
        raises NotFoundError instead of creating a stock-only record.

        Args:
            item_id: Menu item identifier
            delta: Signed stock change

        Returns:
            MenuItem: The item after the change
        """
        attributes = self.store.update(
            self.table_name,
            {"itemId": item_id},
            values={"updatedAt": to_iso(utc_now())},
            increments={"stock": delta},
        )
        return MenuItem.from_dynamodb_item(attributes)

    def delete(self, item_id: str) -> MenuItem | None:
        item = self.store.delete(self.table_name, {"itemId": item_id})
        return MenuItem.from_dynamodb_item(item) if item else None


class BillRepository:
    """Repository for bills, keyed by billId."""

    def __init__(self, store: DynamoDBStore, table_name: str) -> None:
        """Initialize repository.

        Args:
            store: DynamoDB gateway
            table_name: Name of the billing table
        """
        self.store = store
        self.table_name = table_name

    def save(self, bill: Bill) -> Bill:
        self.store.put(self.table_name, bill.to_dynamodb_item())
        return bill

    def get(self, bill_id: str) -> Bill | None:
        item = self.store.get(self.table_name, {"billId": bill_id})
        return Bill.from_dynamodb_item(item) if item else None

    def update_contents(self, bill: Bill) -> Bill:
        """Overwrite customer, items, derived totals, status and updatedAt.

        Raises:
            NotFoundError: If the bill does not exist
        """
        attributes = self.store.update(
            self.table_name, {"billId": bill.bill_id}, values=bill.content_values()
        )
        return Bill.from_dynamodb_item(attributes)

    def update_status(self, bill_id: str, status: BillStatus) -> Bill:
        attributes = self.store.update(
            self.table_name,
            {"billId": bill_id},
            values={"status": status.value, "updatedAt": to_iso(utc_now())},
        )
        return Bill.from_dynamodb_item(attributes)

    def list_bills(self, limit: int | None = None) -> list[Bill]:
        """Scan up to ``limit`` bills in store order."""
        items = self.store.scan(self.table_name, limit=limit)
        return [Bill.from_dynamodb_item(item) for item in items]

    def list_by_statuses(self, statuses: list[BillStatus]) -> list[Bill]:
        condition = Attr("status").is_in([status.value for status in statuses])
        items = self.store.scan(self.table_name, condition)
        return [Bill.from_dynamodb_item(item) for item in items]

    def list_created_between(self, start: datetime, end: datetime) -> list[Bill]:
        """List bills with start <= createdAt < end.

        Args:
            start: Inclusive lower bound
            end: Exclusive upper bound

        Returns:
            list: Bills created in the window, in store order
        """
        condition = Attr("createdAt").gte(to_iso(start)) & Attr("createdAt").lt(to_iso(end))
        items = self.store.scan(self.table_name, condition)
        return [Bill.from_dynamodb_item(item) for item in items]


class InventoryRepository:
    """Repository for kitchen inventory items, keyed by inventoryId."""

    def __init__(self, store: DynamoDBStore, table_name: str) -> None:
        """Initialize repository.

        Args:
            store: DynamoDB gateway
            table_name: Name of the kitchen inventory table
        """
        self.store = store
        self.table_name = table_name

    def save(self, item: InventoryItem) -> InventoryItem:
        self.store.put(self.table_name, item.to_dynamodb_item())
        return item

    def get(self, inventory_id: str) -> InventoryItem | None:
        item = self.store.get(self.table_name, {"inventoryId": inventory_id})
        return InventoryItem.from_dynamodb_item(item) if item else None

    def list_all(self) -> list[InventoryItem]:
        return [InventoryItem.from_dynamodb_item(item) for item in self.store.scan(self.table_name)]

    def update_fields(self, inventory_id: str, values: dict[str, Any]) -> InventoryItem:
        """Assign stored attributes and stamp updatedAt.

        Raises:
            NotFoundError: If the item does not exist
        """
        values = {**values, "updatedAt": to_iso(utc_now())}
        attributes = self.store.update(
            self.table_name, {"inventoryId": inventory_id}, values=values
        )
        return InventoryItem.from_dynamodb_item(attributes)

    def update_status(self, inventory_id: str, status: InventoryStatus) -> InventoryItem:
        return self.update_fields(inventory_id, {"status": status.value})

    def delete(self, inventory_id: str) -> InventoryItem | None:
        item = self.store.delete(self.table_name, {"inventoryId": inventory_id})
        return InventoryItem.from_dynamodb_item(item) if item else None


class UserRepository:
    """Repository for staff users, keyed by userId."""

    def __init__(self, store: DynamoDBStore, table_name: str) -> None:
        """Initialize repository.

        Args:
            store: DynamoDB gateway
            table_name: Name of the users table
        """
        self.store = store
        self.table_name = table_name

    def create(self, user: User) -> User:
        self.store.put(self.table_name, user.to_dynamodb_item(), unique_key="userId")
        return user

    def find_by_username(self, username: str) -> User | None:
        """Find a user by username, ignoring case and surrounding whitespace.

        Usernames are not the table key, so this is a filtered scan.
        """
        items = self.store.scan(self.table_name, Attr("username").eq(username.strip().lower()))
        return User.from_dynamodb_item(items[0]) if items else None

    def list_all(self) -> list[User]:
        return [User.from_dynamodb_item(item) for item in self.store.scan(self.table_name)]

    def update_fields(self, user_id: str, values: dict[str, Any]) -> User:
        values = {**values, "updatedAt": to_iso(utc_now())}
        attributes = self.store.update(self.table_name, {"userId": user_id}, values=values)
        return User.from_dynamodb_item(attributes)
