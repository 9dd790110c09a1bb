"""Shared pytest fixtures and configuration for all tests."""

import os
from datetime import UTC, datetime
from decimal import Decimal

import pytest

# Entry point modules skip building the real app when imported under test
os.environ.setdefault("ENVIRONMENT", "test")

from restaurant_pos_service.models.bill_models import (  # noqa: E402
    Bill,
    BillStatus,
    Customer,
    LineItem,
)
from restaurant_pos_service.models.menu_models import MenuItem  # noqa: E402


@pytest.fixture
def mock_customer() -> Customer:
    """Fixture providing a standard test customer."""
    return Customer(name="Asha", phone="9876543210")


@pytest.fixture
def mock_line_items() -> list[LineItem]:
    """Fixture providing one bar line and one kitchen line."""
    return [
        LineItem(item_id="BEER1", name="Kingfisher", price=Decimal("120"), quantity=2),
        LineItem(
            item_id="FOOD1", name="Chicken 65", price=Decimal("250"), quantity=1, is_kitchen=True
        ),
    ]


@pytest.fixture
def mock_bill(mock_customer: Customer, mock_line_items: list[LineItem]) -> Bill:
    """Fixture providing an open bill created this morning (UTC)."""
    created = datetime(2024, 1, 15, 4, 30, tzinfo=UTC)
    return Bill(
        bill_id="BILL-1705293000000-AB12",
        customer=mock_customer,
        items=mock_line_items,
        status=BillStatus.OPEN,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def mock_menu_item() -> MenuItem:
    """Fixture providing a bar menu item."""
    return MenuItem(
        item_id="BEER1",
        name="Kingfisher",
        price=Decimal("120"),
        category="beer",
        stock=24,
        low_stock_threshold=10,
        is_kitchen=False,
    )


@pytest.fixture
def mock_menu_item_record() -> dict:
    """Fixture providing a stored menu item as DynamoDB returns it."""
    return {
        "itemId": "BEER1",
        "name": "Kingfisher",
        "price": Decimal("120"),
        "category": "beer",
        "stock": Decimal("24"),
        "lowStockThreshold": Decimal("10"),
        "isKitchen": False,
        "createdAt": "2024-01-15T04:30:00+00:00",
        "updatedAt": "2024-01-15T04:30:00+00:00",
    }
