"""Component tests running the POS API over the real services and repositories."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient

from restaurant_pos_service.bootstrap import build_services
from restaurant_pos_service.config import Settings
from restaurant_pos_service.models.bill_models import Customer, LineItem


def _create_menu_items(client: TestClient) -> None:
    for body in (
        {"itemId": "BEER1", "name": "Kingfisher", "price": 120, "category": "beer", "stock": 10},
        {
            "itemId": "FOOD1",
            "name": "Chicken 65",
            "price": 250,
            "category": "starters",
            "stock": 5,
            "isKitchen": True,
        },
    ):
        assert client.post("/api/menu-items", json=body).status_code == 201


def _stock(client: TestClient, item_id: str) -> int:
    stock: int = client.get(f"/api/menu-items/{item_id}").json()["data"]["stock"]
    return stock


BEER = {"itemId": "BEER1", "name": "Kingfisher", "price": 120, "quantity": 2}
FOOD = {"itemId": "FOOD1", "name": "Chicken 65", "price": 250, "quantity": 1, "isKitchen": True}
CUSTOMER = {"name": "Asha", "phone": "9876543210"}


@pytest.mark.component
class TestBillingFlow:
    """Bill lifecycle with stock reconciliation."""

    def test_same_day_orders_merge_and_draw_stock(self, pos_client: TestClient) -> None:
        """Test that a second order for the same phone extends the open bill."""
        _create_menu_items(pos_client)

        first = pos_client.post("/api/billing", json={"customer": CUSTOMER, "items": [BEER, FOOD]})
        assert first.status_code == 201
        bill_id = first.json()["data"]["billId"]
        assert first.json()["data"]["total"] == 515
        assert first.json()["kitchenOrder"]["items"][0]["itemId"] == "FOOD1"

        second = pos_client.post(
            "/api/billing",
            json={"customer": {"phone": "9876543210"}, "items": [{**BEER, "quantity": 1}]},
        )
        assert second.status_code == 200
        body = second.json()
        assert body["isUpdate"] is True
        assert body["data"]["billId"] == bill_id
        assert body["data"]["customer"]["name"] == "Asha"
        assert [line["quantity"] for line in body["data"]["items"]] == [3, 1]
        assert body["data"]["subtotal"] == 610
        assert body["data"]["tax"] == 31
        assert body["data"]["total"] == 641

        assert _stock(pos_client, "BEER1") == 7
        assert _stock(pos_client, "FOOD1") == 4

        stored = pos_client.get(f"/api/billing/{bill_id}").json()["data"]
        assert stored["total"] == 641
        assert len(stored["barItems"]) == 1

    def test_replace_returns_stock_for_removed_items(self, pos_client: TestClient) -> None:
        """Test that editing a bill gives back stock for what was taken off."""
        _create_menu_items(pos_client)
        bill_id = pos_client.post(
            "/api/billing", json={"customer": CUSTOMER, "items": [BEER, FOOD]}
        ).json()["data"]["billId"]

        response = pos_client.put(
            f"/api/billing/{bill_id}", json={"items": [{**BEER, "quantity": 1}]}
        )

        assert response.status_code == 200
        assert response.json()["data"]["kitchenItems"] == []
        assert _stock(pos_client, "BEER1") == 9
        assert _stock(pos_client, "FOOD1") == 5

    def test_completed_bill_starts_a_new_one(self, pos_client: TestClient) -> None:
        """Test that completing a bill stops further merges into it."""
        _create_menu_items(pos_client)
        bill_id = pos_client.post(
            "/api/billing", json={"customer": CUSTOMER, "items": [BEER]}
        ).json()["data"]["billId"]

        completed = pos_client.patch(
            f"/api/billing/{bill_id}/status", json={"status": "completed"}
        )
        assert completed.json()["data"]["status"] == "completed"
        assert pos_client.get("/api/billing/find-by-phone/9876543210").json()["exists"] is False

        again = pos_client.post("/api/billing", json={"customer": CUSTOMER, "items": [BEER]})
        assert again.status_code == 201
        assert again.json()["data"]["billId"] != bill_id

        stats = pos_client.get("/api/billing/stats").json()["data"]
        assert stats["totalBills"] == 2
        assert stats["todayBills"] == 2
        assert stats["totalRevenue"] == 504
        assert stats["avgOrderValue"] == 252

        pending = pos_client.get("/api/billing/pending").json()
        assert pending["count"] == 1

    def test_unknown_item_keeps_bill_and_reports_failure(self, pos_client: TestClient) -> None:
        """Test that a stock failure does not undo the bill."""
        response = pos_client.post(
            "/api/billing",
            json={"customer": CUSTOMER, "items": [{**BEER, "itemId": "GHOST"}]},
        )

        assert response.status_code == 201
        adjustment = response.json()["stockAdjustments"][0]
        assert adjustment["itemId"] == "GHOST"
        assert adjustment["success"] is False
        assert pos_client.get("/api/billing").json()["count"] == 1


    def test_numeric_customer_extras_are_stored(
        self, pos_client: TestClient, dynamodb: Any
    ) -> None:
        """Test that a fractional customer attribute does not break submission."""
        response = pos_client.post(
            "/api/billing",
            json={"customer": {**CUSTOMER, "tableNo": 4.5}, "items": [{**BEER, "itemId": ""}]},
        )

        assert response.status_code == 201
        body = response.json()["data"]
        assert body["customer"]["tableNo"] == 4.5
        stored = dynamodb.tables["jumjum-bar-billing"].items[body["billId"]]
        assert stored["customer"]["tableNo"] == Decimal("4.5")


IST = timezone(timedelta(hours=5, minutes=30))


@pytest.mark.component
class TestDayBoundary:
    """Same-day merging across local midnight over the real bill table."""

    @pytest.mark.asyncio
    async def test_bill_after_midnight_is_new(self, dynamodb: Any) -> None:
        """Test that the merge window closes at local midnight."""
        billing_service = build_services(Settings(environment="test"), dynamodb).billing_service
        now = {"value": datetime(2024, 1, 15, 23, 59, 59, tzinfo=IST)}
        billing_service.clock = lambda: now["value"]
        customer = Customer(name="Asha", phone="9876543210")
        line = LineItem(item_id="", name="Water", price=Decimal("20"), quantity=1)

        first = await billing_service.add_or_create(customer, [line])
        same_second = await billing_service.add_or_create(customer, [line])
        now["value"] = datetime(2024, 1, 16, 0, 0, 1, tzinfo=IST)
        after_midnight = await billing_service.add_or_create(customer, [line])

        assert first.is_update is False
        assert same_second.is_update is True
        assert same_second.bill.bill_id == first.bill.bill_id
        assert len(same_second.bill.items) == 2
        assert after_midnight.is_update is False
        assert after_midnight.bill.bill_id != first.bill.bill_id
        assert len(after_midnight.bill.items) == 1


@pytest.mark.component
class TestCatalogFlow:
    """Menu catalog behaviour against the store."""

    def test_duplicate_item_id_conflicts(self, pos_client: TestClient) -> None:
        """Test that an itemId can only be created once."""
        _create_menu_items(pos_client)

        response = pos_client.post(
            "/api/menu-items",
            json={"itemId": "BEER1", "name": "Other", "price": 99, "category": "beer"},
        )

        assert response.status_code == 409
        assert pos_client.get("/api/menu-items/BEER1").json()["data"]["name"] == "Kingfisher"

    def test_stock_change_on_missing_item(
        self, pos_client: TestClient, dynamodb: Any
    ) -> None:
        """Test that adjusting an unknown item is a 404 and creates nothing."""
        response = pos_client.patch("/api/menu-items/NOPE/stock", json={"quantity": 5})

        assert response.status_code == 404
        assert dynamodb.tables["jumjum-menu-items"].items == {}

    def test_low_stock_and_type_listings(self, pos_client: TestClient) -> None:
        """Test low-stock and bar/kitchen listings."""
        _create_menu_items(pos_client)

        low = pos_client.get("/api/menu-items/low-stock").json()
        kitchen = pos_client.get("/api/menu-items/kitchen").json()

        assert {item["itemId"] for item in low["data"]} == {"BEER1", "FOOD1"}
        assert [item["itemId"] for item in kitchen["data"]] == ["FOOD1"]


@pytest.mark.component
class TestIdentityFlow:
    """Seeding and login."""

    def test_seed_and_login(self, pos_client: TestClient) -> None:
        """Test the default accounts and role checks."""
        seeded = pos_client.post("/api/auth/seed").json()
        assert seeded["created"] == ["jamjambar", "jamjamkitchen", "admin"]
        assert pos_client.post("/api/auth/seed").json()["created"] == []

        bar = pos_client.post(
            "/api/auth/login", json={"username": "JamJamBar", "password": "bar@123", "role": "bar"}
        )
        assert bar.status_code == 200
        assert "password" not in bar.json()["user"]

        wrong_role = pos_client.post(
            "/api/auth/login",
            json={"username": "jamjamkitchen", "password": "kitchen@123", "role": "bar"},
        )
        assert wrong_role.status_code == 401

        admin = pos_client.post(
            "/api/auth/login",
            json={"username": "admin", "password": "admin@123", "role": "kitchen"},
        )
        assert admin.status_code == 200

        padded = pos_client.post(
            "/api/auth/login", json={"username": " Admin ", "password": "admin@123"}
        )
        assert padded.status_code == 200

    def test_deactivated_user_cannot_log_in(self, pos_client: TestClient) -> None:
        """Test that DELETE deactivates rather than removes."""
        user = pos_client.post(
            "/api/auth/register",
            json={"username": "temp", "password": "pw", "name": "Temp", "role": "bar"},
        ).json()["user"]

        pos_client.delete(f"/api/auth/users/{user['userId']}")
        response = pos_client.post("/api/auth/login", json={"username": "temp", "password": "pw"})

        assert response.status_code == 401
        assert response.json()["error"] == "Account is deactivated"
        users = pos_client.get("/api/auth/users").json()["data"]
        assert users[0]["isActive"] is False


@pytest.mark.component
class TestInventoryFlow:
    """Kitchen inventory lifecycle."""

    def test_create_refill_delete(self, pos_client: TestClient) -> None:
        """Test status derivation, refill and delete."""
        created = pos_client.post(
            "/api/kitchen-inventory",
            json={"name": "Onion", "quantity": 0, "unit": "kg", "minStock": 5},
        ).json()["data"]
        assert created["status"] == "out"

        low = pos_client.get("/api/kitchen-inventory/low-stock").json()
        assert low["count"] == 1

        refilled = pos_client.patch(
            f"/api/kitchen-inventory/{created['inventoryId']}/refill", json={"quantity": 40}
        ).json()["data"]
        assert refilled["status"] == "available"
        assert refilled["quantity"] == 40
        assert refilled["lastRefilled"] is not None

        item_path = f"/api/kitchen-inventory/{created['inventoryId']}"
        assert pos_client.delete(item_path).status_code == 200
        assert pos_client.get(item_path).status_code == 404
