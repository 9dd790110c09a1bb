"""In-memory stand-in for the boto3 DynamoDB resource used by component tests.

Supports the subset of the Table API the store uses: conditional put, get,
filtered scan, SET/increment updates and delete. Values pass through boto3's
TypeSerializer first, so types DynamoDB rejects fail here too. Filter and condition
expressions are evaluated from the boto3 condition objects directly.
"""

import copy
from typing import Any

import pytest
from boto3.dynamodb.conditions import (
    And,
    AttributeExists,
    AttributeNotExists,
    ConditionBase,
    Equals,
    GreaterThanEquals,
    In,
    LessThan,
    NotEquals,
)
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from restaurant_pos_service.bootstrap import build_services
from restaurant_pos_service.config import Settings
from restaurant_pos_service.handlers.api_handler import create_app

TABLE_KEYS = {
    "jumjum-menu-items": "itemId",
    "jumjum-bar-billing": "billId",
    "jamjam-users": "userId",
    "jumjum-kitchen-inventory": "inventoryId",
}

SERIALIZER = TypeSerializer()


def _matches(condition: ConditionBase, item: dict[str, Any]) -> bool:
    values = condition.get_expression()["values"]
    if isinstance(condition, And):
        return all(_matches(part, item) for part in values)
    if isinstance(condition, AttributeExists):
        return values[0].name in item
    if isinstance(condition, AttributeNotExists):
        return values[0].name not in item

    actual = item.get(values[0].name)
    if isinstance(condition, Equals):
        return bool(actual == values[1])
    if isinstance(condition, NotEquals):
        return bool(actual != values[1])
    if isinstance(condition, In):
        return actual in values[1]
    if isinstance(condition, GreaterThanEquals):
        return actual is not None and actual >= values[1]
    if isinstance(condition, LessThan):
        return actual is not None and actual < values[1]
    raise NotImplementedError(type(condition).__name__)


def _conditional_check_failed(operation: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "ConditionalCheckFailedException", "Message": "failed"}}, operation
    )


class InMemoryTable:
    """Single-key DynamoDB table kept in a dict."""

    def __init__(self, key_name: str) -> None:
        self.key_name = key_name
        self.items: dict[str, dict[str, Any]] = {}

    def put_item(self, Item: dict[str, Any], ConditionExpression: Any = None) -> dict:  # noqa: N803
        SERIALIZER.serialize(Item)
        existing = self.items.get(Item[self.key_name], {})
        if ConditionExpression is not None and not _matches(ConditionExpression, existing):
            raise _conditional_check_failed("PutItem")
        self.items[Item[self.key_name]] = copy.deepcopy(Item)
        return {}

    def get_item(self, Key: dict[str, Any]) -> dict:  # noqa: N803
        item = self.items.get(Key[self.key_name])
        return {"Item": copy.deepcopy(item)} if item is not None else {}

    def scan(self, FilterExpression: Any = None, **kwargs: Any) -> dict:  # noqa: N803
        items = [
            copy.deepcopy(item)
            for item in self.items.values()
            if FilterExpression is None or _matches(FilterExpression, item)
        ]
        return {"Items": items}

    def update_item(
        self,
        Key: dict[str, Any],  # noqa: N803
        UpdateExpression: str,  # noqa: N803
        ExpressionAttributeNames: dict[str, str],  # noqa: N803
        ExpressionAttributeValues: dict[str, Any],  # noqa: N803
        ConditionExpression: Any = None,  # noqa: N803
        ReturnValues: str = "NONE",  # noqa: N803
    ) -> dict:
        for value in ExpressionAttributeValues.values():
            SERIALIZER.serialize(value)
        existing = self.items.get(Key[self.key_name])
        if ConditionExpression is not None and not _matches(ConditionExpression, existing or {}):
            raise _conditional_check_failed("UpdateItem")

        item = existing if existing is not None else dict(Key)
        for assignment in UpdateExpression.removeprefix("SET ").split(", "):
            target, expression = (part.strip() for part in assignment.split("="))
            name = ExpressionAttributeNames[target]
            if "+" in expression:
                placeholder = expression.split("+")[1].strip()
                item[name] = item.get(name, 0) + ExpressionAttributeValues[placeholder]
            else:
                item[name] = copy.deepcopy(ExpressionAttributeValues[expression])

        self.items[Key[self.key_name]] = item
        return {"Attributes": copy.deepcopy(item)}

    def delete_item(self, Key: dict[str, Any], ReturnValues: str = "NONE") -> dict:  # noqa: N803
        item = self.items.pop(Key[self.key_name], None)
        return {"Attributes": item} if item is not None else {}


class InMemoryDynamoDB:
    """Resource exposing ``Table(name)`` like ``boto3.resource("dynamodb")``."""

    def __init__(self) -> None:
        self.tables = {name: InMemoryTable(key) for name, key in TABLE_KEYS.items()}

    def Table(self, name: str) -> InMemoryTable:  # noqa: N802
        return self.tables[name]


@pytest.fixture
def dynamodb() -> InMemoryDynamoDB:
    """Fresh in-memory DynamoDB for each test."""
    return InMemoryDynamoDB()


@pytest.fixture
def pos_client(dynamodb: InMemoryDynamoDB) -> TestClient:
    """Test client over the real services and repositories."""
    services = build_services(Settings(environment="test"), dynamodb)
    app = create_app(
        catalog_service=services.catalog_service,
        billing_service=services.billing_service,
        inventory_service=services.inventory_service,
        identity_service=services.identity_service,
    )
    return TestClient(app)
