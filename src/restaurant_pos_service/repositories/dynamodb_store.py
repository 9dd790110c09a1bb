"""Generic DynamoDB gateway used by the entity repositories.

Unlike a plain boto3 table, every operation here raises a typed
``PosServiceError`` so callers never have to inspect botocore error codes.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from boto3.dynamodb.conditions import Attr, ConditionBase
from botocore.exceptions import BotoCoreError, ClientError

from restaurant_pos_service.errors import DuplicateKeyError, NotFoundError, StoreError

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
RESOURCE_NOT_FOUND = "ResourceNotFoundException"


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class DynamoDBStore:
    """Named-table put/get/scan/update/delete against DynamoDB."""

    def __init__(self, dynamodb_resource: "DynamoDBServiceResource") -> None:
        """Initialize the gateway.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
        """
        self.dynamodb = dynamodb_resource
        self._tables: dict[str, "Table"] = {}

    def table(self, table_name: str) -> "Table":
        """Return a cached Table handle for a table name."""
        if table_name not in self._tables:
            self._tables[table_name] = self.dynamodb.Table(table_name)
        return self._tables[table_name]

    def put(self, table_name: str, item: dict[str, Any], unique_key: str | None = None) -> None:
        """Write an item, optionally refusing to overwrite an existing key.

        Args:
            table_name: Target table
            item: Item to write
            unique_key: Key attribute that must not already exist

        Raises:
            DuplicateKeyError: If ``unique_key`` is given and the item exists
            StoreError: On any other DynamoDB failure
        """
        params: dict[str, Any] = {"Item": item}
        if unique_key is not None:
            params["ConditionExpression"] = Attr(unique_key).not_exists()

        try:
            self.table(table_name).put_item(**params)
        except ClientError as e:
            if unique_key is not None and _error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise DuplicateKeyError(
                    f"Item with {unique_key} '{item.get(unique_key)}' already exists"
                ) from e
            logger.error(f"Failed to put item into {table_name}: {e}")
            raise StoreError(str(e)) from e
        except BotoCoreError as e:
            logger.error(f"Failed to put item into {table_name}: {e}")
            raise StoreError(str(e)) from e

    def get(self, table_name: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Fetch an item by primary key.

        Returns:
            The item if found, None otherwise
        """
        try:
            response = self.table(table_name).get_item(Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get item from {table_name}: {e}")
            raise StoreError(str(e)) from e

        item: dict[str, Any] | None = response.get("Item")
        return item

    def scan(
        self,
        table_name: str,
        filter_expression: ConditionBase | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Scan a table, following pagination.

        Args:
            table_name: Table to scan
            filter_expression: Optional boto3 condition applied server side
            limit: Stop after this many matching items

        Returns:
            list: Matching items in store order
        """
        params: dict[str, Any] = {}
        if filter_expression is not None:
            params["FilterExpression"] = filter_expression

        items: list[dict[str, Any]] = []
        try:
            while True:
                response = self.table(table_name).scan(**params)
                items.extend(response.get("Items", []))

                if limit is not None and len(items) >= limit:
                    return items[:limit]

                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    return items
                params["ExclusiveStartKey"] = last_key
        except ClientError as e:
            if _error_code(e) == RESOURCE_NOT_FOUND:
                logger.warning(f"Table {table_name} does not exist, treating as empty")
                return []
            logger.error(f"Failed to scan {table_name}: {e}")
            raise StoreError(str(e)) from e
        except BotoCoreError as e:
            logger.error(f"Failed to scan {table_name}: {e}")
            raise StoreError(str(e)) from e

    def update(
        self,
        table_name: str,
        key: dict[str, Any],
        values: Mapping[str, Any] | None = None,
        increments: Mapping[str, int] | None = None,
    ) -> dict[str, Any]:
        """Update attributes of an existing item.

        ``values`` are assigned; ``increments`` are added to the stored number
        in the same request, so concurrent increments do not lose updates.

        Args:
            table_name: Target table
            key: Primary key of the item
            values: Attribute names mapped to new values
            increments: Attribute names mapped to signed deltas

        Returns:
            dict: The item after the update

        Raises:
            NotFoundError: If no item exists for ``key``
            StoreError: On any other DynamoDB failure
        """
        assignments: list[str] = []
        names: dict[str, str] = {}
        expression_values: dict[str, Any] = {}

        for index, (attribute, value) in enumerate((values or {}).items()):
            names[f"#v{index}"] = attribute
            expression_values[f":v{index}"] = value
            assignments.append(f"#v{index} = :v{index}")

        for index, (attribute, delta) in enumerate((increments or {}).items()):
            names[f"#i{index}"] = attribute
            expression_values[f":i{index}"] = delta
            assignments.append(f"#i{index} = #i{index} + :i{index}")

        if not assignments:
            raise ValueError("update requires at least one value or increment")

        key_attribute = next(iter(key))
        try:
            response = self.table(table_name).update_item(
                Key=key,
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression=Attr(key_attribute).exists(),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=expression_values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if _error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise NotFoundError(f"{key_attribute} '{key[key_attribute]}' not found") from e
            logger.error(f"Failed to update item in {table_name}: {e}")
            raise StoreError(str(e)) from e
        except BotoCoreError as e:
            logger.error(f"Failed to update item in {table_name}: {e}")
            raise StoreError(str(e)) from e

        attributes: dict[str, Any] = response.get("Attributes", {})
        return attributes

    def delete(self, table_name: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Delete an item by primary key.

        Returns:
            The deleted item, or None if nothing was stored under ``key``
        """
        try:
            response = self.table(table_name).delete_item(Key=key, ReturnValues="ALL_OLD")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete item from {table_name}: {e}")
            raise StoreError(str(e)) from e

        attributes: dict[str, Any] | None = response.get("Attributes")
        return attributes
