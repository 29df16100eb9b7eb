"""
DynamoDB table wrapper.

Generic item operations over a boto3 resource Table keyed by "id".
Converts float <-> Decimal so callers work with plain Python numbers.

Dependencies: boto3
System role: Persistence primitive behind every repository
"""

import logging
from decimal import Decimal
from typing import Any, Iterable

from boto3.dynamodb.conditions import ConditionBase
from botocore.exceptions import ClientError

from contract_engine.boundary.aws.client_errors import translate_client_errors
from contract_engine.boundary.aws.session import get_boto3_session

logger = logging.getLogger(__name__)


def to_dynamo(value: Any) -> Any:
    """Convert floats (recursively) to Decimal for DynamoDB."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Convert Decimals (recursively) back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    if isinstance(value, set):
        return {from_dynamo(v) for v in value}
    return value


class DynamoTable:
    """Item-level operations on one DynamoDB table with an "id" hash key."""

    def __init__(self, table_name: str, region: str | None = None, resource: Any = None) -> None:
        """
        Initialize table wrapper.

        Args:
            table_name: Physical table name
            region: AWS region
            resource: Pre-built boto3 DynamoDB resource (tests inject a mock here)
        """
        self.table_name = table_name
        self._resource = resource or get_boto3_session().resource("dynamodb", region_name=region)
        self._table = self._resource.Table(table_name)

    @translate_client_errors("dynamodb")
    def put_item(self, item: dict[str, Any]) -> dict[str, Any]:
        """Write a full item, replacing any existing item with the same id."""
        self._table.put_item(Item=to_dynamo(item))
        return item

    @translate_client_errors("dynamodb")
    def get_item(self, item_id: str) -> dict[str, Any] | None:
        """Get an item by id, or None."""
        response = self._table.get_item(Key={"id": item_id})
        item = response.get("Item")
        return from_dynamo(item) if item else None

    @translate_client_errors("dynamodb")
    def scan_all(
        self,
        filter_expression: ConditionBase | None = None,
        projection: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Scan the whole table, following LastEvaluatedKey.

        Args:
            filter_expression: Optional boto3 condition (Attr(...).eq(...))
            projection: Optional attribute names to return

        Returns:
            list[dict]: All matching items
        """
        kwargs: dict[str, Any] = {}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression
        if projection:
            kwargs["ProjectionExpression"] = ", ".join(f"#p{i}" for i in range(len(projection)))
            kwargs["ExpressionAttributeNames"] = {f"#p{i}": name for i, name in enumerate(projection)}

        items: list[dict[str, Any]] = []
        while True:
            response = self._table.scan(**kwargs)
            items.extend(from_dynamo(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return items

    @translate_client_errors("dynamodb")
    def update_item(self, item_id: str, **fields: Any) -> dict[str, Any] | None:
        """
        Update attributes of an existing item.

        None values remove the attribute.

        Args:
            item_id: Item id
            **fields: Attributes to set

        Returns:
            dict | None: Updated item, or None if the item does not exist
        """
        if not fields:
            return self.get_item(item_id)

        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        set_parts: list[str] = []
        remove_parts: list[str] = []
        for index, (name, value) in enumerate(fields.items()):
            names[f"#f{index}"] = name
            if value is None:
                remove_parts.append(f"#f{index}")
            else:
                values[f":v{index}"] = to_dynamo(value)
                set_parts.append(f"#f{index} = :v{index}")

        expression = ""
        if set_parts:
            expression += "SET " + ", ".join(set_parts)
        if remove_parts:
            expression += (" " if expression else "") + "REMOVE " + ", ".join(remove_parts)

        kwargs: dict[str, Any] = {
            "Key": {"id": item_id},
            "UpdateExpression": expression,
            "ExpressionAttributeNames": {**names, "#id": "id"},
            "ConditionExpression": "attribute_exists(#id)",
            "ReturnValues": "ALL_NEW",
        }
        if values:
            kwargs["ExpressionAttributeValues"] = values

        try:
            response = self._table.update_item(**kwargs)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                return None
            raise
        return from_dynamo(response.get("Attributes", {}))

    @translate_client_errors("dynamodb")
    def delete_item(self, item_id: str) -> bool:
        """Delete an item by id. Returns False if nothing was deleted."""
        response = self._table.delete_item(Key={"id": item_id}, ReturnValues="ALL_OLD")
        return bool(response.get("Attributes"))

    def exists(self, item_id: str) -> bool:
        """Check an item exists."""
        return self.get_item(item_id) is not None

    @translate_client_errors("dynamodb")
    def batch_delete(self, item_ids: Iterable[str]) -> int:
        """Delete many items through the batch writer. Returns the count sent."""
        count = 0
        with self._table.batch_writer() as batch:
            for item_id in item_ids:
                batch.delete_item(Key={"id": item_id})
                count += 1
        return count

    @translate_client_errors("dynamodb")
    def batch_put(self, items: Iterable[dict[str, Any]]) -> int:
        """Write many items through the batch writer. Returns the count sent."""
        count = 0
        with self._table.batch_writer() as batch:
            for item in items:
                batch.put_item(Item=to_dynamo(item))
                count += 1
        return count

    @translate_client_errors("dynamodb")
    def remove_attributes(self, item_id: str, attribute_names: list[str]) -> None:
        """Remove attributes from an item."""
        if not attribute_names:
            return
        names = {f"#a{i}": name for i, name in enumerate(attribute_names)}
        self._table.update_item(
            Key={"id": item_id},
            UpdateExpression="REMOVE " + ", ".join(names),
            ExpressionAttributeNames=names,
        )

    @translate_client_errors("dynamodb")
    def count(self, filter_expression: ConditionBase | None = None) -> int:
        """Count items with a paginated COUNT scan."""
        kwargs: dict[str, Any] = {"Select": "COUNT"}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression
        total = 0
        while True:
            response = self._table.scan(**kwargs)
            total += response.get("Count", 0)
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return total
            kwargs["ExclusiveStartKey"] = last_key

    @translate_client_errors("dynamodb")
    def describe(self) -> dict[str, Any]:
        """Describe the table (status, item count, key schema)."""
        client = self._resource.meta.client
        return client.describe_table(TableName=self.table_name)["Table"]
