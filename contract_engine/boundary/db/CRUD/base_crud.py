"""
Base CRUD operations for DynamoDB tables.

Provides generic Create, Read, Update, Delete operations that can be
inherited and extended by model-specific CRUD classes.

Dependencies: boto3 (via DynamoTable)
System role: Foundation for all DynamoDB CRUD operations
"""

from typing import Any, Iterable

from boto3.dynamodb.conditions import Attr, ConditionBase

from contract_engine.boundary.aws.dynamodb import DynamoTable
from contract_engine.boundary.db.base import stamp_new, utc_now_iso


class BaseCRUD:
    """
    Generic base class for CRUD operations.

    Items are plain dicts keyed by camelCase attribute names. Subclasses
    add model-specific queries.

    Attributes:
        model_name: Model name the table stores, e.g. "Provider"
        table: Table wrapper
    """

    model_name: str = ""

    def __init__(self, table: DynamoTable) -> None:
        """
        Initialize CRUD with target table.

        Args:
            table: DynamoTable for this model
        """
        self.table = table

    def create(self, **fields: Any) -> dict[str, Any]:
        """
        Create a new item.

        Args:
            **fields: Item attributes (id and timestamps are filled in)

        Returns:
            dict: Created item
        """
        item = stamp_new({k: v for k, v in fields.items() if v is not None})
        return self.table.put_item(item)

    def create_many(self, items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        """Create many items through the batch writer."""
        stamped = [stamp_new({k: v for k, v in item.items() if v is not None}) for item in items]
        self.table.batch_put(stamped)
        return stamped

    def get_by_id(self, id: str) -> dict[str, Any] | None:
        """Retrieve a single item by id."""
        return self.table.get_item(id)

    def get_all(self, filter_expression: ConditionBase | None = None) -> list[dict[str, Any]]:
        """Retrieve all items, optionally filtered."""
        return self.table.scan_all(filter_expression)

    def get_where(self, **equals: Any) -> list[dict[str, Any]]:
        """Retrieve all items whose attributes equal the given values."""
        condition: ConditionBase | None = None
        for name, value in equals.items():
            clause = Attr(name).eq(value)
            condition = clause if condition is None else condition & clause
        return self.table.scan_all(condition)

    def update_by_id(self, id: str, **fields: Any) -> dict[str, Any] | None:
        """
        Update an item by id, refreshing updatedAt.

        Args:
            id: Item id
            **fields: Attributes to set (None removes)

        Returns:
            dict | None: Updated item, None if not found
        """
        fields.pop("id", None)
        fields.pop("createdAt", None)
        fields["updatedAt"] = utc_now_iso()
        return self.table.update_item(id, **fields)

    def delete_by_id(self, id: str) -> bool:
        """Delete an item by id. Returns True if it existed."""
        return self.table.delete_item(id)

    def delete_many(self, ids: Iterable[str]) -> int:
        """Delete many items by id."""
        return self.table.batch_delete(ids)

    def exists(self, id: str) -> bool:
        return self.table.exists(id)

    def count(self, filter_expression: ConditionBase | None = None) -> int:
        return self.table.count(filter_expression)
