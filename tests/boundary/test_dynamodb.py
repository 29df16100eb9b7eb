"""
Test suite for the DynamoDB table wrapper, BaseCRUD and the table registry.

Uses a mocked boto3 resource; no AWS calls are made.

System role: Verification of the persistence primitives
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from contract_engine.boundary.aws.dynamodb import DynamoTable, from_dynamo, to_dynamo
from contract_engine.boundary.db.CRUD import BaseCRUD, ProviderCRUD
from contract_engine.boundary.db.base import stamp_new, utc_now_iso
from contract_engine.boundary.db.registry import TableRegistry
from contract_engine.configs.dynamodb import DynamoDBSettings
from contract_engine.core.exceptions import AwsServiceError


@pytest.fixture
def boto_table() -> MagicMock:
    return MagicMock()


@pytest.fixture
def table(boto_table: MagicMock) -> DynamoTable:
    resource = MagicMock()
    resource.Table.return_value = boto_table
    return DynamoTable("Provider-api-dev", resource=resource)


class TestConversion:
    def test_to_dynamo_converts_floats(self) -> None:
        assert to_dynamo({"fte": 0.8, "flags": [1.5, True], "name": "x"}) == {
            "fte": Decimal("0.8"),
            "flags": [Decimal("1.5"), True],
            "name": "x",
        }

    def test_from_dynamo(self) -> None:
        assert from_dynamo({"a": Decimal("5"), "b": Decimal("0.25"), "c": [Decimal("1")]}) == {
            "a": 5,
            "b": 0.25,
            "c": [1],
        }


class TestDynamoTable:
    """Test item operations against a mocked Table."""

    def test_put_item_converts(self, table: DynamoTable, boto_table: MagicMock) -> None:
        table.put_item({"id": "1", "totalFTE": 1.0})
        assert boto_table.put_item.call_args.kwargs["Item"] == {"id": "1", "totalFTE": Decimal("1.0")}

    def test_get_item_missing(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.get_item.return_value = {}
        assert table.get_item("nope") is None

    def test_scan_follows_pagination(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.scan.side_effect = [
            {"Items": [{"id": "1"}], "LastEvaluatedKey": {"id": "1"}},
            {"Items": [{"id": "2"}]},
        ]

        assert [item["id"] for item in table.scan_all()] == ["1", "2"]
        assert boto_table.scan.call_args_list[1].kwargs["ExclusiveStartKey"] == {"id": "1"}

    def test_scan_projection(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.scan.return_value = {"Items": []}

        table.scan_all(projection=["id", "name"])

        kwargs = boto_table.scan.call_args.kwargs
        assert kwargs["ProjectionExpression"] == "#p0, #p1"
        assert kwargs["ExpressionAttributeNames"] == {"#p0": "id", "#p1": "name"}

    def test_update_builds_set_and_remove(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.update_item.return_value = {"Attributes": {"id": "1", "name": "B"}}

        result = table.update_item("1", name="B", notes=None)

        kwargs = boto_table.update_item.call_args.kwargs
        assert kwargs["UpdateExpression"] == "SET #f0 = :v0 REMOVE #f1"
        assert kwargs["ConditionExpression"] == "attribute_exists(#id)"
        assert kwargs["ExpressionAttributeValues"] == {":v0": "B"}
        assert result == {"id": "1", "name": "B"}

    def test_update_missing_item(self, table: DynamoTable, boto_table: MagicMock, client_error) -> None:
        boto_table.update_item.side_effect = client_error("ConditionalCheckFailedException", "UpdateItem")
        assert table.update_item("missing", name="B") is None

    def test_delete_item(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.delete_item.return_value = {"Attributes": {"id": "1"}}
        assert table.delete_item("1") is True

        boto_table.delete_item.return_value = {}
        assert table.delete_item("1") is False

    def test_count(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.scan.side_effect = [{"Count": 3, "LastEvaluatedKey": {"id": "x"}}, {"Count": 2}]
        assert table.count() == 5

    def test_remove_attributes(self, table: DynamoTable, boto_table: MagicMock) -> None:
        table.remove_attributes("1", ["dynamicFields"])

        kwargs = boto_table.update_item.call_args.kwargs
        assert kwargs["UpdateExpression"] == "REMOVE #a0"
        assert kwargs["ExpressionAttributeNames"] == {"#a0": "dynamicFields"}

    def test_missing_table_translated(self, table: DynamoTable, boto_table: MagicMock, client_error) -> None:
        boto_table.get_item.side_effect = client_error("ResourceNotFoundException", "GetItem")

        with pytest.raises(AwsServiceError) as exc_info:
            table.get_item("1")

        assert exc_info.value.service == "dynamodb"
        assert exc_info.value.code == "ResourceNotFoundException"


class TestBaseCRUD:
    def test_create_stamps_and_drops_none(self, table: DynamoTable, boto_table: MagicMock) -> None:
        item = BaseCRUD(table).create(name="Jane", notes=None)

        assert item["name"] == "Jane"
        assert "notes" not in item
        assert item["id"]
        assert item["createdAt"].endswith("Z")
        boto_table.put_item.assert_called_once()

    def test_update_refreshes_updated_at(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.update_item.return_value = {"Attributes": {"id": "1"}}

        BaseCRUD(table).update_by_id("1", createdAt="x", name="B")

        names = boto_table.update_item.call_args.kwargs["ExpressionAttributeNames"]
        assert set(names.values()) == {"name", "updatedAt", "id"}

    def test_get_where_builds_condition(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.scan.return_value = {"Items": [{"id": "1"}]}

        assert ProviderCRUD(table).get_where(compensationYear="2025") == [{"id": "1"}]
        assert "FilterExpression" in boto_table.scan.call_args.kwargs

    def test_provider_get_ids(self, table: DynamoTable, boto_table: MagicMock) -> None:
        boto_table.scan.return_value = {"Items": [{"id": "a"}, {"id": "b"}]}
        assert ProviderCRUD(table).get_ids("2025") == ["a", "b"]


def test_stamp_new_keeps_existing_id() -> None:
    item = stamp_new({"id": "keep", "createdAt": "2020-01-01T00:00:00.000Z"})

    assert item["id"] == "keep"
    assert item["createdAt"] == "2020-01-01T00:00:00.000Z"
    assert item["updatedAt"] != item["createdAt"]


def test_utc_now_iso_format() -> None:
    stamp = utc_now_iso()
    assert stamp.endswith("Z")
    assert len(stamp) == len("2025-01-31T12:00:00.123Z")


class TestTableRegistry:
    def test_table_names(self) -> None:
        resource = MagicMock()
        settings = DynamoDBSettings(api_id="abc", env="prod", table_overrides={"AuditLog": "audit"})

        registry = TableRegistry(settings, resource=resource)

        assert registry.providers.table.table_name == "Provider-abc-prod"
        assert registry.generation_logs.table.table_name == "ContractGenerationLog-abc-prod"
        assert registry.audit_logs.table.table_name == "audit"

    def test_by_model(self) -> None:
        registry = TableRegistry(DynamoDBSettings(), resource=MagicMock())

        assert registry.by_model("Clause") is registry.clauses
        with pytest.raises(ValueError):
            registry.by_model("Course")
