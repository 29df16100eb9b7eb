"""
Test suite for dynamic field helpers.

System role: Verification of the dynamicFields JSON sidecar handling
"""

import pytest

from contract_engine.core.dynamic_fields import (
    extract_dynamic_fields,
    get_all_provider_field_names,
    get_provider_field_value,
    is_valid_field_name,
    parse_dynamic_fields,
    stringify_dynamic_fields,
)


@pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]"])
def test_parse_invalid_returns_empty(raw) -> None:
    assert parse_dynamic_fields(raw) == {}


def test_parse_json_and_mapping() -> None:
    assert parse_dynamic_fields('{"Call Schedule": "1:4"}') == {"Call Schedule": "1:4"}
    assert parse_dynamic_fields({"a": 1}) == {"a": 1}


def test_stringify() -> None:
    assert stringify_dynamic_fields({}) is None
    assert stringify_dynamic_fields(None) is None
    assert stringify_dynamic_fields({"a": 1}) == '{"a": 1}'


class TestGetProviderFieldValue:
    """Test schema-then-dynamic lookup."""

    def test_schema_attribute(self, sample_provider: dict) -> None:
        assert get_provider_field_value(sample_provider, "name") == "Jane Smith"

    def test_dynamic_exact(self, sample_provider: dict) -> None:
        assert get_provider_field_value(sample_provider, "Call Schedule") == "1:4"

    def test_dynamic_case_insensitive(self, sample_provider: dict) -> None:
        assert get_provider_field_value(sample_provider, "call schedule") == "1:4"

    def test_missing(self, sample_provider: dict) -> None:
        assert get_provider_field_value(sample_provider, "Parking Spot") is None

    def test_decoded_dynamic_fields(self) -> None:
        provider = {"name": "A", "dynamicFields": {"Shift": "Night"}}
        assert get_provider_field_value(provider, "Shift") == "Night"


def test_all_field_names_merge_dynamic(sample_provider: dict) -> None:
    names = get_all_provider_field_names(sample_provider)

    assert "dynamicFields" not in names
    assert "name" in names
    assert names[-2:] == ["Retention Bonus", "Call Schedule"]


def test_extract_dynamic_fields() -> None:
    row = {"Provider Name": "Jane", "Favorite Color": "Blue"}
    assert extract_dynamic_fields(row, ["Provider Name"]) == {"Favorite Color": "Blue"}


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Call Schedule", True),
        ("on_call-rate", True),
        ("bad!", False),
        ("", False),
        ("a" * 101, False),
        (5, False),
    ],
)
def test_is_valid_field_name(name, expected) -> None:
    assert is_valid_field_name(name) is expected
