"""
Test suite for the provider schema.

Tests header normalization, header mapping, value parsing/formatting and
header validation.

System role: Verification of CSV header mapping rules
"""

import pytest

from contract_engine.core.provider_schema import (
    REQUIRED_FIELDS,
    format_field_value,
    get_expected_csv_headers,
    get_field_config,
    is_schema_field,
    map_csv_header,
    normalize_field_name,
    parse_field_value,
    validate_csv_headers,
)


class TestHeaderMapping:
    """Test header normalization and lookup."""

    @pytest.mark.parametrize("header", ["Employee ID", "employee_id", "EmployeeId", " EMP ID "])
    def test_employee_id_variants(self, header: str) -> None:
        """Test all employee id spellings map to the same key."""
        assert map_csv_header(header) == "employeeId"

    def test_normalize_drops_punctuation(self) -> None:
        assert normalize_field_name("Medical Director FTE (%)") == "medicaldirectorfte"

    def test_unknown_header_is_dynamic(self) -> None:
        assert map_csv_header("Favorite Color") is None
        assert not is_schema_field("Favorite Color")

    def test_label_maps_to_key(self) -> None:
        assert map_csv_header("BaseSalary") == "baseSalary"
        assert map_csv_header("Base Salary") == "baseSalary"

    def test_required_fields(self) -> None:
        assert set(REQUIRED_FIELDS) == {
            "compensationYear",
            "employeeId",
            "name",
            "providerType",
            "specialty",
        }

    def test_expected_headers_start_with_year(self) -> None:
        headers = get_expected_csv_headers()
        assert headers[0] == "Compensation Year"
        assert "TotalFTE" in headers


class TestParseFieldValue:
    """Test typed parsing of raw CSV cells."""

    def test_currency_becomes_int(self) -> None:
        assert parse_field_value("baseSalary", "$250,000") == 250000

    def test_decimal_number(self) -> None:
        assert parse_field_value("totalFTE", "0.8") == 0.8

    def test_unparseable_number_is_none(self) -> None:
        assert parse_field_value("baseSalary", "abc") is None

    def test_us_date_becomes_iso(self) -> None:
        assert parse_field_value("startDate", "07/01/2025") == "2025-07-01"

    def test_unknown_date_format_passes_through(self) -> None:
        assert parse_field_value("startDate", "sometime") == "sometime"

    def test_string_is_trimmed(self) -> None:
        assert parse_field_value("name", "  Jane Smith ") == "Jane Smith"

    def test_blank_is_none(self) -> None:
        assert parse_field_value("name", "   ") is None
        assert parse_field_value("name", None) is None

    def test_unknown_key_passes_through(self) -> None:
        assert parse_field_value("Favorite Color", " Blue ") == " Blue "


class TestFormatFieldValue:
    def test_currency(self) -> None:
        assert format_field_value("baseSalary", 250000) == "$250,000.00"

    def test_percentage(self) -> None:
        assert format_field_value("clinicalFTE", 0.8) == "80.0%"

    def test_empty(self) -> None:
        assert format_field_value("baseSalary", None) == ""

    def test_no_format(self) -> None:
        assert format_field_value("specialty", "Cardiology") == "Cardiology"

    def test_non_numeric_currency(self) -> None:
        assert format_field_value("baseSalary", "TBD") == "TBD"


class TestValidateCsvHeaders:
    """Test required/extra header detection."""

    def test_valid_headers_with_extra(self) -> None:
        result = validate_csv_headers([
            "Compensation Year",
            "Employee ID",
            "Provider Name",
            "Provider Type",
            "Specialty",
            "Favorite Color",
        ])

        assert result["valid"] is True
        assert result["missing"] == []
        assert result["extra"] == ["Favorite Color"]
        assert result["mapped"]["Employee ID"] == "employeeId"

    def test_missing_required_reports_label(self) -> None:
        result = validate_csv_headers(["Compensation Year", "Employee ID", "Provider Name", "Provider Type"])

        assert result["valid"] is False
        assert result["missing"] == [get_field_config("specialty").label]
