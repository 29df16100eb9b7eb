"""
Provider schema configuration.

Defines the expected CSV columns and their mapping to provider record fields.
Unknown columns are not errors: they are kept as dynamic fields.

Dependencies: None (pure domain layer)
System role: CSV header mapping and value parsing for provider uploads
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Literal

FieldType = Literal["string", "number", "boolean", "date"]
FieldFormat = Literal["currency", "percentage", "date", "phone", "email"]

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_TRUE_VALUES = {"true", "1", "yes", "y"}
_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%m-%d-%Y", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y")


@dataclass(frozen=True)
class ProviderSchemaField:
    """One known provider column."""

    key: str
    label: str
    type: FieldType
    required: bool
    variants: tuple[str, ...] = field(default_factory=tuple)
    format: FieldFormat | None = None


PROVIDER_SCHEMA: tuple[ProviderSchemaField, ...] = (
    # Core identity
    ProviderSchemaField("compensationYear", "Compensation Year", "string", True, ("compensation year", "compensationyear", "year")),
    ProviderSchemaField("employeeId", "Employee ID", "string", True, ("employee id", "employeeid", "emp id")),
    ProviderSchemaField("name", "Provider Name", "string", True, ("provider name", "providername", "name")),
    ProviderSchemaField("providerType", "Provider Type", "string", True, ("provider type", "providertype", "type")),
    # Clinical classification
    ProviderSchemaField("specialty", "Specialty", "string", True, ("specialty",)),
    ProviderSchemaField("subspecialty", "Subspecialty", "string", False, ("subspecialty", "sub specialty")),
    ProviderSchemaField("positionTitle", "Position Title", "string", False, ("position title", "positiontitle", "title")),
    ProviderSchemaField("yearsExperience", "Years of Experience", "number", False, ("years of experience", "yearsofexperience", "years experience", "experience")),
    # Compensation
    ProviderSchemaField("hourlyWage", "Hourly Wage", "number", False, ("hourly wage", "hourlywage"), "currency"),
    ProviderSchemaField("baseSalary", "BaseSalary", "number", False, ("basesalary", "base salary", "salary"), "currency"),
    # Contract details
    ProviderSchemaField("originalAgreementDate", "OriginalAgreementDate", "date", False, ("original agreement date", "originalagreementdate", "agreement date")),
    ProviderSchemaField("organizationName", "OrganizationName", "string", False, ("organization name", "organizationname", "organization")),
    ProviderSchemaField("startDate", "StartDate", "date", False, ("start date", "startdate")),
    ProviderSchemaField("contractTerm", "ContractTerm", "string", False, ("contract term", "contractterm", "term")),
    # Benefits
    ProviderSchemaField("ptoDays", "PTODays", "number", False, ("pto days", "ptodays", "pto")),
    ProviderSchemaField("holidayDays", "HolidayDays", "number", False, ("holiday days", "holidaydays", "holidays")),
    ProviderSchemaField("cmeDays", "CMEDays", "number", False, ("cme days", "cmedays", "cme")),
    ProviderSchemaField("cmeAmount", "CMEAmount", "number", False, ("cme amount", "cmeamount"), "currency"),
    # Bonuses
    ProviderSchemaField("signingBonus", "SigningBonus", "number", False, ("signing bonus", "signingbonus"), "currency"),
    ProviderSchemaField("relocationBonus", "RelocationBonus", "number", False, ("relocation bonus", "relocationbonus"), "currency"),
    ProviderSchemaField("qualityBonus", "QualityBonus", "number", False, ("quality bonus", "qualitybonus"), "currency"),
    # Productivity
    ProviderSchemaField("compensationType", "Compensation Type", "string", False, ("compensation type", "compensationtype", "comp type")),
    ProviderSchemaField("conversionFactor", "ConversionFactor", "number", False, ("conversion factor", "conversionfactor")),
    ProviderSchemaField("wRVUTarget", "wRVUTarget", "number", False, ("wrvu target", "wrvutarget", "wrvu")),
    # Credentials
    ProviderSchemaField("credentials", "Credentials", "string", False, ("credentials",)),
    # FTE breakdown
    ProviderSchemaField("clinicalFTE", "ClinicalFTE", "number", False, ("clinical fte", "clinicalfte"), "percentage"),
    ProviderSchemaField("medicalDirectorFTE", "MedicalDirectorFTE", "number", False, ("medical director fte", "medicaldirectorfte"), "percentage"),
    ProviderSchemaField("divisionChiefFTE", "DivisionChiefFTE", "number", False, ("division chief fte", "divisionchieffte"), "percentage"),
    ProviderSchemaField("researchFTE", "ResearchFTE", "number", False, ("research fte", "researchfte"), "percentage"),
    ProviderSchemaField("teachingFTE", "TeachingFTE", "number", False, ("teaching fte", "teachingfte"), "percentage"),
    ProviderSchemaField("totalFTE", "TotalFTE", "number", False, ("total fte", "totalfte", "fte"), "percentage"),
)

# Managed by the storage layer, never read from CSV
SYSTEM_FIELDS: tuple[str, ...] = ("id", "createdAt", "updatedAt", "owner", "__typename")

REQUIRED_FIELDS: tuple[str, ...] = tuple(f.key for f in PROVIDER_SCHEMA if f.required)

SCHEMA_KEYS: frozenset[str] = frozenset(f.key for f in PROVIDER_SCHEMA)


def normalize_field_name(name: str) -> str:
    """
    Normalize a header or key for comparison.

    Lowercases and drops every character outside [a-z0-9], so
    "Employee ID", "employee_id" and "EmployeeId" all become "employeeid".

    Args:
        name: Raw header or key

    Returns:
        str: Normalized name
    """
    return _NON_ALNUM.sub("", name.lower()).strip()


@lru_cache(maxsize=1)
def create_field_lookup() -> dict[str, str]:
    """
    Build the normalized header lookup.

    Every schema key, label and variant maps to the schema key.

    Returns:
        dict[str, str]: Normalized name -> schema key
    """
    lookup: dict[str, str] = {}
    for schema_field in PROVIDER_SCHEMA:
        lookup[normalize_field_name(schema_field.key)] = schema_field.key
        lookup[normalize_field_name(schema_field.label)] = schema_field.key
        for variant in schema_field.variants:
            lookup[normalize_field_name(variant)] = schema_field.key
    return lookup


def get_field_config(key: str) -> ProviderSchemaField | None:
    """Get field configuration by schema key."""
    return next((f for f in PROVIDER_SCHEMA if f.key == key), None)


def is_schema_field(field_name: str) -> bool:
    """Check whether a header or key maps to a known schema field."""
    return normalize_field_name(field_name) in create_field_lookup()


def map_csv_header(csv_header: str) -> str | None:
    """
    Map a CSV header to its schema key.

    Args:
        csv_header: Header as it appears in the file

    Returns:
        str | None: Schema key, or None for dynamic columns
    """
    return create_field_lookup().get(normalize_field_name(csv_header))


def _parse_date(value: str) -> str:
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value).date().isoformat()
    except ValueError:
        return value


def _parse_number(value: str) -> float | int | None:
    cleaned = value.replace(",", "").replace("$", "").replace("%", "").strip()
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if number.is_integer() and "." not in cleaned:
        return int(number)
    return number


def parse_field_value(field_key: str, value: str | None) -> Any:
    """
    Parse a raw CSV cell according to the schema.

    Args:
        field_key: Schema key (unknown keys pass through unchanged)
        value: Raw cell text

    Returns:
        Any: Typed value, or None for blank/unparseable numbers
    """
    if value is None or str(value).strip() == "":
        return None

    config = get_field_config(field_key)
    if config is None:
        return value

    text = str(value).strip()
    if config.type == "number":
        return _parse_number(text)
    if config.type == "boolean":
        return text.lower() in _TRUE_VALUES
    if config.type == "date":
        return _parse_date(text)
    return text


def format_field_value(field_key: str, value: Any) -> str:
    """
    Format a stored value for display.

    Args:
        field_key: Schema key
        value: Stored value

    Returns:
        str: Display string ("" for empty values)
    """
    if value is None or value == "":
        return ""

    config = get_field_config(field_key)
    if config is None or config.format is None:
        return str(value)

    if config.format == "currency":
        try:
            return f"${float(value):,.2f}"
        except (TypeError, ValueError):
            return str(value)
    if config.format == "percentage":
        try:
            return f"{float(value) * 100:.1f}%"
        except (TypeError, ValueError):
            return str(value)
    if config.format == "date":
        parsed = value if isinstance(value, date) else _parse_date(str(value))
        if isinstance(parsed, date):
            return parsed.strftime("%m/%d/%Y")
        try:
            return datetime.strptime(parsed, "%Y-%m-%d").strftime("%m/%d/%Y")
        except ValueError:
            return str(value)
    return str(value)


def get_expected_csv_headers() -> list[str]:
    """Get the CSV headers a complete upload is expected to have."""
    return [f.label for f in PROVIDER_SCHEMA]


def validate_csv_headers(headers: list[str]) -> dict[str, Any]:
    """
    Validate CSV headers against the schema.

    Args:
        headers: Header row of the upload

    Returns:
        dict: valid (bool), missing (labels), extra (headers), mapped (header -> key)
    """
    lookup = create_field_lookup()
    mapped: dict[str, str] = {}
    for header in headers:
        schema_key = lookup.get(normalize_field_name(header))
        if schema_key:
            mapped[header] = schema_key

    mapped_keys = set(mapped.values())
    missing = [key for key in REQUIRED_FIELDS if key not in mapped_keys]
    extra = [header for header in headers if header not in mapped]

    return {
        "valid": not missing,
        "missing": [get_field_config(key).label for key in missing],
        "extra": extra,
        "mapped": mapped,
    }
