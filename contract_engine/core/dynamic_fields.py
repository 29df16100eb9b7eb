"""
Dynamic field helpers.

Providers carry a `dynamicFields` JSON string holding CSV columns that are
not part of the fixed schema. These helpers read and write that sidecar map.

Dependencies: json (stdlib)
System role: Dynamic field JSON handling for provider records
"""

import json
import logging
import re
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

DynamicFields = dict[str, Any]

_VALID_FIELD_NAME = re.compile(r"^[a-zA-Z0-9_\s-]+$")


def parse_dynamic_fields(dynamic_fields_json: str | Mapping[str, Any] | None) -> DynamicFields:
    """
    Parse dynamic fields from their stored JSON form.

    Args:
        dynamic_fields_json: JSON string (or an already decoded mapping)

    Returns:
        DynamicFields: Parsed map, empty if missing or invalid
    """
    if not dynamic_fields_json:
        return {}
    if isinstance(dynamic_fields_json, Mapping):
        return dict(dynamic_fields_json)

    try:
        parsed = json.loads(dynamic_fields_json)
    except (TypeError, ValueError) as e:
        logger.warning("Failed to parse dynamic fields JSON", extra={"error": str(e)})
        return {}
    return parsed if isinstance(parsed, dict) else {}


def stringify_dynamic_fields(dynamic_fields: Mapping[str, Any] | None) -> str | None:
    """
    Serialize dynamic fields for storage.

    Args:
        dynamic_fields: Dynamic field map

    Returns:
        str | None: JSON string, or None when there is nothing to store
    """
    if not dynamic_fields:
        return None
    return json.dumps(dict(dynamic_fields), default=str)


def get_provider_field_value(provider: Mapping[str, Any], field_name: str) -> Any:
    """
    Read a value from a provider, checking schema attributes then dynamic fields.

    Dynamic fields are matched exactly first, then case-insensitively.

    Args:
        provider: Provider record
        field_name: Attribute or dynamic column name

    Returns:
        Any: The value, or None if not present anywhere
    """
    value = provider.get(field_name)
    if value is not None and field_name != "dynamicFields":
        return value

    dynamic = parse_dynamic_fields(provider.get("dynamicFields"))
    if dynamic.get(field_name) is not None:
        return dynamic[field_name]

    lowered = field_name.lower()
    for key, candidate in dynamic.items():
        if key.lower() == lowered and candidate is not None:
            return candidate
    return None


def get_all_provider_field_names(provider: Mapping[str, Any]) -> list[str]:
    """Get all field names of a provider (schema attributes plus dynamic columns)."""
    schema_fields = [key for key in provider if key != "dynamicFields"]
    dynamic_names = list(parse_dynamic_fields(provider.get("dynamicFields")))
    return schema_fields + [name for name in dynamic_names if name not in schema_fields]


def extract_dynamic_fields(csv_row: Mapping[str, Any], schema_fields: Iterable[str]) -> DynamicFields:
    """
    Extract the columns of a CSV row that are not schema fields.

    Args:
        csv_row: Raw row keyed by header
        schema_fields: Headers to exclude

    Returns:
        DynamicFields: Remaining columns
    """
    excluded = set(schema_fields)
    return {key: value for key, value in csv_row.items() if key not in excluded}


def is_valid_field_name(field_name: Any) -> bool:
    """Check a dynamic field name is 1-100 chars of letters, digits, space, '_' or '-'."""
    return (
        isinstance(field_name, str)
        and 0 < len(field_name) <= 100
        and bool(_VALID_FIELD_NAME.match(field_name))
    )
