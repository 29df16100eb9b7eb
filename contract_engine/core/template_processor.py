"""
Template placeholder processing.

Extracts {{Placeholder}} tokens, validates template definitions and merges
provider data into HTML template content.

Dependencies: pydantic
System role: Text-level template engine for HTML templates
"""

import logging
import re
from datetime import date
from typing import Any, Literal, Mapping, Sequence

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from contract_engine.core.dynamic_fields import get_provider_field_value, parse_dynamic_fields
from contract_engine.core.formatting import format_currency, format_date
from contract_engine.core.fte_breakdown import fte_summary

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"{{([^}]+)}}")

TemplateType = Literal["Schedule A", "Schedule B", "Hybrid", "Hospitalist", "Leadership"]


class TemplateDefinition(BaseModel):
    """Template metadata accepted for validation."""

    name: str = Field(..., min_length=1)
    version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")
    type: TemplateType
    placeholders: list[str] = Field(default_factory=list)
    content: str | None = None


class MergeResult(BaseModel):
    """Merged template content plus warnings for unreplaced placeholders."""

    content: str
    warnings: list[str] = Field(default_factory=list)


def extract_placeholders(content: str) -> list[str]:
    """
    Extract unique placeholder names in order of first appearance.

    Args:
        content: Template text

    Returns:
        list[str]: Placeholder names without braces
    """
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_PATTERN.finditer(content or ""):
        seen.setdefault(match.group(1).strip(), None)
    return list(seen)


def validate_template(template: Mapping[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate a template definition.

    Args:
        template: Raw template fields

    Returns:
        tuple[bool, list[str]]: (is_valid, error messages as "field: message")
    """
    try:
        TemplateDefinition.model_validate(template)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        return False, errors
    return True, []


def generate_document(content: str, placeholders: Sequence[str], data: Mapping[str, Any]) -> str:
    """
    Replace placeholders in a single pass.

    Missing values become empty strings. Tokens not listed in
    `placeholders` are left untouched.

    Args:
        content: Template text
        placeholders: Placeholder names to substitute
        data: Values by placeholder name

    Returns:
        str: Rendered text
    """
    names = {p.strip() for p in placeholders}

    def _substitute(match: re.Match) -> str:
        name = match.group(1).strip()
        if name not in names:
            return match.group(0)
        value = data.get(name)
        return "" if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(_substitute, content or "")


def generate_test_data(placeholders: Sequence[str]) -> dict[str, str]:
    """Generate sample values for previewing a template."""
    test_data: dict[str, str] = {}
    for placeholder in placeholders:
        lowered = placeholder.lower()
        if "name" in lowered:
            test_data[placeholder] = "John Doe"
        elif "date" in lowered:
            test_data[placeholder] = date.today().isoformat()
        elif "salary" in lowered or "amount" in lowered:
            test_data[placeholder] = "100000"
        elif "fte" in lowered:
            test_data[placeholder] = "1.0"
        elif "rvu" in lowered:
            test_data[placeholder] = "5000"
        else:
            test_data[placeholder] = f"[{placeholder}]"
    return test_data


def build_placeholder_map(
    provider: Mapping[str, Any],
    mapping: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Build the placeholder -> value map used by the HTML merge.

    Args:
        provider: Provider record
        mapping: Optional placeholder -> provider field overrides

    Returns:
        dict[str, str]: Values keyed by placeholder name
    """
    name = provider.get("name") or ""
    credentials = provider.get("credentials")
    fte = provider.get("totalFTE")
    if fte is None:
        fte = get_provider_field_value(provider, "fte")

    values: dict[str, str] = {
        "ProviderName": f"{name}, {credentials}" if credentials else name,
        "StartDate": format_date(provider.get("startDate")),
        "BaseSalary": format_currency(provider.get("baseSalary")),
        "FTE": "" if fte is None else str(fte),
        "FTEBreakdown": "" if fte is None else fte_summary(fte),
        "Specialty": provider.get("specialty") or "",
    }

    if provider.get("wRVUTarget"):
        values["wRVUTarget"] = str(provider["wRVUTarget"])
    if provider.get("conversionFactor"):
        values["ConversionFactor"] = format_currency(provider["conversionFactor"])
    retention_bonus = get_provider_field_value(provider, "retentionBonus")
    if retention_bonus:
        values["RetentionBonus"] = format_currency(retention_bonus)

    for key, value in parse_dynamic_fields(provider.get("dynamicFields")).items():
        if value is not None and value != "":
            values.setdefault(key, str(value))

    for placeholder, column in (mapping or {}).items():
        value = get_provider_field_value(provider, column)
        if value is not None:
            values[placeholder] = str(value)

    return values


def merge_template_with_data(
    provider: Mapping[str, Any],
    content: str,
    mapping: Mapping[str, str] | None = None,
) -> MergeResult:
    """
    Merge provider data into HTML template content.

    Placeholders without a value stay in place and are reported.

    Args:
        provider: Provider record
        content: Template HTML
        mapping: Optional placeholder -> provider field overrides

    Returns:
        MergeResult: Merged content and warnings
    """
    values = build_placeholder_map(provider, mapping)

    def _substitute(match: re.Match) -> str:
        key = match.group(1).strip()
        return values.get(key, match.group(0))

    merged = PLACEHOLDER_PATTERN.sub(_substitute, content or "")

    warnings: list[str] = []
    remaining = [m.group(0) for m in PLACEHOLDER_PATTERN.finditer(merged)]
    if remaining:
        warnings.append(
            f"Warning: The following placeholders were not replaced: {', '.join(remaining)}"
        )
        logger.info(
            "Placeholders left unreplaced",
            extra={"provider_id": provider.get("id"), "count": len(remaining)},
        )

    return MergeResult(content=merged, warnings=warnings)
