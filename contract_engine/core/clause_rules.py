"""
Clause applicability rules.

Dependencies: None (pure domain layer)
System role: Decides which clauses are appended to a provider's contract
"""

from typing import Any, Iterable, Mapping

from contract_engine.core.dynamic_fields import get_provider_field_value

OPERATORS = ("equals", "notEquals", "greaterThan", "lessThan", "exists", "notExists")


def _coerce_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def evaluate_condition(provider: Mapping[str, Any], condition: Mapping[str, Any]) -> bool:
    """
    Evaluate one clause condition against a provider.

    String comparison for equals/notEquals is case-insensitive. Numeric
    comparisons that cannot coerce both sides are false.

    Args:
        provider: Provider record
        condition: {"field", "operator", "value"}

    Returns:
        bool: Whether the condition holds
    """
    operator = condition.get("operator")
    actual = get_provider_field_value(provider, condition.get("field", ""))
    expected = condition.get("value")

    if operator == "exists":
        return _is_present(actual)
    if operator == "notExists":
        return not _is_present(actual)

    if operator in ("equals", "notEquals"):
        left, right = _coerce_float(actual), _coerce_float(expected)
        if left is not None and right is not None:
            equal = left == right
        else:
            equal = str(actual if actual is not None else "").strip().lower() == str(
                expected if expected is not None else ""
            ).strip().lower()
        return equal if operator == "equals" else not equal

    if operator in ("greaterThan", "lessThan"):
        left, right = _coerce_float(actual), _coerce_float(expected)
        if left is None or right is None:
            return False
        return left > right if operator == "greaterThan" else left < right

    return False


def clause_applies(provider: Mapping[str, Any], clause: Mapping[str, Any]) -> bool:
    """Check a clause's provider-type filter and all of its conditions."""
    provider_types = clause.get("applicableProviderTypes") or []
    if provider_types:
        provider_type = str(provider.get("providerType") or "").lower()
        if provider_type not in {str(t).lower() for t in provider_types}:
            return False
    return all(evaluate_condition(provider, c) for c in clause.get("conditions") or [])


def select_applicable_clauses(
    provider: Mapping[str, Any],
    clauses: Iterable[Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Return the clauses that apply to a provider, preserving order."""
    return [clause for clause in clauses if clause_applies(provider, clause)]
