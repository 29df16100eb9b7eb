"""
FTE breakdown builder.

Collects the per-role FTE allocations of a provider and renders them for
contract documents.

Dependencies: None (pure domain layer)
System role: {{FTEBreakdown}} content for generated contracts
"""

import html
import math
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from contract_engine.core.dynamic_fields import get_provider_field_value

BreakdownFormat = Literal["table", "list", "inline", "text"]

FTE_COMPONENTS: tuple[tuple[str, str], ...] = (
    ("clinicalFTE", "Clinical"),
    ("medicalDirectorFTE", "Medical Director"),
    ("divisionChiefFTE", "Division Chief"),
    ("researchFTE", "Research"),
    ("teachingFTE", "Teaching"),
)

SUM_TOLERANCE = 0.01
HOURS_PER_FTE = 40


@dataclass
class FteItem:
    """One role allocation."""

    label: str
    value: float


@dataclass
class FteBreakdown:
    """All non-zero allocations plus the total FTE."""

    items: list[FteItem] = field(default_factory=list)
    total: float = 0.0

    @property
    def items_sum(self) -> float:
        return sum(item.value for item in self.items)

    @property
    def is_consistent(self) -> bool:
        return abs(self.items_sum - self.total) <= SUM_TOLERANCE


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def build_fte_breakdown(provider: Mapping[str, Any]) -> FteBreakdown:
    """
    Build the FTE breakdown of a provider.

    Zero or missing components are left out. The total is `totalFTE` when
    set, otherwise the sum of the components.

    Args:
        provider: Provider record

    Returns:
        FteBreakdown: Items and total
    """
    items = []
    for key, label in FTE_COMPONENTS:
        value = _as_float(get_provider_field_value(provider, key))
        if value > 0:
            items.append(FteItem(label=label, value=value))

    total = _as_float(get_provider_field_value(provider, "totalFTE"))
    if total <= 0:
        total = sum(item.value for item in items)
    return FteBreakdown(items=items, total=total)


def _percent(value: float, total: float) -> str:
    if total <= 0:
        return "0%"
    return f"{value / total * 100:.0f}%"


def render_fte_breakdown(breakdown: FteBreakdown, fmt: BreakdownFormat = "table") -> str:
    """
    Render an FTE breakdown.

    Args:
        breakdown: Breakdown to render
        fmt: "table" or "list" (HTML), "inline" or "text" (plain)

    Returns:
        str: Rendered breakdown, "" when there are no items
    """
    if not breakdown.items:
        return ""

    total = breakdown.total
    note = ""
    if not breakdown.is_consistent:
        note = f"Note: components sum to {breakdown.items_sum:.2f} FTE, total is {total:.2f} FTE."

    if fmt == "table":
        rows = "".join(
            f"<tr><td>{html.escape(item.label)}</td><td>{item.value:.2f}</td>"
            f"<td>{_percent(item.value, total)}</td></tr>"
            for item in breakdown.items
        )
        table = (
            "<table><thead><tr><th>Role</th><th>FTE</th><th>Percentage</th></tr></thead>"
            f"<tbody>{rows}<tr><td><strong>Total</strong></td><td><strong>{total:.2f}</strong></td>"
            "<td><strong>100%</strong></td></tr></tbody></table>"
        )
        return table + (f"<p>{html.escape(note)}</p>" if note else "")

    if fmt == "list":
        entries = "".join(
            f"<li>{html.escape(item.label)}: {item.value:.2f} FTE ({_percent(item.value, total)})</li>"
            for item in breakdown.items
        )
        body = f"<ul>{entries}<li><strong>Total: {total:.2f} FTE</strong></li></ul>"
        return body + (f"<p>{html.escape(note)}</p>" if note else "")

    if fmt == "inline":
        parts = ", ".join(f"{item.label} {item.value:.2f}" for item in breakdown.items)
        text = f"{parts} (Total {total:.2f} FTE)"
        return f"{text} {note}".strip()

    lines = [f"{item.label}: {item.value:.2f} FTE ({_percent(item.value, total)})" for item in breakdown.items]
    lines.append(f"Total: {total:.2f} FTE")
    if note:
        lines.append(note)
    return "\n".join(lines)


def fte_summary(fte: Any) -> str:
    """Summarize a total FTE as "{fte} FTE ({hours} hours per week)"."""
    value = _as_float(fte)
    hours = math.floor(value * HOURS_PER_FTE + 0.5)
    display = f"{value:g}"
    return f"{display} FTE ({hours} hours per week)"
