"""
Text and value formatting helpers for contract output.

Dependencies: None (pure domain layer)
System role: Display formatting shared by template merge and DOCX rendering
"""

import re
from datetime import date, datetime
from typing import Any

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

SMART_CHARACTER_MAP: dict[str, str] = {
    "\u201c": '"',
    "\u201d": '"',
    "\u2018": "'",
    "\u2019": "'",
    "\u2013": "-",
    "\u2014": "--",
    "\u2026": "...",
    "\u00a0": " ",
    "\u2022": "-",
}
_SMART_TRANSLATION = str.maketrans(SMART_CHARACTER_MAP)


def normalize_smart_quotes(text: str) -> str:
    """Replace curly quotes, dashes, ellipses, NBSP and bullets with ASCII."""
    if not text:
        return text
    return text.translate(_SMART_TRANSLATION)


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(str(value).replace(",", "").replace("$", "").strip())
    except ValueError:
        return None
    if number != number:  # NaN
        return None
    return number


def format_currency(value: Any) -> str:
    """
    Format a value as whole US dollars.

    Args:
        value: Number or numeric string

    Returns:
        str: e.g. "$250,000", or "$0" when the value is not numeric
    """
    number = _to_float(value)
    if number is None:
        return "$0"
    sign = "-" if number < 0 else ""
    return f"{sign}${abs(number):,.0f}"


def format_number(value: Any, decimals: int | None = None) -> str:
    """Format a number with thousands separators ("" when not numeric)."""
    number = _to_float(value)
    if number is None:
        return ""
    if decimals is not None:
        return f"{number:,.{decimals}f}"
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,}"


def format_percentage(value: Any, decimals: int = 1) -> str:
    """Format a fraction (0.25) as a percentage ("25.0%")."""
    number = _to_float(value)
    if number is None:
        return ""
    return f"{number * 100:.{decimals}f}%"


def format_date(value: Any) -> str:
    """
    Convert YYYY-MM-DD to MM/DD/YYYY.

    Other strings are returned unchanged and non-strings become "".
    """
    if isinstance(value, (date, datetime)):
        return value.strftime("%m/%d/%Y")
    if not isinstance(value, str):
        return ""
    match = _ISO_DATE.match(value.strip())
    if not match:
        return value
    year, month, day = match.groups()
    return f"{month}/{day}/{year}"


def format_long_date(value: Any) -> str:
    """Format a date as "January 5, 2025" ("" when unparseable)."""
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError:
            return ""
    else:
        return ""
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def get_contract_file_name(year: str | int, provider_name: str, run_date: str) -> str:
    """
    Build the contract download name.

    Args:
        year: Contract year
        provider_name: Provider display name
        run_date: Generation date (YYYY-MM-DD)

    Returns:
        str: "{year}_{NameWithoutSpaces}_ScheduleA_{run_date}.docx"
    """
    safe_name = re.sub(r"\s+", "", provider_name or "")
    return f"{year}_{safe_name}_ScheduleA_{run_date}.docx"
