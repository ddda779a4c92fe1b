"""
Header alias resolution for raw event-log rows.

The tracking sheet is written by several form versions, so one logical field can
arrive under more than one header spelling. Each field has an ordered tuple of
accepted headers; the first header holding a non-empty value wins.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "session_id": ("sessionId", "Session Id"),
    "step": ("step", "Step"),
    "type": ("type", "Type"),
    "current_rating": ("Current Rating", "currentRating"),
    "projected_rating": ("Projected Rating", "projectedRating"),
    "monthly_increase": ("Monthly Increase", "monthlyIncrease"),
    "first_name": ("First Name", "firstName"),
    "last_name": ("Last Name", "lastName"),
    "email": ("Email", "email"),
    "phone": ("Phone", "phone"),
    "conditions": ("Conditions", "conditions"),
    "submitted_at": ("Submitted At", "submittedAt"),
    "timestamp": ("timestamp", "Timestamp"),
}

NUMERIC_FIELDS = ("current_rating", "projected_rating", "monthly_increase")
TEXT_FIELDS = tuple(f for f in FIELD_ALIASES if f not in NUMERIC_FIELDS)


@dataclass(frozen=True)
class NormalizedRow:
    """Logical view of one row. ``None`` means the row did not supply the field."""

    session_id: Optional[str] = None
    step: Optional[str] = None
    type: Optional[str] = None
    current_rating: Any = None
    projected_rating: Any = None
    monthly_increase: Any = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    conditions: Optional[str] = None
    submitted_at: Optional[str] = None
    timestamp: Optional[str] = None


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    # pandas hands missing CSV cells over as NaN
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def as_text(value: Any) -> str:
    """Render a cell as text; sheet numbers like ``5551234567.0`` lose the ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def resolve_field(row: Mapping[str, Any], field: str) -> Any:
    for header in FIELD_ALIASES[field]:
        value = row.get(header)
        if not _is_empty(value):
            return value
    return None


_LEADING_NUMBER = re.compile(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)")


def parse_decimal(value: Any) -> Optional[float]:
    """Decimal parse; text falls back to its leading number (``"30%"`` -> 30.0)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        try:
            number = float(text)
        except ValueError:
            match = _LEADING_NUMBER.match(text)
            if match is None:
                return None
            number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """Integer parse; decimals truncate toward zero (``"30.7"`` -> 30)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = parse_decimal(value)
    if number is None:
        return None
    return int(number)


def normalize_row(row: Mapping[str, Any]) -> NormalizedRow:
    values: Dict[str, Any] = {}
    for field in TEXT_FIELDS:
        raw = resolve_field(row, field)
        values[field] = as_text(raw) if raw is not None else None
    for field in NUMERIC_FIELDS:
        values[field] = resolve_field(row, field)
    return NormalizedRow(**values)
