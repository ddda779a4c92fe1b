"""
Lead quality and cost-per-outcome metrics.

Qualification flags live outside the event log: an operator marks a lead as
``wanted`` (worth pursuing) and later ``retained`` (signed). The map is keyed by
session id; a missing entry or flag counts as False.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from .services_metrics import pct_or_zero, ratio_or_none, ratio_or_zero
from .services_row_normalizer import parse_decimal
from .services_sessions import Session

STATUS_FLAGS = ("wanted", "retained")


def _flag(statuses: Mapping[str, Any], session_id: str, flag: str) -> bool:
    entry = statuses.get(session_id)
    if not isinstance(entry, Mapping):
        return False
    return bool(entry.get(flag))


def compute_lead_metrics(
    leads: Sequence[Session],
    statuses: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    statuses = statuses or {}
    total = len(leads)
    wanted = sum(1 for lead in leads if _flag(statuses, lead.session_id, "wanted"))
    retained = sum(1 for lead in leads if _flag(statuses, lead.session_id, "retained"))
    leads_per_case = ratio_or_none(total, retained, 1)
    return {
        "total": total,
        "wanted": wanted,
        "retained": retained,
        "wantedRate": pct_or_zero(wanted, total),
        "retainedRate": pct_or_zero(retained, total),
        "conversionRate": pct_or_zero(retained, wanted),
        "leadsPerCase": leads_per_case,
    }


def compute_cost_metrics(lead_metrics: Mapping[str, Any], spend: Any) -> Dict[str, float]:
    amount = parse_spend_input(spend)
    return {
        "spend": amount,
        "costPerLead": ratio_or_zero(amount, lead_metrics.get("total", 0)),
        "costPerWanted": ratio_or_zero(amount, lead_metrics.get("wanted", 0)),
        "costPerCase": ratio_or_zero(amount, lead_metrics.get("retained", 0)),
    }


def parse_spend_input(value: Any) -> float:
    amount = parse_decimal(value)
    if amount is None or amount < 0:
        return 0.0
    return amount


def toggle_status(statuses: Mapping[str, Any], session_id: str, flag: str) -> Dict[str, Dict[str, bool]]:
    """Return a copy of ``statuses`` with one flag flipped for ``session_id``."""
    if flag not in STATUS_FLAGS:
        raise ValueError(f"Unknown status flag: {flag}. Expected one of {list(STATUS_FLAGS)}")
    updated: Dict[str, Dict[str, bool]] = {}
    for sid, entry in statuses.items():
        if isinstance(entry, Mapping):
            updated[sid] = {f: bool(entry.get(f)) for f in STATUS_FLAGS}
    current = updated.get(session_id, {f: False for f in STATUS_FLAGS})
    updated[session_id] = {**current, flag: not current[flag]}
    return updated
