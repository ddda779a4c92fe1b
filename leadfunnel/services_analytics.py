"""
Full analytics rebuild over an event log.

Every call recomputes from scratch; ``AnalyticsCache`` only skips repeated work
for identical inputs and returns copies, so callers may mutate results freely.
"""

from __future__ import annotations

import copy
import hashlib
import json
import threading
from collections import OrderedDict
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .services_dropoffs import count_dropoffs, rank_dropoffs
from .services_funnel import DEFAULT_FUNNEL_STAGES, FunnelStage, count_funnel, funnel_report
from .services_lead_metrics import compute_cost_metrics, compute_lead_metrics
from .services_ratings import display_distribution, most_common_rating, rating_distribution
from .services_sessions import build_sessions, lead_sessions


def compute_analytics(
    rows: Iterable[Mapping[str, Any]],
    statuses: Optional[Mapping[str, Any]] = None,
    spend: Any = None,
    stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
) -> Dict[str, Any]:
    sessions = build_sessions(rows)
    leads = lead_sessions(sessions)
    result: Dict[str, Any] = {
        "funnel": count_funnel(sessions, stages),
        "dropoffs": count_dropoffs(sessions, stages),
        "ratingDistribution": rating_distribution(sessions, stages),
        "leads": [lead.to_dict() for lead in leads],
        "totalSessions": len(sessions),
    }
    if statuses is not None or spend is not None:
        lead_metrics = compute_lead_metrics(leads, statuses)
        result["leadMetrics"] = lead_metrics
        result["costMetrics"] = compute_cost_metrics(lead_metrics, spend)
    return result


def build_dashboard(
    rows: Iterable[Mapping[str, Any]],
    statuses: Optional[Mapping[str, Any]] = None,
    spend: Any = None,
    stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
) -> Dict[str, Any]:
    """Analytics plus the presentation-ready views the dashboard renders."""
    result = compute_analytics(rows, statuses or {}, spend or 0.0, stages)
    dist = result["ratingDistribution"]
    result["funnelReport"] = funnel_report(result["funnel"], stages)
    result["rankedDropoffs"] = rank_dropoffs(result["dropoffs"])
    result["displayRatingDistribution"] = display_distribution(dist)
    result["mostCommonRating"] = most_common_rating(dist)
    return result


def analytics_cache_key(
    rows: List[Mapping[str, Any]],
    statuses: Optional[Mapping[str, Any]],
    spend: Any,
    stages: Sequence[FunnelStage],
) -> str:
    payload = {
        "rows": [dict(r) for r in rows],
        "statuses": dict(statuses) if statuses is not None else None,
        "spend": spend,
        "stages": [asdict(s) for s in stages],
    }
    blob = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()


class AnalyticsCache:
    def __init__(self, max_entries: int = 16):
        self.max_entries = max(1, int(max_entries))
        self._entries: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_or_compute(
        self,
        rows: Iterable[Mapping[str, Any]],
        statuses: Optional[Mapping[str, Any]] = None,
        spend: Any = None,
        stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
    ) -> Dict[str, Any]:
        rows = list(rows)
        key = analytics_cache_key(rows, statuses, spend, stages)
        with self._lock:
            hit = self._entries.get(key)
            if hit is not None:
                self._entries.move_to_end(key)
                return copy.deepcopy(hit)
        result = build_dashboard(rows, statuses, spend, stages)
        with self._lock:
            self._entries[key] = copy.deepcopy(result)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return result
