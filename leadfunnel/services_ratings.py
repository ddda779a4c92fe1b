from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from .services_funnel import DEFAULT_FUNNEL_STAGES, STAGE_RATING_SELECTED, FunnelStage, stage_labels
from .services_sessions import Session

DISPLAY_RATING_KEYS = tuple(range(0, 101, 10))


def rating_distribution(
    sessions: Mapping[str, Session],
    stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
) -> Dict[int, int]:
    """Histogram of current_rating over sessions that reached rating selection, unbinned."""
    label = stage_labels(stages)[STAGE_RATING_SELECTED]
    dist: Dict[int, int] = {}
    for session in sessions.values():
        if label not in session.steps:
            continue
        dist[session.current_rating] = dist.get(session.current_rating, 0) + 1
    return dist


def display_distribution(
    dist: Mapping[int, int],
    keys: Sequence[int] = DISPLAY_RATING_KEYS,
) -> Dict[int, int]:
    return {k: int(dist.get(k, 0)) for k in keys}


def most_common_rating(dist: Mapping[int, int]) -> Optional[int]:
    """Rating with the highest count; ties go to the lowest rating."""
    best: Optional[int] = None
    best_count = 0
    for rating, count in sorted(dist.items()):
        if best is None or count > best_count:
            best, best_count = rating, count
    return best
