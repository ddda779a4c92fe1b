from __future__ import annotations

from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence

from .services_funnel import (
    DEFAULT_FUNNEL_STAGES,
    STAGE_CLICKED_REVIEW,
    STAGE_CONDITIONS_SELECTED,
    STAGE_QUESTIONS_COMPLETED,
    STAGE_RATING_SELECTED,
    STAGE_STARTED,
    STAGE_SUBMITTED,
    STAGE_VIEWED_RESULTS,
    FunnelStage,
    stage_labels,
)
from .services_sessions import Session

# (bucket, reached stage, missing next stage, description), checked in order.
DROPOFF_BUCKETS = (
    ("beforeRating", STAGE_STARTED, STAGE_RATING_SELECTED, "Before selecting rating"),
    ("beforeConditions", STAGE_RATING_SELECTED, STAGE_CONDITIONS_SELECTED, "Before selecting conditions"),
    ("beforeQuestions", STAGE_CONDITIONS_SELECTED, STAGE_QUESTIONS_COMPLETED, "During questions"),
    ("beforeResults", STAGE_QUESTIONS_COMPLETED, STAGE_VIEWED_RESULTS, "Before seeing results"),
    ("beforeClick", STAGE_VIEWED_RESULTS, STAGE_CLICKED_REVIEW, "Saw results, didn't click CTA"),
    ("beforeSubmit", STAGE_CLICKED_REVIEW, STAGE_SUBMITTED, "Clicked CTA, didn't submit"),
)

BUCKET_KEYS = tuple(b[0] for b in DROPOFF_BUCKETS)


def classify_dropoff(
    steps: Collection[str],
    stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
) -> Optional[str]:
    """Return the first bucket whose transition the session failed, or None."""
    labels = stage_labels(stages)
    for bucket, reached, following, _ in DROPOFF_BUCKETS:
        if labels[reached] in steps and labels[following] not in steps:
            return bucket
    return None


def count_dropoffs(
    sessions: Mapping[str, Session],
    stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
) -> Dict[str, int]:
    counts = {bucket: 0 for bucket in BUCKET_KEYS}
    for session in sessions.values():
        bucket = classify_dropoff(session.steps, stages)
        if bucket is not None:
            counts[bucket] += 1
    return counts


def rank_dropoffs(dropoffs: Mapping[str, int]) -> List[Dict[str, Any]]:
    ranked = [
        {"bucket": bucket, "description": description, "count": int(dropoffs.get(bucket, 0))}
        for bucket, _, _, description in DROPOFF_BUCKETS
    ]
    ranked.sort(key=lambda item: -item["count"])
    return ranked
