"""Funnel stage definitions and per-stage session counts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from .services_metrics import pct_or_zero
from .services_sessions import Session

STAGE_STARTED = "started"
STAGE_RATING_SELECTED = "rating_selected"
STAGE_CONDITIONS_SELECTED = "conditions_selected"
STAGE_QUESTIONS_COMPLETED = "questions_completed"
STAGE_VIEWED_RESULTS = "viewed_results"
STAGE_CLICKED_REVIEW = "clicked_review"
STAGE_SUBMITTED = "submitted"

STAGE_KEYS = (
    STAGE_STARTED,
    STAGE_RATING_SELECTED,
    STAGE_CONDITIONS_SELECTED,
    STAGE_QUESTIONS_COMPLETED,
    STAGE_VIEWED_RESULTS,
    STAGE_CLICKED_REVIEW,
    STAGE_SUBMITTED,
)


@dataclass(frozen=True)
class FunnelStage:
    key: str
    label: str  # step value written by the tracker
    title: str


# Tracker labels skip "4_": the calculator never emitted a fourth step.
DEFAULT_FUNNEL_STAGES: Sequence[FunnelStage] = (
    FunnelStage(STAGE_STARTED, "1_started", "Started Calculator"),
    FunnelStage(STAGE_RATING_SELECTED, "2_rating_selected", "Selected Rating"),
    FunnelStage(STAGE_CONDITIONS_SELECTED, "3_conditions_selected", "Selected Conditions"),
    FunnelStage(STAGE_QUESTIONS_COMPLETED, "5_all_questions_completed", "Completed Questions"),
    FunnelStage(STAGE_VIEWED_RESULTS, "6_viewed_results", "Viewed Results"),
    FunnelStage(STAGE_CLICKED_REVIEW, "7_clicked_get_review", "Clicked CTA"),
    FunnelStage(STAGE_SUBMITTED, "8_lead_submitted", "Submitted Lead"),
)


def validate_stages(stages: Sequence[FunnelStage]) -> None:
    keys = [s.key for s in stages]
    if sorted(keys) != sorted(STAGE_KEYS):
        raise ValueError(f"Funnel stages must define exactly {list(STAGE_KEYS)}, got {keys}")
    labels = [s.label for s in stages]
    if any(not label for label in labels) or len(set(labels)) != len(labels):
        raise ValueError("Funnel stage labels must be non-empty and unique")


def stage_labels(stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES) -> Dict[str, str]:
    return {s.key: s.label for s in stages}


def count_funnel(
    sessions: Mapping[str, Session],
    stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
) -> Dict[str, int]:
    """Each stage counts independently; reaching a later stage does not imply the earlier ones."""
    counts = {s.key: 0 for s in stages}
    for session in sessions.values():
        for stage in stages:
            if stage.label in session.steps:
                counts[stage.key] += 1
    return counts


def funnel_report(
    funnel: Mapping[str, int],
    stages: Sequence[FunnelStage] = DEFAULT_FUNNEL_STAGES,
) -> List[Dict[str, Any]]:
    started = funnel.get(STAGE_STARTED, 0)
    return [
        {
            "key": stage.key,
            "label": stage.label,
            "title": stage.title,
            "count": funnel.get(stage.key, 0),
            "pct_of_started": pct_or_zero(funnel.get(stage.key, 0), started),
        }
        for stage in stages
    ]
