"""Fold raw event-log rows into per-session state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Set

from .services_row_normalizer import normalize_row, parse_decimal, parse_int

logger = logging.getLogger(__name__)

LEAD_SUBMISSION_TYPE = "lead_submission"


@dataclass
class Session:
    session_id: str
    steps: Set[str] = field(default_factory=set)
    current_rating: int = 0
    projected_rating: int = 0
    monthly_increase: float = 0.0
    is_lead: bool = False
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    conditions: str = ""
    submitted_at: str = ""
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "steps": sorted(self.steps),
            "currentRating": self.current_rating,
            "projectedRating": self.projected_rating,
            "monthlyIncrease": self.monthly_increase,
            "isLead": self.is_lead,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "conditions": self.conditions,
            "submittedAt": self.submitted_at,
            "timestamp": self.timestamp,
        }


def build_sessions(rows: Iterable[Mapping[str, Any]]) -> Dict[str, Session]:
    """
    Build the session map in input order (rows are not sorted by time).

    Numeric fields are last-write-wins over rows that carry the field; a
    missing value leaves the stored number alone, an unparseable one writes 0.
    """
    sessions: Dict[str, Session] = {}
    discarded = 0

    for raw in rows:
        row = normalize_row(raw)
        if row.session_id is None:
            discarded += 1
            continue

        session = sessions.get(row.session_id)
        if session is None:
            session = Session(session_id=row.session_id, timestamp=row.timestamp or "")
            sessions[row.session_id] = session

        if row.step is not None:
            session.steps.add(row.step)

        if row.type == LEAD_SUBMISSION_TYPE:
            session.is_lead = True
            session.first_name = row.first_name or ""
            session.last_name = row.last_name or ""
            session.email = row.email or ""
            session.phone = row.phone or ""
            session.conditions = row.conditions or ""
            session.submitted_at = row.submitted_at or ""

        if row.current_rating is not None:
            session.current_rating = parse_int(row.current_rating) or 0
        if row.projected_rating is not None:
            session.projected_rating = parse_int(row.projected_rating) or 0
        if row.monthly_increase is not None:
            session.monthly_increase = parse_decimal(row.monthly_increase) or 0.0

    if discarded:
        logger.debug(f"Discarded {discarded} rows without a session id")
    return sessions


def lead_sessions(sessions: Mapping[str, Session]) -> List[Session]:
    return [s for s in sessions.values() if s.is_lead]
