"""CSV import of event-log rows and CSV export of the lead list."""

import io
from typing import Any, Dict, List, Mapping, Sequence

import pandas as pd


def rows_from_csv(content: bytes) -> List[Dict[str, Any]]:
    """Parse an exported tracking sheet; every cell stays text and blanks become ""."""
    df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
    return df.to_dict(orient="records")


LEAD_EXPORT_COLUMNS = [
    "sessionId",
    "firstName",
    "lastName",
    "email",
    "phone",
    "conditions",
    "currentRating",
    "projectedRating",
    "monthlyIncrease",
    "submittedAt",
    "wanted",
    "retained",
]


def leads_to_csv(leads: Sequence[Mapping[str, Any]], statuses: Mapping[str, Any]) -> str:
    records = []
    for lead in leads:
        status = statuses.get(lead.get("sessionId")) or {}
        records.append({
            **{c: lead.get(c, "") for c in LEAD_EXPORT_COLUMNS[:-2]},
            "wanted": bool(status.get("wanted")),
            "retained": bool(status.get("retained")),
        })
    df = pd.DataFrame(records, columns=LEAD_EXPORT_COLUMNS)
    return df.to_csv(index=False)
