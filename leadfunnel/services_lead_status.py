"""Persistence for lead qualification flags and the ad spend figure."""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Dict, Mapping

from sqlalchemy.orm import Session

from .models_leads import AdSpendRecord, LeadStatusRecord
from .services_lead_metrics import STATUS_FLAGS, parse_spend_input

AD_SPEND_ROW_ID = 1


class LeadStatusStore:
    """Key-value contract the analytics layer reads statuses and spend through."""

    def get_statuses(self) -> Dict[str, Dict[str, bool]]:
        raise NotImplementedError

    def set_statuses(self, statuses: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def get_spend(self) -> float:
        raise NotImplementedError

    def set_spend(self, value: Any) -> float:
        raise NotImplementedError


def _clean_statuses(statuses: Mapping[str, Any]) -> Dict[str, Dict[str, bool]]:
    out: Dict[str, Dict[str, bool]] = {}
    for sid, entry in statuses.items():
        if not sid or not isinstance(entry, Mapping):
            continue
        out[str(sid)] = {f: bool(entry.get(f)) for f in STATUS_FLAGS}
    return out


class InMemoryLeadStatusStore(LeadStatusStore):
    def __init__(self, statuses: Mapping[str, Any] | None = None, spend: Any = 0.0):
        self._statuses = _clean_statuses(statuses or {})
        self._spend = parse_spend_input(spend)

    def get_statuses(self) -> Dict[str, Dict[str, bool]]:
        return copy.deepcopy(self._statuses)

    def set_statuses(self, statuses: Mapping[str, Any]) -> None:
        self._statuses = _clean_statuses(statuses)

    def get_spend(self) -> float:
        return self._spend

    def set_spend(self, value: Any) -> float:
        self._spend = parse_spend_input(value)
        return self._spend


class SqlLeadStatusStore(LeadStatusStore):
    def __init__(self, db: Session):
        self.db = db

    def get_statuses(self) -> Dict[str, Dict[str, bool]]:
        rows = self.db.query(LeadStatusRecord).order_by(LeadStatusRecord.session_id.asc()).all()
        return {r.session_id: {"wanted": bool(r.wanted), "retained": bool(r.retained)} for r in rows}

    def set_statuses(self, statuses: Mapping[str, Any]) -> None:
        cleaned = _clean_statuses(statuses)
        now = datetime.utcnow()
        existing = {r.session_id: r for r in self.db.query(LeadStatusRecord).all()}
        for sid, record in existing.items():
            if sid not in cleaned:
                self.db.delete(record)
        for sid, flags in cleaned.items():
            record = existing.get(sid)
            if record is None:
                record = LeadStatusRecord(session_id=sid)
                self.db.add(record)
            record.wanted = flags["wanted"]
            record.retained = flags["retained"]
            record.updated_at = now
        self.db.commit()

    def get_spend(self) -> float:
        record = self.db.get(AdSpendRecord, AD_SPEND_ROW_ID)
        if record is None:
            return 0.0
        return float(record.amount or 0.0)

    def set_spend(self, value: Any) -> float:
        amount = parse_spend_input(value)
        record = self.db.get(AdSpendRecord, AD_SPEND_ROW_ID)
        if record is None:
            record = AdSpendRecord(id=AD_SPEND_ROW_ID)
            self.db.add(record)
        record.amount = amount
        record.updated_at = datetime.utcnow()
        self.db.commit()
        return amount
