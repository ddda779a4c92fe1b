"""SQLAlchemy models for lead qualification flags and ad spend."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String

from .db import Base


class LeadStatusRecord(Base):
    __tablename__ = "lead_statuses"

    session_id = Column(String(255), primary_key=True)
    wanted = Column(Boolean, nullable=False, default=False)
    retained = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class AdSpendRecord(Base):
    """Single-row table; the dashboard tracks one spend figure."""

    __tablename__ = "ad_spend"

    id = Column(Integer, primary_key=True)
    amount = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
