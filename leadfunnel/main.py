from fastapi import FastAPI, UploadFile, File, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel
from typing import List, Optional, Dict, Any
from datetime import datetime
import logging

import pandas as pd
from sqlalchemy.orm import Session

from leadfunnel.db import engine, get_db, init_db
from leadfunnel.connectors.csv_rows import leads_to_csv, rows_from_csv
from leadfunnel.connectors.google_sheet import SheetError, fetch_rows
from leadfunnel.sample_rows import SAMPLE_ROWS
from leadfunnel.services_analytics import AnalyticsCache
from leadfunnel.services_lead_metrics import STATUS_FLAGS, toggle_status
from leadfunnel.services_lead_status import SqlLeadStatusStore
from leadfunnel.utils.dashboard_config import load_dashboard_config

logger = logging.getLogger(__name__)

init_db(engine)

app = FastAPI(title="Lead Funnel Dashboard API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==================== Pydantic Models ====================

class AdSpendUpdate(BaseModel):
    value: Any = None


class LeadStatusModel(BaseModel):
    wanted: bool = False
    retained: bool = False


# ==================== In-memory row cache ====================

CONFIG = load_dashboard_config()
ROWS: List[Dict[str, Any]] = list(SAMPLE_ROWS)
USING_LIVE_DATA = False
LAST_UPDATED: Optional[datetime] = datetime.utcnow()
ANALYTICS_CACHE = AnalyticsCache()


def _replace_rows(rows: List[Dict[str, Any]], live: bool) -> None:
    global ROWS, USING_LIVE_DATA, LAST_UPDATED
    ROWS = rows
    USING_LIVE_DATA = live
    LAST_UPDATED = datetime.utcnow()


def _dashboard(db: Session) -> Dict[str, Any]:
    store = SqlLeadStatusStore(db)
    result = ANALYTICS_CACHE.get_or_compute(ROWS, store.get_statuses(), store.get_spend(), CONFIG.stages)
    result["leadStatuses"] = store.get_statuses()
    result["lastUpdated"] = LAST_UPDATED.isoformat() + "Z" if LAST_UPDATED else None
    result["usingLiveData"] = USING_LIVE_DATA
    return result


# ==================== Health ====================

@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "rows_loaded": len(ROWS),
        "using_live_data": USING_LIVE_DATA,
        "sheet_configured": bool(CONFIG.sheet_id),
    }

# ==================== Analytics ====================

@app.get("/api/analytics")
def get_analytics(db: Session = Depends(get_db)):
    """Funnel, drop-offs, rating histogram, leads and lead/cost metrics."""
    return _dashboard(db)

# ==================== Rows ====================

@app.post("/api/rows/refresh")
def refresh_rows():
    """Pull the tracking sheet. On failure the current rows stay in place."""
    if not CONFIG.sheet_id:
        return {"ok": False, "error": "No sheet configured", "rows_loaded": len(ROWS)}
    try:
        rows = fetch_rows(
            CONFIG.sheet_id,
            CONFIG.sheet_name,
            timeout=CONFIG.request_timeout_seconds,
            prefix_len=CONFIG.prefix_len,
            suffix_len=CONFIG.suffix_len,
        )
    except SheetError as e:
        logger.error(f"Sheet refresh failed: {e}")
        return {"ok": False, "error": str(e), "rows_loaded": len(ROWS), "using_live_data": USING_LIVE_DATA}
    _replace_rows(rows, live=True)
    return {"ok": True, "rows_loaded": len(ROWS), "using_live_data": True}

@app.post("/api/rows/upload")
async def upload_rows(file: UploadFile = File(...)):
    if not file.filename or not file.filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are supported")
    content = await file.read()
    try:
        rows = rows_from_csv(content)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid CSV: {e}")
    _replace_rows(rows, live=False)
    return {"ok": True, "rows_loaded": len(rows)}

@app.post("/api/rows/load-sample")
def load_sample_rows():
    _replace_rows(list(SAMPLE_ROWS), live=False)
    return {"ok": True, "rows_loaded": len(ROWS)}

# ==================== Leads ====================

@app.get("/api/leads")
def list_leads(db: Session = Depends(get_db)):
    """Leads in first-seen order with their qualification flags."""
    dashboard = _dashboard(db)
    statuses = dashboard["leadStatuses"]
    return [
        {**lead, "status": statuses.get(lead["sessionId"], {"wanted": False, "retained": False})}
        for lead in dashboard["leads"]
    ]

@app.get("/api/leads/export.csv")
def export_leads(db: Session = Depends(get_db)):
    dashboard = _dashboard(db)
    body = leads_to_csv(dashboard["leads"], dashboard["leadStatuses"])
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=leads.csv"},
    )

@app.post("/api/leads/{session_id}/toggle/{flag}", response_model=LeadStatusModel)
def toggle_lead_status(session_id: str, flag: str, db: Session = Depends(get_db)):
    if flag not in STATUS_FLAGS:
        raise HTTPException(status_code=400, detail=f"Unknown flag: {flag}. Available: {list(STATUS_FLAGS)}")
    lead_ids = {lead["sessionId"] for lead in _dashboard(db)["leads"]}
    if session_id not in lead_ids:
        raise HTTPException(status_code=404, detail=f"No lead with session id '{session_id}'")
    store = SqlLeadStatusStore(db)
    updated = toggle_status(store.get_statuses(), session_id, flag)
    store.set_statuses(updated)
    return LeadStatusModel(**updated[session_id])

# ==================== Ad Spend ====================

@app.get("/api/ad-spend")
def get_ad_spend(db: Session = Depends(get_db)):
    return {"value": SqlLeadStatusStore(db).get_spend()}

@app.post("/api/ad-spend")
def set_ad_spend(update: AdSpendUpdate, db: Session = Depends(get_db)):
    """Unparseable or negative input stores 0."""
    return {"value": SqlLeadStatusStore(db).set_spend(update.value)}
