"""
One-shot tasks for the lead funnel dashboard.

Refresh cadence is owned by whatever invokes this (cron, a container
healthcheck loop); each run fetches once and logs what it computed.

Usage:
    python -m leadfunnel.scheduler --task refresh
    python -m leadfunnel.scheduler --task summary --sample
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .connectors.google_sheet import SheetError, fetch_rows
from .db import SessionLocal, engine, init_db
from .sample_rows import SAMPLE_ROWS
from .services_analytics import build_dashboard
from .services_lead_status import SqlLeadStatusStore
from .utils.dashboard_config import DashboardConfig, load_dashboard_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _load_rows(cfg: DashboardConfig, use_sample: bool) -> List[Dict[str, Any]]:
    if use_sample or not cfg.sheet_id:
        logger.info("Using bundled sample rows")
        return list(SAMPLE_ROWS)
    return fetch_rows(
        cfg.sheet_id,
        cfg.sheet_name,
        timeout=cfg.request_timeout_seconds,
        prefix_len=cfg.prefix_len,
        suffix_len=cfg.suffix_len,
    )


def run_summary_task(cfg: DashboardConfig, use_sample: bool = False) -> Dict[str, Any]:
    rows = _load_rows(cfg, use_sample)
    init_db(engine)
    db = SessionLocal()
    try:
        store = SqlLeadStatusStore(db)
        dashboard = build_dashboard(rows, store.get_statuses(), store.get_spend(), cfg.stages)
    finally:
        db.close()

    funnel = dashboard["funnel"]
    metrics = dashboard["leadMetrics"]
    costs = dashboard["costMetrics"]
    logger.info(f"Sessions: {dashboard['totalSessions']} | rows: {len(rows)}")
    logger.info("Funnel: " + ", ".join(f"{k}={v}" for k, v in funnel.items()))
    top = dashboard["rankedDropoffs"][0]
    if top["count"]:
        logger.info(f"Largest drop-off: {top['description']} ({top['count']})")
    logger.info(
        f"Leads: {metrics['total']} | wanted {metrics['wanted']} ({metrics['wantedRate']}%)"
        f" | retained {metrics['retained']} ({metrics['retainedRate']}%)"
    )
    if costs["spend"] > 0:
        logger.info(
            f"Cost per lead {costs['costPerLead']} | per wanted {costs['costPerWanted']}"
            f" | per case {costs['costPerCase']}"
        )
    return dashboard


def run_refresh_task(cfg: DashboardConfig) -> int:
    """Fetch once and report the row count; raises on fetch failure."""
    if not cfg.sheet_id:
        raise ValueError("No sheet configured. Set LEADFUNNEL_SHEET_ID or sheet_id in the dashboard config.")
    rows = fetch_rows(
        cfg.sheet_id,
        cfg.sheet_name,
        timeout=cfg.request_timeout_seconds,
        prefix_len=cfg.prefix_len,
        suffix_len=cfg.suffix_len,
    )
    logger.info(f"Refresh completed: {len(rows)} rows")
    return len(rows)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Lead funnel dashboard tasks")
    parser.add_argument("--task", choices=["refresh", "summary"], required=True)
    parser.add_argument("--sample", action="store_true", help="Use bundled sample rows instead of the sheet")
    args = parser.parse_args(argv)

    cfg = load_dashboard_config()
    try:
        if args.task == "refresh":
            run_refresh_task(cfg)
        else:
            run_summary_task(cfg, use_sample=args.sample)
    except (SheetError, ValueError) as e:
        logger.error(f"Task {args.task} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
