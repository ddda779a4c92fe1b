from unittest.mock import patch

from sqlalchemy.orm import sessionmaker

from leadfunnel import scheduler
from leadfunnel.db import create_db_engine
from leadfunnel.connectors.google_sheet import SheetFetchError
from leadfunnel.utils.dashboard_config import DashboardConfig


def _memory_db(monkeypatch):
    engine = create_db_engine("sqlite://")
    monkeypatch.setattr(scheduler, "engine", engine)
    monkeypatch.setattr(scheduler, "SessionLocal", sessionmaker(bind=engine))
    return engine


def test_summary_task_on_sample_rows(monkeypatch):
    _memory_db(monkeypatch)
    dashboard = scheduler.run_summary_task(DashboardConfig(), use_sample=True)
    assert dashboard["totalSessions"] == 5
    assert dashboard["leadMetrics"]["total"] == 1


def test_summary_task_fetches_configured_sheet(monkeypatch):
    _memory_db(monkeypatch)
    rows = [{"sessionId": "s1", "step": "1_started"}]
    with patch("leadfunnel.scheduler.fetch_rows", return_value=rows) as fetch:
        dashboard = scheduler.run_summary_task(DashboardConfig(sheet_id="sheet-1"))
    assert fetch.call_args[0][:2] == ("sheet-1", "Sheet1")
    assert dashboard["totalSessions"] == 1


def test_refresh_task_exit_codes(monkeypatch):
    monkeypatch.setattr(scheduler, "load_dashboard_config", lambda: DashboardConfig())
    assert scheduler.main(["--task", "refresh"]) == 1

    monkeypatch.setattr(scheduler, "load_dashboard_config", lambda: DashboardConfig(sheet_id="sheet-1"))
    with patch("leadfunnel.scheduler.fetch_rows", side_effect=SheetFetchError("down")):
        assert scheduler.main(["--task", "refresh"]) == 1
    with patch("leadfunnel.scheduler.fetch_rows", return_value=[{"sessionId": "a"}]):
        assert scheduler.main(["--task", "refresh"]) == 0
