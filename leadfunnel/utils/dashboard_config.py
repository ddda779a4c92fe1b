from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List

from ..connectors.google_sheet import DEFAULT_PREFIX_LEN, DEFAULT_SUFFIX_LEN
from ..services_funnel import DEFAULT_FUNNEL_STAGES, FunnelStage, validate_stages

logger = logging.getLogger(__name__)


@dataclass
class DashboardConfig:
    """Where the tracking log lives and how the funnel maps onto its step labels."""

    sheet_id: str = ""
    sheet_name: str = "Sheet1"
    refresh_interval_seconds: int = 60
    request_timeout_seconds: int = 30
    prefix_len: int = DEFAULT_PREFIX_LEN
    suffix_len: int = DEFAULT_SUFFIX_LEN
    stages: List[FunnelStage] = field(default_factory=lambda: list(DEFAULT_FUNNEL_STAGES))


_BASE_DIR = Path(__file__).resolve().parent.parent


def _config_path() -> Path:
    data_dir = _BASE_DIR / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "dashboard_config.json"


def default_dashboard_config() -> DashboardConfig:
    return DashboardConfig()


def _apply_env(cfg: DashboardConfig) -> DashboardConfig:
    sheet_id = os.getenv("LEADFUNNEL_SHEET_ID")
    if sheet_id:
        cfg.sheet_id = sheet_id
    sheet_name = os.getenv("LEADFUNNEL_SHEET_NAME")
    if sheet_name:
        cfg.sheet_name = sheet_name
    return cfg


def _from_dict(raw: dict) -> DashboardConfig:
    if not isinstance(raw, dict):
        raise ValueError("dashboard config must be a JSON object")
    stages_raw = raw.get("stages")
    stages = [FunnelStage(**s) for s in stages_raw] if stages_raw else list(DEFAULT_FUNNEL_STAGES)
    validate_stages(stages)
    defaults = DashboardConfig()
    return DashboardConfig(
        sheet_id=str(raw.get("sheet_id", defaults.sheet_id)),
        sheet_name=str(raw.get("sheet_name", defaults.sheet_name)),
        refresh_interval_seconds=int(raw.get("refresh_interval_seconds", defaults.refresh_interval_seconds)),
        request_timeout_seconds=int(raw.get("request_timeout_seconds", defaults.request_timeout_seconds)),
        prefix_len=int(raw.get("prefix_len", defaults.prefix_len)),
        suffix_len=int(raw.get("suffix_len", defaults.suffix_len)),
        stages=stages,
    )


def load_dashboard_config() -> DashboardConfig:
    path = _config_path()
    if not path.exists():
        cfg = default_dashboard_config()
        save_dashboard_config(cfg)
        return _apply_env(cfg)
    try:
        cfg = _from_dict(json.loads(path.read_text()))
    except (ValueError, TypeError) as exc:
        logger.warning(f"Ignoring unreadable dashboard config at {path}: {exc}")
        cfg = default_dashboard_config()
    return _apply_env(cfg)


def save_dashboard_config(cfg: DashboardConfig) -> None:
    validate_stages(cfg.stages)
    path = _config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(cfg)
    path.write_text(json.dumps(payload, indent=2))
