"""
Google Sheets connector for the funnel tracking log.

The sheet is read through the public visualization endpoint
(``/gviz/tq?tqx=out:json``). Its body is JSON wrapped in a fixed JavaScript
callback, e.g.::

    /*O_o*/
    google.visualization.Query.setResponse({...});

so a fixed-length prefix and suffix are stripped before parsing. Headers come
from ``table.cols[].label`` and each row's cells from ``table.rows[].c[].v``.
"""

import json
import logging
from typing import Any, Dict, List
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

GVIZ_BASE_URL = "https://docs.google.com/spreadsheets/d"
DEFAULT_PREFIX_LEN = 47
DEFAULT_SUFFIX_LEN = 2


class SheetError(Exception):
    """Base error for sheet access."""


class SheetFormatError(SheetError):
    """The response body was not a parseable table envelope."""


class SheetFetchError(SheetError):
    """The HTTP request for the sheet failed."""


def build_sheet_url(sheet_id: str, sheet_name: str = "Sheet1") -> str:
    return f"{GVIZ_BASE_URL}/{sheet_id}/gviz/tq?tqx=out:json&sheet={quote(sheet_name)}"


def _cell_value(cell: Any) -> Any:
    if not isinstance(cell, dict):
        return ""
    value = cell.get("v")
    return "" if value is None else value


def parse_gviz_response(
    text: str,
    prefix_len: int = DEFAULT_PREFIX_LEN,
    suffix_len: int = DEFAULT_SUFFIX_LEN,
) -> List[Dict[str, Any]]:
    if len(text) <= prefix_len + suffix_len:
        raise SheetFormatError("Response too short to contain a table payload")
    body = text[prefix_len:len(text) - suffix_len]
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise SheetFormatError(f"Invalid table JSON: {exc}") from exc

    table = payload.get("table") if isinstance(payload, dict) else None
    if not isinstance(table, dict):
        raise SheetFormatError("Response has no table object")

    headers = [str((col or {}).get("label") or "") for col in table.get("cols") or []]
    rows: List[Dict[str, Any]] = []
    for raw_row in table.get("rows") or []:
        cells = (raw_row or {}).get("c") or []
        row: Dict[str, Any] = {}
        # Cells past the last header have no name to land under.
        for header, cell in zip(headers, cells):
            row[header] = _cell_value(cell)
        rows.append(row)
    return rows


def fetch_rows(
    sheet_id: str,
    sheet_name: str = "Sheet1",
    *,
    timeout: int = 30,
    prefix_len: int = DEFAULT_PREFIX_LEN,
    suffix_len: int = DEFAULT_SUFFIX_LEN,
) -> List[Dict[str, Any]]:
    """Fetch and parse the sheet. Raises SheetFetchError / SheetFormatError."""
    url = build_sheet_url(sheet_id, sheet_name)
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as exc:
        raise SheetFetchError(f"Sheet fetch failed: {exc}") from exc
    rows = parse_gviz_response(r.text, prefix_len=prefix_len, suffix_len=suffix_len)
    logger.info(f"Fetched {len(rows)} rows from sheet {sheet_id}/{sheet_name}")
    return rows
