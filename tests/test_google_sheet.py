import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from leadfunnel.connectors.google_sheet import (
    DEFAULT_PREFIX_LEN,
    SheetFetchError,
    SheetFormatError,
    build_sheet_url,
    fetch_rows,
    parse_gviz_response,
)

PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
SUFFIX = ");"


def _wrap(payload):
    return PREFIX + json.dumps(payload) + SUFFIX


def _table():
    return {
        "version": "0.6",
        "status": "ok",
        "table": {
            "cols": [
                {"id": "A", "label": "sessionId", "type": "string"},
                {"id": "B", "label": "step", "type": "string"},
                {"id": "C", "label": "Current Rating", "type": "number"},
                {"id": "D", "type": "string"},
            ],
            "rows": [
                {"c": [{"v": "abc123"}, {"v": "1_started"}, {"v": 0.0}, None]},
                {"c": [{"v": "abc123"}, None, {"v": 30.0}, {"v": None}]},
                {"c": [{"v": "def456"}]},
            ],
        },
    }


def test_prefix_length_matches_gviz_wrapper():
    assert len(PREFIX) == DEFAULT_PREFIX_LEN


def test_parse_gviz_response_maps_headers_and_nulls():
    rows = parse_gviz_response(_wrap(_table()))
    assert rows[0] == {"sessionId": "abc123", "step": "1_started", "Current Rating": 0.0, "": ""}
    assert rows[1] == {"sessionId": "abc123", "step": "", "Current Rating": 30.0, "": ""}
    assert rows[2] == {"sessionId": "def456"}


def test_parse_gviz_response_empty_table():
    rows = parse_gviz_response(_wrap({"table": {"cols": [{"label": "sessionId"}], "rows": []}}))
    assert rows == []


def test_parse_gviz_response_rejects_malformed_bodies():
    with pytest.raises(SheetFormatError):
        parse_gviz_response("short")
    with pytest.raises(SheetFormatError):
        parse_gviz_response(PREFIX + "{not json" + SUFFIX)
    with pytest.raises(SheetFormatError):
        parse_gviz_response(_wrap({"status": "error"}))


def test_build_sheet_url_quotes_sheet_name():
    url = build_sheet_url("sheet-1", "My Sheet")
    assert url.startswith("https://docs.google.com/spreadsheets/d/sheet-1/gviz/tq?tqx=out:json")
    assert url.endswith("sheet=My%20Sheet")


def test_fetch_rows_success():
    resp = MagicMock()
    resp.text = _wrap(_table())
    resp.raise_for_status.return_value = None
    with patch("leadfunnel.connectors.google_sheet.requests.get", return_value=resp) as get:
        rows = fetch_rows("sheet-1", "Sheet1", timeout=5)
    assert len(rows) == 3
    args, kwargs = get.call_args
    assert "sheet-1" in args[0]
    assert kwargs["timeout"] == 5


def test_fetch_rows_wraps_request_errors():
    with patch("leadfunnel.connectors.google_sheet.requests.get", side_effect=requests.ConnectionError("boom")):
        with pytest.raises(SheetFetchError):
            fetch_rows("sheet-1")


def test_fetch_rows_wraps_http_errors():
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
    with patch("leadfunnel.connectors.google_sheet.requests.get", return_value=resp):
        with pytest.raises(SheetFetchError):
            fetch_rows("sheet-1")
