import json
from pathlib import Path

from journal_analytics import metrics_summary

TRADES = [
    {"id": 1, "trade_date": "2025-01-01T01:00:00Z", "pnl": 100, "entry_price": 100, "position_size": 10, "asset_type": "stock"},
    {"id": 2, "trade_date": "2025-01-02T01:00:00Z", "pnl": -50, "entry_price": 100, "position_size": 5, "asset_type": "futures"},
    {"id": 3, "trade_date": "2025-01-03T01:00:00Z", "pnl": 50, "entry_price": 100, "position_size": 5, "asset_type": "stock"},
]


def write_trades(tmp_path: Path) -> Path:
    path = tmp_path / "trades.json"
    path.write_text(json.dumps(TRADES), encoding="utf-8")
    return path


def test_json_output(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    trades_path = write_trades(tmp_path)
    out_path = tmp_path / "metrics.json"

    assert metrics_summary.main([str(trades_path), "--out", str(out_path)]) == 0

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["summary"]["total_trades"] == 3
    assert payload["summary"]["total_pnl"] == 100
    assert payload["summary"]["profit_factor"] == 3
    assert payload["summary"]["total_pnl_percentage"] == 5
    assert [point["value"] for point in payload["equity_curve"]] == [100, 50, 100]
    assert payload["calendar"]["months"][0]["month"] == "January 2025"


def test_text_output_with_filters(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    trades_path = write_trades(tmp_path)

    assert metrics_summary.main([str(trades_path), "--asset-type", "stock"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert "total_trades 2" in lines
    assert "profit_factor inf" in lines
    assert "expectancy 0" in lines


def test_missing_export(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert metrics_summary.main([str(tmp_path / "nope.json")]) == 1
