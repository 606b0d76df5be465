import json
from pathlib import Path

from journal_analytics import verify
from journal_analytics.models import TradeRecord


def make_trade(pnl, **kwargs):
    fields = {"entry_price": 100, "exit_price": 110, "position_size": 10}
    fields.update(kwargs)
    return TradeRecord(pnl=pnl, **fields)


def test_find_pnl_drift_reports_stale_and_missing_values():
    trades = [
        make_trade(100, trade_id="ok"),
        make_trade(50, trade_id="stale"),
        make_trade(None, trade_id="missing"),
        TradeRecord(trade_id="no-prices"),
    ]

    report = verify.find_pnl_drift(trades, tolerance=0.01)

    assert [item["trade_id"] for item in report["pnl_drift"]] == ["stale"]
    assert report["pnl_drift"][0]["expected_pnl"] == 100
    assert report["pnl_drift"][0]["delta"] == -50
    assert [item["trade_id"] for item in report["pnl_missing"]] == ["missing"]


def test_tolerance_absorbs_rounding():
    report = verify.find_pnl_drift([make_trade("100.004")], tolerance=0.01)
    assert report["pnl_drift"] == []


def test_main_strict_exit_code(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    trades_path = tmp_path / "trades.json"
    trades_path.write_text(
        json.dumps([{"entry_price": 100, "exit_price": 110, "position_size": 10, "pnl": 1}]),
        encoding="utf-8",
    )
    out_path = tmp_path / "out" / "report.json"

    assert verify.main([str(trades_path), "--out", str(out_path)]) == 0
    assert verify.main([str(trades_path), "--strict"]) == 1
    report = json.loads(out_path.read_text(encoding="utf-8"))
    assert len(report["pnl_drift"]) == 1
