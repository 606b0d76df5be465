from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Iterable

from journal_analytics.config.app_config import load_app_config
from journal_analytics.display_time import utc_isoformat
from journal_analytics.ingest.journal_export import load_trades
from journal_analytics.metrics.trade import compute_pnl_percentage, to_number, trade_pnl
from journal_analytics.models import TradeRecord


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Report trades whose stored pnl no longer matches their prices.")
    parser.add_argument(
        "trades_path",
        type=Path,
        nargs="?",
        default=None,
        help="Path to journal trades export (json/csv/tsv).",
    )
    parser.add_argument("--tolerance", type=float, default=None, help="Allowed absolute pnl difference.")
    parser.add_argument("--out", type=Path, default=None, help="Write JSON report to a file.")
    parser.add_argument("--strict", action="store_true", help="Exit non-zero if any drift is found.")
    args = parser.parse_args(argv)

    app_config = load_app_config()
    trades_path = args.trades_path or app_config.app.trades_path
    tolerance = args.tolerance if args.tolerance is not None else app_config.analytics.pnl_drift_tolerance

    result = load_trades(trades_path)
    if result.skipped:
        print(f"Skipped {result.skipped} trade rows during normalization.", file=sys.stderr)

    report = find_pnl_drift(result.trades, tolerance=tolerance)

    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")

    print(f"trades {len(result.trades)}")
    print(f"pnl_drift {len(report['pnl_drift'])}")
    print(f"pnl_missing {len(report['pnl_missing'])}")
    for item in report["pnl_drift"]:
        print(
            f"  {item['trade_id'] or '-'} {item['trade_date'] or '-'} "
            f"stored={item['stored_pnl']:.6g} expected={item['expected_pnl']:.6g}"
        )

    if args.strict and (report["pnl_drift"] or report["pnl_missing"]):
        return 1
    return 0


def find_pnl_drift(trades: Iterable[TradeRecord], *, tolerance: float = 0.01) -> dict[str, list[dict[str, Any]]]:
    drift: list[dict[str, Any]] = []
    missing: list[dict[str, Any]] = []
    for trade in trades:
        expected = trade_pnl(trade)
        if trade.pnl is None:
            if expected:
                missing.append(_drift_issue(trade, 0.0, expected, "pnl_missing"))
            continue
        stored = to_number(trade.pnl)
        if abs(stored - expected) > tolerance:
            drift.append(_drift_issue(trade, stored, expected, "pnl_drift"))
    return {"pnl_drift": drift, "pnl_missing": missing}


def _drift_issue(trade: TradeRecord, stored: float, expected: float, reason: str) -> dict[str, Any]:
    return {
        "trade_id": trade.trade_id,
        "asset_symbol": trade.asset_symbol,
        "trade_date": utc_isoformat(trade.trade_date),
        "stored_pnl": stored,
        "expected_pnl": expected,
        "delta": stored - expected,
        "stored_pnl_percentage": to_number(trade.pnl_percentage),
        "expected_pnl_percentage": compute_pnl_percentage(trade.entry_price, trade.exit_price, trade.direction),
        "reason": reason,
    }


if __name__ == "__main__":
    raise SystemExit(main())
