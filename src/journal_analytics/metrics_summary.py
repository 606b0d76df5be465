from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from journal_analytics.config.app_config import load_app_config
from journal_analytics.filters import build_filters, filter_trades
from journal_analytics.ingest.journal_export import load_trades
from journal_analytics.metrics.report import build_calendar, build_summary
from journal_analytics.metrics.summary import AggregateMetrics, compute_aggregate_metrics


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compute aggregate trade metrics from a journal export.")
    parser.add_argument(
        "trades_path",
        type=Path,
        nargs="?",
        default=None,
        help="Path to journal trades export (json/csv/tsv).",
    )
    parser.add_argument("--from", dest="start", type=str, default=None, help="First display day (YYYY-MM-DD).")
    parser.add_argument("--to", dest="end", type=str, default=None, help="Last display day (YYYY-MM-DD).")
    parser.add_argument("--asset-type", type=str, default=None, help="Only include this asset type.")
    parser.add_argument(
        "--tag",
        dest="tags",
        type=int,
        action="append",
        default=[],
        help="Only include trades carrying this tag id (repeatable).",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON output.")
    parser.add_argument("--out", type=Path, default=None, help="Write output to a file instead of stdout.")
    args = parser.parse_args(argv)

    app_config = load_app_config()
    trades_path = args.trades_path or app_config.app.trades_path
    if not trades_path.exists():
        print(f"Trades export not found: {trades_path}", file=sys.stderr)
        return 1

    result = load_trades(trades_path)
    if result.skipped:
        print(f"Skipped {result.skipped} trade rows during normalization.", file=sys.stderr)

    filters = build_filters(start=args.start, end=args.end, asset_type=args.asset_type, tags=args.tags)
    trades = filter_trades(result.trades, filters)

    if args.json or (args.out is not None and args.out.suffix.lower() == ".json"):
        payload = build_summary(trades, recent=app_config.analytics.recent_trades)
        payload["calendar"] = build_calendar(trades)
        text = json.dumps(payload, indent=2, sort_keys=True)
    else:
        text = _format_metrics(compute_aggregate_metrics(trades))

    if args.out is None:
        print(text)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")

    return 0


def _format_metrics(metrics: AggregateMetrics) -> str:
    lines = [
        f"total_trades {metrics.total_trades}",
        f"wins {metrics.wins}",
        f"losses {metrics.losses}",
        f"breakevens {metrics.breakevens}",
        f"total_pnl {_format_float(metrics.total_pnl)}",
        f"total_pnl_percentage {_format_float(metrics.total_pnl_percentage)}",
        f"win_rate {_format_float(metrics.win_rate)}",
        f"profit_factor {_format_float(metrics.profit_factor)}",
        f"average_win {_format_float(metrics.average_win)}",
        f"average_loss {_format_float(metrics.average_loss)}",
        f"best_win {_format_float(metrics.best_win)}",
        f"worst_loss {_format_float(metrics.worst_loss)}",
        f"expectancy {_format_float(metrics.expectancy)}",
        f"max_drawdown {_format_float(metrics.max_drawdown)}",
        f"max_consecutive_wins {metrics.max_consecutive_wins}",
        f"max_consecutive_losses {metrics.max_consecutive_losses}",
    ]
    return "\n".join(lines)


def _format_float(value: float) -> str:
    return f"{value:.6g}"


if __name__ == "__main__":
    raise SystemExit(main())
