from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any, Iterable

from journal_analytics.display_time import to_display_string, utc_isoformat
from journal_analytics.metrics.calendar import (
    WEEKDAY_NAMES,
    daily_pnl,
    equity_curve,
    group_trades_by_month,
    group_trades_by_weekday,
)
from journal_analytics.metrics.summary import AggregateMetrics, compute_aggregate_metrics, sort_by_trade_date
from journal_analytics.metrics.trade import to_number, trade_risk_reward
from journal_analytics.models import TradeRecord


def summary_payload(metrics: AggregateMetrics) -> dict[str, Any]:
    return {key: json_number(value) for key, value in asdict(metrics).items()}


def build_summary(trades: Iterable[TradeRecord], *, recent: int = 5) -> dict[str, Any]:
    trade_list = list(trades)
    metrics = compute_aggregate_metrics(trade_list)
    recent_trades = list(reversed(sort_by_trade_date(trade_list)))[: max(recent, 0)]
    return {
        "summary": summary_payload(metrics),
        "equity_curve": equity_curve(trade_list),
        "daily_pnl": daily_pnl(trade_list),
        "outcomes": {
            "wins": metrics.wins,
            "losses": metrics.losses,
            "breakevens": metrics.breakevens,
        },
        "recent_trades": [trade_payload(trade) for trade in recent_trades],
    }


def build_calendar(trades: Iterable[TradeRecord]) -> dict[str, Any]:
    trade_list = list(trades)
    months = []
    for label, bucket in group_trades_by_month(trade_list).items():
        months.append(
            {
                "month": label,
                "trades": len(bucket["trades"]),
                "pnl": bucket["pnl"],
                "wins": bucket["wins"],
                "losses": bucket["losses"],
            }
        )
    weekdays = []
    for index, bucket in sorted(group_trades_by_weekday(trade_list).items()):
        weekdays.append({"weekday": index, "name": WEEKDAY_NAMES[index], **bucket})
    return {"daily_pnl": daily_pnl(trade_list), "months": months, "weekdays": weekdays}


def trade_payload(trade: TradeRecord) -> dict[str, Any]:
    return {
        "id": trade.trade_id,
        "asset_type": trade.asset_type,
        "asset_symbol": trade.asset_symbol,
        "direction": trade.direction,
        "entry_price": to_number(trade.entry_price),
        "exit_price": to_number(trade.exit_price),
        "position_size": to_number(trade.position_size),
        "fees": to_number(trade.fees),
        "pnl": to_number(trade.pnl),
        "pnl_percentage": to_number(trade.pnl_percentage),
        "risk_reward": trade_risk_reward(trade),
        "trade_date": utc_isoformat(trade.trade_date),
        "trade_date_display": to_display_string(trade.trade_date),
        "tag_ids": list(trade.tag_ids),
    }


def json_number(value: Any) -> Any:
    if isinstance(value, float) and math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value
