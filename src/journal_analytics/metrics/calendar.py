from __future__ import annotations

from typing import Any, Iterable

from journal_analytics.display_time import display_date
from journal_analytics.metrics.summary import pnl_of, sort_by_trade_date
from journal_analytics.models import TradeRecord

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def group_trades_by_date(trades: Iterable[TradeRecord] | None = None) -> dict[str, list[TradeRecord]]:
    groups: dict[str, list[TradeRecord]] = {}
    for trade in trades or []:
        day = display_date(trade.trade_date)
        if day is None:
            continue
        groups.setdefault(day.isoformat(), []).append(trade)
    return groups


def daily_pnl(trades: Iterable[TradeRecord] | None = None) -> list[dict[str, Any]]:
    grouped = group_trades_by_date(trades)
    return [
        {"date": day, "pnl": sum((pnl_of(trade) for trade in items), 0.0)}
        for day, items in grouped.items()
    ]


def group_trades_by_month(trades: Iterable[TradeRecord] | None = None) -> dict[str, dict[str, Any]]:
    groups: dict[str, dict[str, Any]] = {}
    for trade in trades or []:
        day = display_date(trade.trade_date)
        if day is None:
            continue
        label = f"{MONTH_NAMES[day.month - 1]} {day.year}"
        bucket = groups.setdefault(label, {"trades": [], "pnl": 0.0, "wins": 0, "losses": 0})
        value = pnl_of(trade)
        bucket["trades"].append(trade)
        bucket["pnl"] += value
        if value > 0:
            bucket["wins"] += 1
        elif value < 0:
            bucket["losses"] += 1
    return groups


def group_trades_by_weekday(trades: Iterable[TradeRecord] | None = None) -> dict[int, dict[str, Any]]:
    """Bucket by weekday index, 0 = Sunday through 6 = Saturday."""
    groups: dict[int, dict[str, Any]] = {}
    for trade in trades or []:
        day = display_date(trade.trade_date)
        if day is None:
            continue
        index = (day.weekday() + 1) % 7
        bucket = groups.setdefault(
            index, {"count": 0, "wins": 0, "losses": 0, "pnl": 0.0, "win_rate": 0.0}
        )
        value = pnl_of(trade)
        bucket["count"] += 1
        if value > 0:
            bucket["wins"] += 1
        elif value < 0:
            bucket["losses"] += 1
        bucket["pnl"] += value
        bucket["win_rate"] = bucket["wins"] / bucket["count"] * 100.0
    return groups


def equity_curve(trades: Iterable[TradeRecord] | None = None) -> list[dict[str, Any]]:
    points: list[dict[str, Any]] = []
    equity = 0.0
    for trade in sort_by_trade_date(trades):
        day = display_date(trade.trade_date)
        if day is None:
            continue
        equity += pnl_of(trade)
        label = day.isoformat()
        if points and points[-1]["date"] == label:
            points[-1]["value"] = equity
        else:
            points.append({"date": label, "value": equity})
    return points
