from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from journal_analytics.display_time import as_utc
from journal_analytics.metrics.trade import to_number
from journal_analytics.models import TradeRecord

_MISSING_DATE = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class AggregateMetrics:
    total_trades: int
    wins: int
    losses: int
    breakevens: int
    total_pnl: float
    win_rate: float
    profit_factor: float
    average_win: float
    average_loss: float
    best_win: float
    worst_loss: float
    expectancy: float
    max_drawdown: float
    max_consecutive_wins: int
    max_consecutive_losses: int
    total_pnl_percentage: float


def compute_aggregate_metrics(trades: Iterable[TradeRecord] | None = None) -> AggregateMetrics:
    trade_list = list(trades or [])
    outcomes = outcome_counts(trade_list)
    return AggregateMetrics(
        total_trades=len(trade_list),
        wins=outcomes["wins"],
        losses=outcomes["losses"],
        breakevens=outcomes["breakevens"],
        total_pnl=total_pnl(trade_list),
        win_rate=win_rate(trade_list),
        profit_factor=profit_factor(trade_list),
        average_win=average_win(trade_list),
        average_loss=average_loss(trade_list),
        best_win=best_win(trade_list),
        worst_loss=worst_loss(trade_list),
        expectancy=expectancy(trade_list),
        max_drawdown=max_drawdown(trade_list),
        max_consecutive_wins=max_consecutive_wins(trade_list),
        max_consecutive_losses=max_consecutive_losses(trade_list),
        total_pnl_percentage=total_pnl_percentage(trade_list),
    )


def pnl_of(trade: TradeRecord) -> float:
    return to_number(trade.pnl)


def total_pnl(trades: Iterable[TradeRecord] | None = None) -> float:
    return sum((pnl_of(trade) for trade in trades or []), 0.0)


def win_rate(trades: Iterable[TradeRecord] | None = None) -> float:
    trade_list = list(trades or [])
    if not trade_list:
        return 0.0
    wins = sum(1 for trade in trade_list if pnl_of(trade) > 0)
    return wins / len(trade_list) * 100.0


def profit_factor(trades: Iterable[TradeRecord] | None = None) -> float:
    values = [pnl_of(trade) for trade in trades or []]
    total_wins = sum((value for value in values if value > 0), 0.0)
    total_losses = abs(sum((value for value in values if value < 0), 0.0))
    if total_losses == 0:
        return float("inf") if total_wins > 0 else 0.0
    return total_wins / total_losses


def average_win(trades: Iterable[TradeRecord] | None = None) -> float:
    return _mean([value for value in _pnls(trades) if value > 0])


def average_loss(trades: Iterable[TradeRecord] | None = None) -> float:
    return _mean([value for value in _pnls(trades) if value < 0])


def best_win(trades: Iterable[TradeRecord] | None = None) -> float:
    return max(_pnls(trades), default=0.0)


def worst_loss(trades: Iterable[TradeRecord] | None = None) -> float:
    return min(_pnls(trades), default=0.0)


def expectancy(trades: Iterable[TradeRecord] | None = None) -> float:
    trade_list = list(trades or [])
    if not trade_list:
        return 0.0
    rate = win_rate(trade_list) / 100.0
    avg_win = average_win(trade_list)
    avg_loss = abs(average_loss(trade_list))
    # No losing trades reports zero, not the win-only expectancy.
    if avg_loss == 0:
        return 0.0
    return rate * avg_win - (1.0 - rate) * avg_loss


def max_drawdown(trades: Iterable[TradeRecord] | None = None) -> float:
    """Largest single-step drop against the running peak.

    The peak only ever grows by a trade's pnl (``max(peak, peak + pnl)``), so
    each step's drawdown is ``peak - (peak + pnl)``. This is not the textbook
    running-equity drawdown and must stay that way for the reported figures
    to match historic dashboards.
    """
    peak = 0.0
    max_dd = 0.0
    for trade in sort_by_trade_date(trades):
        pnl = pnl_of(trade)
        peak = max(peak, peak + pnl)
        drawdown = peak - (peak + pnl)
        max_dd = max(max_dd, drawdown)
    return max_dd


def max_consecutive_wins(trades: Iterable[TradeRecord] | None = None) -> int:
    return _longest_run(trades, lambda value: value > 0)


def max_consecutive_losses(trades: Iterable[TradeRecord] | None = None) -> int:
    return _longest_run(trades, lambda value: value < 0)


def total_pnl_percentage(trades: Iterable[TradeRecord] | None = None) -> float:
    trade_list = list(trades or [])
    if not trade_list:
        return 0.0
    invested = sum(
        (to_number(trade.entry_price) * to_number(trade.position_size) for trade in trade_list),
        0.0,
    )
    if invested == 0:
        return 0.0
    return total_pnl(trade_list) / invested * 100.0


def outcome_counts(trades: Iterable[TradeRecord] | None = None) -> dict[str, int]:
    wins = 0
    losses = 0
    breakevens = 0
    for trade in trades or []:
        value = pnl_of(trade)
        if value > 0:
            wins += 1
        elif value < 0:
            losses += 1
        elif trade.pnl is not None:
            breakevens += 1
    return {"wins": wins, "losses": losses, "breakevens": breakevens}


def sort_by_trade_date(trades: Iterable[TradeRecord] | None) -> list[TradeRecord]:
    return sorted(trades or [], key=_trade_date_key)


def _trade_date_key(trade: TradeRecord) -> datetime:
    if not trade.trade_date:
        return _MISSING_DATE
    return as_utc(trade.trade_date)


def _longest_run(trades: Iterable[TradeRecord] | None, predicate) -> int:
    longest = 0
    current = 0
    for trade in sort_by_trade_date(trades):
        if predicate(pnl_of(trade)):
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _pnls(trades: Iterable[TradeRecord] | None) -> list[float]:
    return [pnl_of(trade) for trade in trades or []]


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)
