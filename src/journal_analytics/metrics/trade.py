from __future__ import annotations

import math
from dataclasses import replace
from typing import Any

from journal_analytics.models import DIRECTION_LONG, DIRECTION_SHORT, TradeRecord, normalize_direction


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce form and storage values to float.

    Missing, blank, non-numeric and NaN values all collapse to ``default`` so
    they behave like any other falsy input downstream.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


def compute_pnl(
    entry_price: Any,
    exit_price: Any,
    position_size: Any,
    point_value: Any = 1,
    direction: str = DIRECTION_LONG,
    fees: Any = 0,
) -> float:
    entry = to_number(entry_price)
    exit_ = to_number(exit_price)
    size = to_number(position_size)
    if not entry or not exit_ or not size:
        return 0.0

    multiplier = to_number(point_value, default=1.0)
    fee_total = to_number(fees)
    if normalize_direction(direction) == DIRECTION_SHORT:
        return (entry - exit_) * size * multiplier - fee_total
    return (exit_ - entry) * size * multiplier - fee_total


def compute_pnl_percentage(entry_price: Any, exit_price: Any, direction: str = DIRECTION_LONG) -> float:
    entry = to_number(entry_price)
    exit_ = to_number(exit_price)
    if not entry or not exit_:
        return 0.0
    if normalize_direction(direction) == DIRECTION_SHORT:
        return (entry - exit_) / entry * 100.0
    return (exit_ - entry) / entry * 100.0


def compute_risk_reward(entry_price: Any, stop_loss: Any, take_profit: Any) -> float:
    entry = to_number(entry_price)
    stop = to_number(stop_loss)
    target = to_number(take_profit)
    if not entry or not stop or not target:
        return 0.0
    risk = abs(entry - stop)
    if risk == 0:
        return 0.0
    return abs(target - entry) / risk


def trade_pnl(trade: TradeRecord) -> float:
    return compute_pnl(
        trade.entry_price,
        trade.exit_price,
        trade.position_size,
        trade.point_value,
        trade.direction,
        trade.fees,
    )


def trade_risk_reward(trade: TradeRecord) -> float:
    return compute_risk_reward(trade.entry_price, trade.stop_loss, trade.take_profit)


def apply_derived_fields(trade: TradeRecord) -> TradeRecord:
    """Return a copy with ``pnl`` and ``pnl_percentage`` recomputed from prices.

    Aggregates read the stored ``pnl``; call this whenever prices, size, fees
    or direction change so the stored value never goes stale.
    """
    return replace(
        trade,
        direction=normalize_direction(trade.direction),
        pnl=trade_pnl(trade),
        pnl_percentage=compute_pnl_percentage(trade.entry_price, trade.exit_price, trade.direction),
    )
