from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

Number = float | int | str | None

DIRECTION_LONG = "long"
DIRECTION_SHORT = "short"


@dataclass
class TradeRecord:
    entry_price: Number = None
    exit_price: Number = None
    position_size: Number = None
    point_value: Number = 1
    direction: str = DIRECTION_LONG
    fees: Number = 0
    stop_loss: Number = None
    take_profit: Number = None
    trade_date: datetime | None = None
    pnl: Number = None
    pnl_percentage: Number = None
    trade_id: str | None = None
    asset_type: str | None = None
    asset_symbol: str | None = None
    notes: str | None = None
    tag_ids: list[int] = field(default_factory=list)


def normalize_direction(value: Any) -> str:
    if value is None:
        return DIRECTION_LONG
    text = str(value).strip().lower()
    if text in {"short", "s", "sell"}:
        return DIRECTION_SHORT
    return DIRECTION_LONG
