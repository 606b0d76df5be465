from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from journal_analytics.display_time import display_date
from journal_analytics.models import TradeRecord


@dataclass(frozen=True)
class TradeFilters:
    start_date: date | None = None
    end_date: date | None = None
    asset_type: str | None = None
    tag_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return (
            self.start_date is None
            and self.end_date is None
            and not self.asset_type
            and not self.tag_ids
        )


def filter_trades(trades: Iterable[TradeRecord] | None, filters: TradeFilters | None = None) -> list[TradeRecord]:
    """Return the trades matching every active filter.

    Date bounds are inclusive and compared against the display (UTC+8) day.
    Tags match when the trade carries any of the requested tag ids.
    """
    trade_list = list(trades or [])
    if filters is None or filters.is_empty:
        return trade_list
    filtered: list[TradeRecord] = []
    for trade in trade_list:
        if filters.start_date or filters.end_date:
            day = display_date(trade.trade_date)
            if day is None:
                continue
            if filters.start_date and day < filters.start_date:
                continue
            if filters.end_date and day > filters.end_date:
                continue
        if filters.asset_type and trade.asset_type != filters.asset_type:
            continue
        if filters.tag_ids and not filters.tag_ids.intersection(trade.tag_ids):
            continue
        filtered.append(trade)
    return filtered


def parse_filter_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None


def build_filters(
    *,
    start: str | None = None,
    end: str | None = None,
    asset_type: str | None = None,
    tags: Iterable[int | str] | None = None,
) -> TradeFilters:
    tag_ids: set[int] = set()
    for tag in tags or []:
        try:
            tag_ids.add(int(tag))
        except (TypeError, ValueError):
            continue
    return TradeFilters(
        start_date=parse_filter_date(start),
        end_date=parse_filter_date(end),
        asset_type=(asset_type or "").strip() or None,
        tag_ids=frozenset(tag_ids),
    )
