from datetime import date, datetime, timezone

from journal_analytics.filters import TradeFilters, build_filters, filter_trades
from journal_analytics.models import TradeRecord


def make_trade(trade_id, when, asset_type="stock", tags=()):
    return TradeRecord(
        trade_id=trade_id,
        pnl=1,
        trade_date=when,
        asset_type=asset_type,
        tag_ids=list(tags),
    )


TRADES = [
    make_trade("a", datetime(2025, 1, 1, 1, 0, tzinfo=timezone.utc), tags=[1]),
    # 2025-01-31 20:00 UTC falls on 2025-02-01 in display time.
    make_trade("b", datetime(2025, 1, 31, 20, 0, tzinfo=timezone.utc), asset_type="futures", tags=[2, 3]),
    make_trade("c", datetime(2025, 2, 15, 1, 0, tzinfo=timezone.utc)),
    make_trade("d", None),
]


def ids(trades):
    return [trade.trade_id for trade in trades]


def test_no_filters_returns_copy():
    result = filter_trades(TRADES)
    assert ids(result) == ["a", "b", "c", "d"]
    assert result is not TRADES


def test_date_range_is_inclusive_on_display_day():
    filters = TradeFilters(start_date=date(2025, 2, 1), end_date=date(2025, 2, 15))
    assert ids(filter_trades(TRADES, filters)) == ["b", "c"]


def test_asset_type_and_tags():
    assert ids(filter_trades(TRADES, TradeFilters(asset_type="futures"))) == ["b"]
    assert ids(filter_trades(TRADES, TradeFilters(tag_ids=frozenset({1, 3})))) == ["a", "b"]


def test_build_filters_ignores_bad_values():
    filters = build_filters(start="2025-02-01", end="garbage", asset_type="  ", tags=["2", "x"])
    assert filters.start_date == date(2025, 2, 1)
    assert filters.end_date is None
    assert filters.asset_type is None
    assert filters.tag_ids == frozenset({2})
