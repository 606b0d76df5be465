import pytest

from journal_analytics.metrics.trade import (
    apply_derived_fields,
    compute_pnl,
    compute_pnl_percentage,
    compute_risk_reward,
    to_number,
)
from journal_analytics.models import TradeRecord


def test_compute_pnl_long_and_short():
    assert compute_pnl(100, 110, 10, 1, "long", 0) == 100
    assert compute_pnl(100, 110, 10, 1, "short", 0) == -100


def test_compute_pnl_applies_point_value_and_fees():
    assert compute_pnl(100, 110, 10, 50, "long", 5) == 4995


def test_compute_pnl_zero_entry_is_treated_as_missing():
    assert compute_pnl(0, 110, 10) == 0
    assert compute_pnl(100, None, 10) == 0
    assert compute_pnl(100, 110, "") == 0


def test_compute_pnl_coerces_form_strings():
    assert compute_pnl("100", "110", "10") == 100
    assert compute_pnl(" 100 ", "110", "10", "2", "short", "1.5") == -201.5


def test_compute_pnl_non_numeric_input_is_falsy():
    assert compute_pnl(100, "abc", 10) == 0
    assert compute_pnl(float("nan"), 110, 10) == 0


def test_compute_pnl_missing_point_value_defaults_to_one():
    assert compute_pnl(100, 110, 10, None) == 100


def test_compute_pnl_percentage():
    assert compute_pnl_percentage(100, 90, "long") == -10
    assert compute_pnl_percentage(100, 90, "short") == 10
    assert compute_pnl_percentage(0, 90) == 0


def test_compute_pnl_percentage_ignores_size_and_fees():
    assert compute_pnl_percentage("200", "250") == pytest.approx(25.0)


def test_compute_risk_reward():
    assert compute_risk_reward(100, 90, 130) == 3
    assert compute_risk_reward(100, 110, 70) == 3
    assert compute_risk_reward(100, 100, 130) == 0
    assert compute_risk_reward(100, None, 130) == 0


def test_to_number_defaults():
    assert to_number(None) == 0.0
    assert to_number("") == 0.0
    assert to_number("1e3") == 1000.0
    assert to_number("bad", default=1.0) == 1.0


def test_apply_derived_fields_recomputes_stale_values():
    trade = TradeRecord(
        entry_price=100,
        exit_price=90,
        position_size=2,
        direction="SHORT",
        pnl=999,
        pnl_percentage=1,
    )

    derived = apply_derived_fields(trade)

    assert derived.pnl == 20
    assert derived.pnl_percentage == 10
    assert derived.direction == "short"
    assert trade.pnl == 999
