from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Request

from journal_analytics.config.app_config import load_app_config
from journal_analytics.display_time import display_now, from_display_string, to_display_string, utc_isoformat
from journal_analytics.filters import TradeFilters, build_filters, filter_trades
from journal_analytics.ingest.journal_export import IngestResult, load_trades, load_trades_payload, normalize_trade
from journal_analytics.metrics.report import build_calendar, build_summary
from journal_analytics.metrics.trade import (
    compute_pnl,
    compute_pnl_percentage,
    compute_risk_reward,
)
from journal_analytics.models import TradeRecord, normalize_direction

logger = logging.getLogger(__name__)

app = FastAPI(title="Trade Journal Analytics")


@app.get("/api/summary")
def summary_api(request: Request) -> dict[str, Any]:
    trades = filter_trades(_load_journal_trades(), _parse_filters(request))
    app_config = load_app_config()
    return build_summary(trades, recent=app_config.analytics.recent_trades)


@app.get("/api/calendar")
def calendar_api(request: Request) -> dict[str, Any]:
    trades = filter_trades(_load_journal_trades(), _parse_filters(request))
    return build_calendar(trades)


@app.post("/api/metrics")
def metrics_api(request: Request, payload: Any = Body(...)) -> dict[str, Any]:
    result = _ingest_payload(payload)
    trades = filter_trades(result.trades, _parse_filters(request))
    app_config = load_app_config()
    response = build_summary(trades, recent=app_config.analytics.recent_trades)
    response["calendar"] = build_calendar(trades)
    response["skipped"] = result.skipped
    return response


@app.post("/api/trades/derive")
def derive_trade_api(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    display_value = payload.get("trade_date_display") or payload.get("tradeDateDisplay")
    try:
        trade_date = from_display_string(display_value) if display_value else None
        record = normalize_trade(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if trade_date is None:
        trade_date = record.trade_date
    direction = normalize_direction(record.direction)
    return {
        "direction": direction,
        "pnl": compute_pnl(
            record.entry_price,
            record.exit_price,
            record.position_size,
            record.point_value,
            direction,
            record.fees,
        ),
        "pnl_percentage": compute_pnl_percentage(record.entry_price, record.exit_price, direction),
        "risk_reward": compute_risk_reward(record.entry_price, record.stop_loss, record.take_profit),
        "trade_date": utc_isoformat(trade_date),
        "trade_date_display": to_display_string(trade_date),
    }


@app.get("/api/display-time")
def display_time_api() -> dict[str, str]:
    return {"now": display_now(), "timezone": "Asia/Hong_Kong", "utc_offset": "+08:00"}


def _load_journal_trades() -> list[TradeRecord]:
    app_config = load_app_config()
    trades_path = app_config.app.trades_path
    if not trades_path.exists():
        logger.info("Trades export %s not found; serving empty journal", trades_path)
        return []
    result = load_trades(trades_path)
    if result.skipped:
        logger.warning("Skipped %s rows loading %s", result.skipped, trades_path)
    return result.trades


def _ingest_payload(payload: Any) -> IngestResult:
    try:
        return load_trades_payload(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _parse_filters(request: Request) -> TradeFilters:
    params = request.query_params
    return build_filters(
        start=params.get("from"),
        end=params.get("to"),
        asset_type=params.get("asset_type"),
        tags=params.getlist("tag"),
    )


def main() -> None:
    import uvicorn

    app_config = load_app_config()
    logging.basicConfig(
        level=getattr(logging, app_config.app.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    uvicorn.run(
        "journal_analytics.web.app:app",
        host=app_config.app.host,
        port=app_config.app.port,
        reload=app_config.app.reload,
    )


if __name__ == "__main__":
    main()
