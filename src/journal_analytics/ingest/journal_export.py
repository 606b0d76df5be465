from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from journal_analytics.display_time import parse_instant
from journal_analytics.models import TradeRecord, normalize_direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    trades: list[TradeRecord]
    skipped: int = 0


def load_trades(path: str | Path) -> IngestResult:
    source_path = Path(path)
    suffix = source_path.suffix.lower()
    if suffix == ".json":
        return _load_trades_json(source_path)
    if suffix in {".csv", ".tsv"}:
        return _load_trades_csv(source_path, delimiter="\t" if suffix == ".tsv" else ",")
    raise ValueError(f"Unsupported file type: {source_path.suffix}")


def load_trades_payload(payload: Any) -> IngestResult:
    records = _extract_records(payload)
    trades, skipped = _normalize_records(records)
    return IngestResult(trades=trades, skipped=skipped)


def _load_trades_json(path: Path) -> IngestResult:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return load_trades_payload(payload)


def _load_trades_csv(path: Path, delimiter: str) -> IngestResult:
    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle, delimiter=delimiter)
        trades, skipped = _normalize_records(reader)
    return IngestResult(trades=trades, skipped=skipped)


def _extract_records(payload: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("trades", "data", "result"):
            if key in payload and isinstance(payload[key], list):
                return payload[key]
    raise ValueError("Unsupported JSON format for trades payload")


def _normalize_records(records: Iterable[Mapping[str, Any]]) -> tuple[list[TradeRecord], int]:
    trades: list[TradeRecord] = []
    skipped = 0
    for index, raw in enumerate(records):
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        try:
            trades.append(normalize_trade(raw))
        except ValueError as exc:
            logger.debug("Skipping trade row %s: %s", index, exc)
            skipped += 1
    if skipped:
        logger.warning("Skipped %s trade rows during normalization", skipped)
    return trades, skipped


def normalize_trade(raw: Mapping[str, Any]) -> TradeRecord:
    """Build a record from a journal row, keeping numeric fields as given.

    Numeric coercion happens in the metrics functions, so string prices from
    form fields and CSV cells are passed through untouched.
    """
    trade_date_raw = _pick(raw, "trade_date", "tradeDate", "date")
    trade_date = parse_instant(trade_date_raw) if trade_date_raw is not None else None
    trade_id = _pick(raw, "id", "trade_id", "tradeId")
    point_value = _pick(raw, "point_value", "pointValue")
    fees = _pick(raw, "fees", "fee", "commission")
    return TradeRecord(
        entry_price=_pick(raw, "entry_price", "entryPrice"),
        exit_price=_pick(raw, "exit_price", "exitPrice"),
        position_size=_pick(raw, "position_size", "positionSize", "size", "quantity"),
        point_value=1 if point_value is None else point_value,
        direction=normalize_direction(_pick(raw, "direction", "side")),
        fees=0 if fees is None else fees,
        stop_loss=_pick(raw, "stop_loss", "stopLoss"),
        take_profit=_pick(raw, "take_profit", "takeProfit"),
        trade_date=trade_date,
        pnl=_pick(raw, "pnl"),
        pnl_percentage=_pick(raw, "pnl_percentage", "pnlPercentage"),
        trade_id=str(trade_id) if trade_id is not None else None,
        asset_type=_str_or_none(_pick(raw, "asset_type", "assetType")),
        asset_symbol=_str_or_none(_pick(raw, "asset_symbol", "assetSymbol", "symbol")),
        notes=_str_or_none(_pick(raw, "notes")),
        tag_ids=_tag_ids(raw),
    )


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _tag_ids(raw: Mapping[str, Any]) -> list[int]:
    value = _pick(raw, "tag_ids", "tagIds", "tags")
    if value is None:
        return []
    if isinstance(value, str):
        items: list[Any] = [part for part in value.replace(";", ",").split(",") if part.strip()]
    elif isinstance(value, list):
        items = value
    else:
        return []
    output: list[int] = []
    for item in items:
        # Nested rows from the trade_tags join carry {"tag_id": ..., "tag": {...}}.
        if isinstance(item, Mapping):
            item = item.get("tag_id", item.get("id"))
        try:
            output.append(int(str(item).strip()))
        except (TypeError, ValueError):
            continue
    return output
