from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11
    import tomli as tomllib


@dataclass(frozen=True)
class AppSettings:
    trades_path: Path
    host: str
    port: int
    reload: bool
    log_level: str


@dataclass(frozen=True)
class AnalyticsSettings:
    pnl_drift_tolerance: float
    recent_trades: int


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    analytics: AnalyticsSettings


def load_app_config(path: Path | None = None) -> AppConfig:
    config_path = path or Path("config/app.toml")
    raw: Mapping[str, Any] = {}
    if config_path.exists():
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    app_raw = _section(raw, "app")
    analytics_raw = _section(raw, "analytics")

    app = AppSettings(
        trades_path=Path(app_raw.get("trades_path", "data/trades.json")),
        host=str(app_raw.get("host", "127.0.0.1")),
        port=int(app_raw.get("port", 8000)),
        reload=bool(app_raw.get("reload", False)),
        log_level=str(app_raw.get("log_level", "info")).strip().lower() or "info",
    )

    analytics = AnalyticsSettings(
        pnl_drift_tolerance=_float_or_default(analytics_raw.get("pnl_drift_tolerance"), 0.01),
        recent_trades=_int_or_default(analytics_raw.get("recent_trades"), 5),
    )

    return AppConfig(app=app, analytics=analytics)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _float_or_default(value: Any, default: float) -> float:
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _int_or_default(value: Any, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
