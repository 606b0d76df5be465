"""Hong Kong display time (UTC+8) <-> UTC storage instants.

The offset is fixed and does not depend on the host timezone. Display strings
use the ``<input type="datetime-local">`` shape ``YYYY-MM-DDTHH:mm``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

HK_OFFSET = timedelta(hours=8)
DISPLAY_FORMAT = "%Y-%m-%dT%H:%M"

_DISPLAY_RE = re.compile(
    r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:T(\d{1,2}):(\d{1,2})(?::(\d{1,2})(?:\.\d+)?)?)?$"
)


def to_display_string(value: datetime | str | None) -> str:
    if not value:
        return ""
    instant = as_utc(value)
    shifted = instant + HK_OFFSET
    return shifted.strftime(DISPLAY_FORMAT)


def from_display_string(text: str | None) -> datetime | None:
    if not text:
        return None
    match = _DISPLAY_RE.match(text.strip())
    if not match:
        raise ValueError(f"Invalid display time: {text}")
    year, month, day = (int(match.group(idx)) for idx in (1, 2, 3))
    hour = int(match.group(4) or 0)
    minute = int(match.group(5) or 0)
    second = int(match.group(6) or 0)
    # Out-of-range fields roll over: month 13 is next January, February 30
    # runs into March, and hour - 8 < 0 falls into the prior day.
    extra_years, month_index = divmod(month - 1, 12)
    base = datetime(year + extra_years, month_index + 1, 1, tzinfo=timezone.utc)
    return base + timedelta(days=day - 1, hours=hour - 8, minutes=minute, seconds=second)


def display_date(value: datetime | str | None) -> date | None:
    if not value:
        return None
    return (as_utc(value) + HK_OFFSET).date()


def display_now(now: datetime | None = None) -> str:
    return to_display_string(now or datetime.now(timezone.utc))


def utc_isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    instant = as_utc(value)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"


def parse_instant(value: datetime | str | int | float) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if value > 1e12 else float(value)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Unsupported timestamp format: {value}") from exc
    return as_utc(parsed)


def as_utc(value: datetime | str) -> datetime:
    if not isinstance(value, datetime):
        return parse_instant(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
