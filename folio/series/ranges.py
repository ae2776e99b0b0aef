"""Chart lookback ranges, their sampling resolutions and date labels."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum


class InvalidRequestError(ValueError):
    """A chart request is malformed and was rejected before any fetch."""


class ChartRange(str, Enum):
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"

    @classmethod
    def parse(cls, value: "ChartRange | str") -> "ChartRange":
        """Accept an enum member or its label (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            valid = ", ".join(r.value for r in cls)
            raise InvalidRequestError(f"Unknown chart range {value!r} (expected one of {valid})") from None

    @property
    def resolution(self) -> str:
        """Candle resolution: minutes as digits, or D / W."""
        return _RESOLUTIONS[self]

    @property
    def lookback_days(self) -> int | None:
        """Fixed lookback in days; None for year-to-date."""
        return _LOOKBACK_DAYS[self]

    def start_timestamp(self, now: datetime | None = None) -> int:
        """Unix seconds at the start of the range, relative to *now* (UTC)."""
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if self is ChartRange.YEAR_TO_DATE:
            start = datetime(now.year, 1, 1, tzinfo=now.tzinfo)
        else:
            start = now - timedelta(days=self.lookback_days)
        return int(start.timestamp())


_RESOLUTIONS = {
    ChartRange.ONE_DAY: "5",
    ChartRange.ONE_WEEK: "30",
    ChartRange.ONE_MONTH: "D",
    ChartRange.THREE_MONTHS: "D",
    ChartRange.SIX_MONTHS: "D",
    ChartRange.YEAR_TO_DATE: "D",
    ChartRange.ONE_YEAR: "D",
    ChartRange.FIVE_YEARS: "W",
}

_LOOKBACK_DAYS = {
    ChartRange.ONE_DAY: 1,
    ChartRange.ONE_WEEK: 7,
    ChartRange.ONE_MONTH: 30,
    ChartRange.THREE_MONTHS: 90,
    ChartRange.SIX_MONTHS: 180,
    ChartRange.YEAR_TO_DATE: None,
    ChartRange.ONE_YEAR: 365,
    ChartRange.FIVE_YEARS: 1825,
}


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"


def format_date_label(timestamp: float, chart_range: ChartRange | str) -> str:
    """Axis label for a sample timestamp (Unix seconds, rendered in UTC).

    1D → ``9:30 AM``; 1W/1M → ``Mar 5, 9:30 AM``; longer → ``Mar 5, 2026``.
    """
    rng = ChartRange.parse(chart_range)
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    if rng is ChartRange.ONE_DAY:
        return _clock(dt)
    day = f"{dt.strftime('%b')} {dt.day}"
    if rng in (ChartRange.ONE_WEEK, ChartRange.ONE_MONTH):
        return f"{day}, {_clock(dt)}"
    return f"{day}, {dt.year}"
