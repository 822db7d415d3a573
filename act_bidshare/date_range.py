"""
Statistics window - closed date range ending today in the account time zone.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class DateRange:
    start: date
    finish: date

    @property
    def days(self) -> int:
        return (self.finish - self.start).days + 1

    def as_gaql_condition(self) -> str:
        return f"segments.date BETWEEN '{self.start.isoformat()}' AND '{self.finish.isoformat()}'"

    def compact(self) -> Tuple[str, str]:
        """YYYYMMDD pair, the format Google Ads scripts use for getStatsFor()."""
        return (self.start.strftime("%Y%m%d"), self.finish.strftime("%Y%m%d"))

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.finish.isoformat()}"


def today_in(timezone: Optional[str]) -> date:
    """Current date in an IANA time zone (local date if None)."""
    if not timezone:
        return date.today()
    return datetime.now(ZoneInfo(timezone)).date()


def resolve_date_range(
    window_days: int,
    timezone: Optional[str] = None,
    today: Optional[date] = None,
) -> DateRange:
    """
    Window of `window_days` days ending today (inclusive):
    start = today - (window_days - 1), finish = today.
    """
    if window_days <= 0:
        raise ValueError(f"window_days must be > 0 (got {window_days})")

    finish = today if today is not None else today_in(timezone)
    start = finish - timedelta(days=window_days - 1)
    return DateRange(start=start, finish=finish)
