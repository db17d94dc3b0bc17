import calendar
import math
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, datetime, timezone
from typing import TYPE_CHECKING, Dict, Optional, Tuple

if TYPE_CHECKING:
    from .model import Configuration

SECONDS_PER_HOUR = 3600
MINUTES_PER_DAY = 1440


@dataclass(frozen=True)
class CalendarSpan:
    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0


@dataclass(frozen=True)
class DerivedData:
    """Everything the bars and the header need for one instant.

    ``progress`` maps a scale label to a (numerator, denominator) pair counted
    in a finer calendar unit than the scale itself, so that months of
    different lengths and leap years come out right.
    """

    configured: bool
    end_instant: Optional[datetime]
    elapsed: CalendarSpan
    remaining: CalendarSpan
    elapsed_seconds: int
    remaining_seconds: int
    life_seconds: int
    progress: Dict[str, Tuple[int, int]] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "DerivedData":
        return cls(
            configured=False,
            end_instant=None,
            elapsed=CalendarSpan(),
            remaining=CalendarSpan(),
            elapsed_seconds=0,
            remaining_seconds=0,
            life_seconds=0,
            progress={},
        )


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _clamp_day(year: int, month: int, day: int) -> int:
    last = days_in_month(year, month)
    return min(day, last)


def add_years(dt: datetime, years: int) -> datetime:
    year = max(MINYEAR, min(MAXYEAR, dt.year + years))
    day = _clamp_day(year, dt.month, dt.day)
    return dt.replace(year=year, day=day)


def add_months(dt: datetime, months: int) -> datetime:
    total = dt.month - 1 + months
    year = max(MINYEAR, min(MAXYEAR, dt.year + total // 12))
    month = total % 12 + 1
    day = _clamp_day(year, month, dt.day)
    return dt.replace(year=year, month=month, day=day)


def diff_calendar(start: datetime, end: datetime) -> CalendarSpan:
    if end <= start:
        return CalendarSpan()

    years = end.year - start.year
    candidate = add_years(start, years)
    if candidate > end:
        years -= 1
        candidate = add_years(start, years)

    months = (end.year - candidate.year) * 12 + end.month - candidate.month
    candidate = add_months(candidate, months)
    if candidate > end:
        months -= 1
        candidate = add_months(add_years(start, years), months)

    delta = end - candidate
    seconds = delta.seconds
    return CalendarSpan(
        years=years,
        months=months,
        days=delta.days,
        hours=seconds // 3600,
        minutes=(seconds % 3600) // 60,
        seconds=seconds % 60,
    )


def format_span(span: CalendarSpan, with_time: bool = False, milliseconds: int = 0) -> str:
    text = f"{span.years}y {span.months}m {span.days}d"
    if with_time:
        text += f" {span.hours:02d}:{span.minutes:02d}:{span.seconds:02d}.{milliseconds:03d}"
    return text


def fraction(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return max(0.0, min(1.0, numerator / denominator))


def as_aware(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _in_zone(instant: datetime, now: datetime) -> datetime:
    try:
        return instant.astimezone(now.tzinfo)
    except OverflowError:
        # year 1 or 9999 pushed past the datetime range by the offset
        return instant


def calendar_progress(now: datetime) -> Dict[str, Tuple[int, int]]:
    """Progress pairs for the scales that only depend on the wall clock."""
    month_days = days_in_month(now.year, now.month)
    year_days = 366 if calendar.isleap(now.year) else 365
    day_of_year = now.timetuple().tm_yday
    return {
        "HOUR": (now.minute * 60 + now.second, SECONDS_PER_HOUR),
        "DAY": (now.hour * 60 + now.minute, MINUTES_PER_DAY),
        "MONTH": ((now.day - 1) * 24 + now.hour, month_days * 24),
        "YEAR": (day_of_year - 1, year_days),
    }


def derive(configuration: Optional["Configuration"], now: datetime) -> DerivedData:
    if configuration is None:
        return DerivedData.empty()

    now = as_aware(now)
    start = _in_zone(configuration.reference_instant, now)
    end = _in_zone(configuration.end_instant, now)

    elapsed = diff_calendar(start, now)
    remaining = diff_calendar(now, end)

    progress = calendar_progress(now)
    progress["LIFE"] = (elapsed.years * 12 + elapsed.months, configuration.duration_years * 12)

    return DerivedData(
        configured=True,
        end_instant=end,
        elapsed=elapsed,
        remaining=remaining,
        elapsed_seconds=max(0, math.floor((now - start).total_seconds())),
        remaining_seconds=max(0, math.floor((end - now).total_seconds())),
        life_seconds=max(0, math.floor((end - start).total_seconds())),
        progress=progress,
    )


def elapsed_fraction(scale: str, configuration: Optional["Configuration"], now: datetime) -> float:
    if scale == "LIFE":
        pair = derive(configuration, now).progress.get(scale)
    else:
        pair = calendar_progress(as_aware(now)).get(scale)
    if pair is None:
        return 0.0
    return fraction(*pair)
