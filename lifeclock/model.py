import calendar
import enum
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, datetime, timezone

from .timecalc import add_years

WIDTH = 89
HEIGHT = 27

MIN_DURATION = 10
MAX_DURATION = 999

FIELD_ORDER = ("year", "month", "day", "duration")


class Perspective(enum.Enum):
    ELAPSED = "ELAPSED"
    REMAINING = "REMAINING"

    def toggled(self) -> "Perspective":
        if self is Perspective.ELAPSED:
            return Perspective.REMAINING
        return Perspective.ELAPSED


@dataclass(frozen=True)
class Configuration:
    """Confirmed birth date and life expectancy.

    The date is stored as typed so that reopening the editor shows it
    unchanged; ``reference_instant`` resolves it to UTC midnight, clamping the
    day to the length of the month (Feb 29 on a common year becomes Feb 28).
    """

    year: int
    month: int
    day: int
    duration_years: int

    @property
    def reference_instant(self) -> datetime:
        year = max(MINYEAR, min(MAXYEAR, self.year))
        month = max(1, min(12, self.month))
        last = calendar.monthrange(year, month)[1]
        day = max(1, min(last, self.day))
        return datetime(year, month, day, tzinfo=timezone.utc)

    @property
    def end_instant(self) -> datetime:
        return add_years(self.reference_instant, self.duration_years)

    @classmethod
    def from_instant(cls, instant: datetime, duration_years: int) -> "Configuration":
        return cls(instant.year, instant.month, instant.day, duration_years)


@dataclass(frozen=True)
class Rect:
    name: str
    x: int
    y: int
    width: int
    height: int = 1

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


def centered_origin(width: int, height: int):
    """Top-left cell that centres a width x height panel on the grid."""
    return (WIDTH - width) // 2, (HEIGHT - height) // 2
