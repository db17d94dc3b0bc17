import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .model import Perspective
from .ticker import FRAME_COUNT, AnimationEntry
from .timecalc import DerivedData, days_in_month, fraction

LABEL_WIDTH = 18
BAR_WIDTH = 60
PERCENT_WIDTH = 6
LINE_WIDTH = LABEL_WIDTH + 1 + BAR_WIDTH + 2 + PERCENT_WIDTH
EPSILON = 1e-9

EMPTY = "░"
FILL = "▓"
HEAD = "█"
COUNTDOWN_FILL = "="
COUNTDOWN_FLASH = "▓"


@dataclass(frozen=True)
class BarSpec:
    label: str
    unit: str
    value: int
    total: int
    is_countdown_style: bool = False
    progress_numerator: int = 0
    progress_denominator: int = 0
    one_based: bool = False


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def head_index(progress: float) -> int:
    return int(math.floor(progress * (BAR_WIDTH - EPSILON)))


def bar_cells(progress: float, perspective: Perspective):
    """Cells for a calendar bar at ``progress`` and the index of its head.

    ELAPSED fills from the left; REMAINING mirrors it from the right, the head
    sitting on the edge next to the empty part.
    """
    cells = [EMPTY] * BAR_WIDTH
    filled = head_index(progress)
    if perspective is Perspective.ELAPSED:
        for i in range(filled):
            cells[i] = FILL
        head = filled
    else:
        for i in range(BAR_WIDTH - filled, BAR_WIDTH):
            cells[i] = FILL
        head = BAR_WIDTH - filled - 1
    cells[head] = HEAD
    return cells, head


def _countdown_bar(spec: BarSpec, perspective: Perspective, flash: bool):
    total = max(1, spec.total)
    value = max(0, min(total - 1, spec.value))
    denominator = total - 1
    # the head spans 60 positions over 59 gaps; the percentage counts whole seconds out of 60
    if perspective is Perspective.ELAPSED:
        display = value or total
        progress = fraction(display - 1, denominator)
        percent = (display - 1) / total
    else:
        display = total - value
        progress = fraction(value, denominator)
        percent = display / total

    cells = [COUNTDOWN_FILL] * BAR_WIDTH
    head = head_index(progress)
    if perspective is Perspective.REMAINING:
        head = BAR_WIDTH - 1 - head
    cells[head] = COUNTDOWN_FLASH if flash else HEAD
    if perspective is Perspective.ELAPSED and head != 0:
        cells[0] = ">"
    elif perspective is Perspective.REMAINING and head != BAR_WIDTH - 1:
        cells[-1] = "<"
    return display, cells, percent


def _calendar_bar(spec: BarSpec, perspective: Perspective, animation: Optional[AnimationEntry]):
    elapsed_value = spec.value - 1 if spec.one_based else spec.value
    elapsed_value = max(0, min(spec.total, elapsed_value))
    elapsed = fraction(spec.progress_numerator, spec.progress_denominator)

    if perspective is Perspective.ELAPSED:
        display = elapsed_value
        progress = elapsed
    else:
        display = spec.total - elapsed_value
        progress = 1.0 - elapsed

    cells, head = bar_cells(progress, perspective)
    if animation is not None and 1 <= animation.frame <= FRAME_COUNT:
        origin = fraction(animation.origin, 1)
        if perspective is Perspective.REMAINING:
            origin = 1.0 - origin
        cells, origin_head = bar_cells(origin, perspective)
        cells[origin_head] = FILL if perspective is Perspective.ELAPSED else EMPTY
        step = (head - origin_head) * animation.frame / FRAME_COUNT
        cells[origin_head + _round_half_up(step)] = HEAD
    return display, cells, progress


def render_bar(
    spec: BarSpec,
    perspective: Perspective = Perspective.ELAPSED,
    flash: bool = False,
    animation: Optional[AnimationEntry] = None,
) -> str:
    if spec.is_countdown_style:
        display, cells, percent = _countdown_bar(spec, perspective, flash)
    else:
        display, cells, percent = _calendar_bar(spec, perspective, animation)

    label = f"{spec.label.upper()}[{display:02d}/{spec.total}] {spec.unit.upper()}"
    label = label[:LABEL_WIDTH].rjust(LABEL_WIDTH)
    pct = max(0, min(100, _round_half_up(percent * 100)))
    return f"{label} |{''.join(cells)}| {pct:>3}% "


def build_bar_specs(derived: DerivedData, now: datetime, duration_years: int) -> List[BarSpec]:
    """The six bars in screen order: MINUTE, HOUR, DAY, MONTH, YEAR, LIFE.

    Nothing is drawn until a configuration exists.
    """
    if not derived.configured:
        return []
    progress = derived.progress
    return [
        BarSpec("MINUTE", "SEC", now.second, 60, is_countdown_style=True),
        BarSpec("HOUR", "MIN", now.minute, 60, False, *progress["HOUR"]),
        BarSpec("DAY", "HRS", now.hour, 24, False, *progress["DAY"]),
        BarSpec("MONTH", "DAY", now.day, days_in_month(now.year, now.month), False, *progress["MONTH"], one_based=True),
        BarSpec("YEAR", "MTH", now.month, 12, False, *progress["YEAR"], one_based=True),
        BarSpec("LIFE", "YRS", derived.elapsed.years, duration_years, False, *progress["LIFE"]),
    ]
