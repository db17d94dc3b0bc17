"""Fixed 89x27 character grid and the compositor that fills it."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Mapping, Optional, Sequence

from . import timecalc
from .bars import BarSpec, render_bar
from .glyphs import clock_lines
from .model import HEIGHT, WIDTH, Configuration, Perspective, Rect, centered_origin
from .ticker import AnimationEntry

WEEKDAYS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")
SHADOW = "░"

HEADER_ROW = 1
DATE_ROW = 4
CLOCK_ROW = 6
TODAY_DIVIDER_ROW = 12
TODAY_BARS_ROW = 14
LIFE_DIVIDER_ROW = 18
LIFE_BARS_ROW = 20
FOOTER_DIVIDER_ROW = 24
FOOTER_ROW = 25
BAR_COLUMN = 1

CONTROLS_TEXT = "[E]dit | [S]witch"
EDIT_BUTTON = Rect("edit", 2, FOOTER_ROW, 6, 1)
SWITCH_BUTTON = Rect("switch", 11, FOOTER_ROW, 8, 1)


class ScreenBuffer:
    """A width x height arena of single characters.

    ``write`` is the only way text gets in and it clips at every edge, so the
    rows keep their exact length whatever is written.
    """

    def __init__(self, width: int = WIDTH, height: int = HEIGHT, fill: str = " ") -> None:
        self.width = width
        self.height = height
        self._cells = [[fill] * width for _ in range(height)]

    def write(self, row: int, col: int, text: str) -> None:
        if not 0 <= row < self.height:
            return
        line = self._cells[row]
        for i, ch in enumerate(text):
            x = col + i
            if x >= self.width:
                break
            if x >= 0:
                line[x] = ch

    def rows(self) -> List[str]:
        return ["".join(line) for line in self._cells]


@dataclass(frozen=True)
class Frame:
    rows: List[str]
    edit_button: Rect = EDIT_BUTTON
    switch_button: Rect = SWITCH_BUTTON

    def text(self) -> str:
        return "\n".join(self.rows)


def _divider(label: str = "", rule: str = "─") -> str:
    inner = WIDTH - 2
    left = (inner - len(label)) // 2
    right = inner - len(label) - left
    return "├" + rule * left + label + rule * right + "┤"


def draw_frame(buffer: ScreenBuffer) -> None:
    buffer.write(0, 0, "┌" + "─" * (WIDTH - 2) + "┐")
    for row in range(1, HEIGHT - 1):
        buffer.write(row, 0, "│")
        buffer.write(row, WIDTH - 1, "│")
    buffer.write(HEIGHT - 1, 0, "└" + "─" * (WIDTH - 2) + "┘")
    buffer.write(2, 0, _divider(rule="═"))
    buffer.write(TODAY_DIVIDER_ROW, 0, _divider("[ TODAY ]"))
    buffer.write(LIFE_DIVIDER_ROW, 0, _divider("[ LIFE ]"))
    buffer.write(FOOTER_DIVIDER_ROW, 0, _divider())


def _spread(left: str, right: str, width: int) -> str:
    padding = max(0, width - len(left) - len(right))
    return left + " " * padding + right


def _slashed(instant: datetime) -> str:
    return f"{instant.year:04d}/{instant.month:02d}/{instant.day:02d}"


def header_text(
    perspective: Perspective,
    derived: timecalc.DerivedData,
    configuration: Optional[Configuration],
    now: datetime,
) -> str:
    if not derived.configured or configuration is None:
        return _spread("LIFE CLOCK :: SETUP REQUIRED", "PRESS [E] TO ENTER BIRTH DATE", WIDTH - 4)

    millis = now.microsecond // 1000
    if perspective is Perspective.ELAPSED:
        anchor = f"BORN {_slashed(configuration.reference_instant)}"
        metric = f"ELAPSED: {timecalc.format_span(derived.elapsed, True, millis)}"
    else:
        anchor = f"EOL {_slashed(configuration.end_instant)}"
        metric = f"REMAINING: {timecalc.format_span(derived.remaining, True, 999 - millis)}"
    return _spread(f"LIFE CLOCK :: {anchor}  ", metric, WIDTH - 4)


def date_text(now: datetime) -> str:
    return f"{now.year:04d} / {now.month:02d} / {now.day:02d} | {WEEKDAYS[now.weekday()]}"


def footer_text(perspective: Perspective) -> str:
    return _spread(CONTROLS_TEXT, f"> PERSPECTIVE : [ {perspective.value} ]", WIDTH - 4)


def _centered_x(text: str) -> int:
    return (WIDTH - len(text)) // 2


def stamp_overlay(buffer: ScreenBuffer, overlay: Sequence[str]) -> None:
    """Centre ``overlay`` on the grid over a one-cell drop shadow."""
    if not overlay:
        return
    left, top = centered_origin(len(overlay[0]), len(overlay))
    for i, line in enumerate(overlay):
        shadow = "".join(ch if ch.isspace() else SHADOW for ch in line)
        buffer.write(top + i + 1, left + 1, shadow)
    for i, line in enumerate(overlay):
        buffer.write(top + i, left, line)


def compose(
    now: datetime,
    perspective: Perspective,
    derived: timecalc.DerivedData,
    bars: Sequence[BarSpec],
    configuration: Optional[Configuration] = None,
    animations: Optional[Mapping[str, AnimationEntry]] = None,
    flashes: Optional[Mapping[str, bool]] = None,
    overlay: Optional[Sequence[str]] = None,
) -> Frame:
    animations = animations or {}
    flashes = flashes or {}
    buffer = ScreenBuffer()
    draw_frame(buffer)

    buffer.write(HEADER_ROW, 2, header_text(perspective, derived, configuration, now))

    date_line = date_text(now)
    buffer.write(DATE_ROW, _centered_x(date_line), date_line)
    clock = clock_lines(now)
    clock_x = _centered_x(clock[0])
    for i, line in enumerate(clock):
        buffer.write(CLOCK_ROW + i, clock_x, line)

    for i, spec in enumerate(bars):
        row = TODAY_BARS_ROW + i if i < 3 else LIFE_BARS_ROW + i - 3
        line = render_bar(
            spec,
            perspective,
            flash=flashes.get(spec.label, False),
            animation=animations.get(spec.label),
        )
        buffer.write(row, BAR_COLUMN, line)

    buffer.write(FOOTER_ROW, 2, footer_text(perspective))

    if overlay:
        stamp_overlay(buffer, overlay)

    return Frame(rows=buffer.rows())
