import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .model import (
    FIELD_ORDER,
    MAX_DURATION,
    MIN_DURATION,
    Configuration,
    Rect,
    centered_origin,
)
from .timecalc import days_in_month

logger = logging.getLogger(__name__)

PANEL_WIDTH = 60
PANEL_HEIGHT = 10
MAX_YEAR = 9999
LEAP_YEAR = 2000

DEFAULT_YEAR = 1990
DEFAULT_MONTH = 1
DEFAULT_DAY = 1
DEFAULT_DURATION = 80

TITLE = "S  E  T  U  P"
BIRTH_DATE_LABEL = " Birth Date (YYYY/MM/DD): "
DURATION_LABEL = " Life Expectancy (Years): "
ADJUST_TEXT = "  [ ▲ ] [ ▼ ]"
INSTRUCTIONS_TEXT = "[Arrows] Move/Adjust"
CONFIRM_TEXT = "[Enter] Confirm"
CANCEL_TEXT = "[E]sc Cancel"

DATE_ROW = 4
DURATION_ROW = 6
INSTRUCTIONS_ROW = 8


@dataclass(frozen=True)
class DraftState:
    year: int = DEFAULT_YEAR
    month: int = DEFAULT_MONTH
    day: int = DEFAULT_DAY
    duration_years: int = DEFAULT_DURATION
    active_field: str = "year"


@dataclass(frozen=True)
class OverlayContent:
    buffer: List[str]
    fields: List[Rect]
    confirm_button: Rect
    cancel_button: Rect
    adjust_up_button: Optional[Rect] = None
    adjust_down_button: Optional[Rect] = None

    def buttons(self) -> List[Rect]:
        rects = [self.confirm_button, self.cancel_button]
        if self.adjust_up_button is not None:
            rects.append(self.adjust_up_button)
        if self.adjust_down_button is not None:
            rects.append(self.adjust_down_button)
        return rects


def overlay_origin() -> Tuple[int, int]:
    return centered_origin(PANEL_WIDTH, PANEL_HEIGHT)


def _centered_line(text: str) -> str:
    padding = PANEL_WIDTH - 2 - len(text)
    left = padding // 2
    return "│" + " " * left + text + " " * (padding - left) + "│"


def _content_line(text: str) -> str:
    return "│" + text[: PANEL_WIDTH - 2].ljust(PANEL_WIDTH - 2) + "│"


def build_overlay(draft: DraftState, x: Optional[int] = None, y: Optional[int] = None) -> OverlayContent:
    """Lay out the setup panel for ``draft`` with its top-left corner at (x, y).

    Rects are in grid cells; (x, y) defaults to the centred placement the
    compositor uses.
    """
    if x is None or y is None:
        x, y = overlay_origin()
    active = draft.active_field

    def shown(name: str, text: str, pad: bool = False) -> str:
        if active == name:
            return f"[{text}]"
        return f" {text} " if pad else text

    year = shown("year", f"{draft.year:04d}")
    month = shown("month", f"{draft.month:02d}")
    day = shown("day", f"{draft.day:02d}")
    duration = shown("duration", str(draft.duration_years), pad=True)

    # +1 for the left border of the panel
    year_x = len(BIRTH_DATE_LABEL) + 1
    month_x = year_x + len(year) + 1
    day_x = month_x + len(month) + 1
    duration_x = len(DURATION_LABEL) + 1
    fields = [
        Rect("year", x + year_x, y + DATE_ROW, len(year)),
        Rect("month", x + month_x, y + DATE_ROW, len(month)),
        Rect("day", x + day_x, y + DATE_ROW, len(day)),
        Rect("duration", x + duration_x, y + DURATION_ROW, len(duration)),
    ]

    date_text = f"{BIRTH_DATE_LABEL}{year}/{month}/{day}"
    duration_text = f"{DURATION_LABEL}{duration}"

    adjust_up = adjust_down = None
    if active in FIELD_ORDER:
        if active == "duration":
            button_x = x + 1 + len(duration_text)
            button_y = y + DURATION_ROW
            duration_text += ADJUST_TEXT
        else:
            button_x = x + 1 + len(date_text)
            button_y = y + DATE_ROW
            date_text += ADJUST_TEXT
        adjust_up = Rect("adjustUp", button_x + 2, button_y, 5)
        adjust_down = Rect("adjustDown", button_x + 8, button_y, 5)

    instructions = f"{INSTRUCTIONS_TEXT}  {CONFIRM_TEXT}  {CANCEL_TEXT}"
    buffer = [
        "┌" + "─" * (PANEL_WIDTH - 2) + "┐",
        _centered_line(TITLE),
        "├" + "═" * (PANEL_WIDTH - 2) + "┤",
        _content_line(""),
        _content_line(date_text),
        _content_line(""),
        _content_line(duration_text),
        _content_line(""),
        _centered_line(instructions),
        "└" + "─" * (PANEL_WIDTH - 2) + "┘",
    ]

    start_x = x + 1 + (PANEL_WIDTH - 2 - len(instructions)) // 2
    confirm_x = start_x + len(INSTRUCTIONS_TEXT) + 2
    cancel_x = confirm_x + len(CONFIRM_TEXT) + 2
    confirm = Rect("confirm", confirm_x, y + INSTRUCTIONS_ROW, len(CONFIRM_TEXT))
    cancel = Rect("cancel", cancel_x, y + INSTRUCTIONS_ROW, len(CANCEL_TEXT))

    return OverlayContent(buffer, fields, confirm, cancel, adjust_up, adjust_down)


def max_day(draft: DraftState) -> int:
    year = max(1, min(MAX_YEAR, draft.year))
    month = max(1, min(12, draft.month))
    return days_in_month(year, month)


def _get(draft: DraftState, name: str) -> int:
    if name == "duration":
        return draft.duration_years
    return getattr(draft, name)


def _set(draft: DraftState, name: str, value: int) -> DraftState:
    if name == "duration":
        return replace(draft, duration_years=value)
    return replace(draft, **{name: value})


def type_digit(draft: DraftState, digit: int) -> DraftState:
    name = draft.active_field
    candidate = _get(draft, name) * 10 + digit
    if name == "year":
        value = digit if candidate > MAX_YEAR else candidate
    elif name in ("month", "day"):
        limit = 12 if name == "month" else max_day(draft)
        if candidate > limit:
            value = digit if digit > 0 else 1
        else:
            value = candidate if candidate > 0 else 1
    else:
        value = digit if candidate > MAX_DURATION else candidate
        if value == 0:
            value = 1
    return _set(draft, name, value)


def backspace(draft: DraftState) -> DraftState:
    name = draft.active_field
    return _set(draft, name, _get(draft, name) // 10)


def adjust(draft: DraftState, step: int) -> DraftState:
    """Move the focused field one step up (+1) or down (-1), wrapping around."""
    name = draft.active_field
    value = _get(draft, name) + step
    if name == "year":
        value = max(0, min(MAX_YEAR, value))
    elif name == "month":
        if value > 12:
            value = 1
        elif value < 1:
            value = 12
    elif name == "day":
        last = max_day(draft)
        if value > last:
            value = 1
        elif value < 1:
            value = last
    else:
        if value > MAX_DURATION:
            value = MIN_DURATION
        elif value < MIN_DURATION:
            value = MAX_DURATION
    return _set(draft, name, value)


def set_active_field(draft: DraftState, name: str) -> DraftState:
    if name not in FIELD_ORDER:
        return draft
    return replace(draft, active_field=name)


def focus_next(draft: DraftState) -> DraftState:
    index = FIELD_ORDER.index(draft.active_field)
    return replace(draft, active_field=FIELD_ORDER[(index + 1) % len(FIELD_ORDER)])


def focus_previous(draft: DraftState) -> DraftState:
    index = FIELD_ORDER.index(draft.active_field)
    return replace(draft, active_field=FIELD_ORDER[(index - 1) % len(FIELD_ORDER)])


def draft_from(configuration: Optional[Configuration], active_field: str = "year") -> DraftState:
    if configuration is None:
        return DraftState(active_field=active_field)
    return DraftState(
        year=configuration.year,
        month=configuration.month,
        day=configuration.day,
        duration_years=configuration.duration_years,
        active_field=active_field,
    )


def commit(draft: DraftState) -> Configuration:
    month = max(1, min(12, draft.month))
    # longest the month gets in any year, so Feb 29 is kept for common years too
    last = days_in_month(LEAP_YEAR, month)
    configuration = Configuration(
        year=max(1, min(MAX_YEAR, draft.year)),
        month=month,
        day=max(1, min(last, draft.day)),
        duration_years=max(MIN_DURATION, min(MAX_DURATION, draft.duration_years)),
    )
    logger.info(
        "configuration confirmed: %04d-%02d-%02d, %d years",
        configuration.year,
        configuration.month,
        configuration.day,
        configuration.duration_years,
    )
    return configuration


CONFIRM = "confirm"
CANCEL = "cancel"


def handle_key(draft: DraftState, key: str) -> Tuple[DraftState, Optional[str]]:
    """Apply one editor key; returns the new draft and CONFIRM/CANCEL/None.

    Keys: "0"-"9", "backspace", "left", "right", "up", "down", "tab",
    "enter", "escape". Anything else leaves the draft as it is.
    """
    if len(key) == 1 and key in "0123456789":
        return type_digit(draft, int(key)), None
    if key == "backspace":
        return backspace(draft), None
    if key in ("right", "tab"):
        return focus_next(draft), None
    if key == "left":
        return focus_previous(draft), None
    if key == "up":
        return adjust(draft, 1), None
    if key == "down":
        return adjust(draft, -1), None
    if key == "enter":
        return draft, CONFIRM
    if key == "escape":
        return draft, CANCEL
    return draft, None
