"""Application state, the pure ``reduce`` step and the pure ``render`` step.

Front ends own the timer and the terminal; they feed events to ``reduce`` and
draw whatever ``render`` returns.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Union

from . import overlay, timecalc
from .bars import build_bar_specs
from .model import Configuration, Perspective, Rect
from .overlay import DraftState
from .screen import EDIT_BUTTON, SWITCH_BUTTON, Frame, compose
from .ticker import TickState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ticked:
    tick: TickState


@dataclass(frozen=True)
class Key:
    name: str


@dataclass(frozen=True)
class Click:
    x: int
    y: int


Event = Union[Ticked, Key, Click]


@dataclass(frozen=True)
class AppState:
    tick: TickState
    configuration: Optional[Configuration] = None
    perspective: Perspective = Perspective.ELAPSED
    editing: bool = False
    draft: DraftState = field(default_factory=DraftState)

    @property
    def now(self) -> datetime:
        return self.tick.now


def initial_state(
    configuration: Optional[Configuration],
    now: datetime,
    perspective: Perspective = Perspective.ELAPSED,
) -> AppState:
    return AppState(
        tick=TickState(now=now),
        configuration=configuration,
        perspective=perspective,
        editing=configuration is None,
        draft=overlay.draft_from(configuration),
    )


def open_editor(state: AppState) -> AppState:
    draft = overlay.draft_from(state.configuration, state.draft.active_field)
    return replace(state, editing=True, draft=draft)


def confirm(state: AppState) -> AppState:
    configuration = overlay.commit(state.draft)
    draft = overlay.draft_from(configuration, state.draft.active_field)
    return replace(state, configuration=configuration, editing=False, draft=draft)


def cancel(state: AppState) -> AppState:
    draft = overlay.draft_from(state.configuration, state.draft.active_field)
    # without a configuration there is nothing to go back to
    return replace(state, editing=state.configuration is None, draft=draft)


def toggle_perspective(state: AppState) -> AppState:
    return replace(state, perspective=state.perspective.toggled())


def _reduce_editor_key(state: AppState, name: str) -> AppState:
    if name in ("e", "E"):
        return cancel(state)
    draft, action = overlay.handle_key(state.draft, name)
    state = replace(state, draft=draft)
    if action == overlay.CONFIRM:
        return confirm(state)
    if action == overlay.CANCEL:
        return cancel(state)
    return state


def _reduce_editor_click(state: AppState, x: int, y: int) -> AppState:
    left, top = overlay.overlay_origin()
    panel = Rect("panel", left, top, overlay.PANEL_WIDTH, overlay.PANEL_HEIGHT)
    if not panel.contains(x, y):
        return cancel(state)

    content = overlay.build_overlay(state.draft, left, top)
    for rect in content.fields:
        if rect.contains(x, y):
            return replace(state, draft=overlay.set_active_field(state.draft, rect.name))
    for rect in content.buttons():
        if not rect.contains(x, y):
            continue
        if rect.name == "confirm":
            return confirm(state)
        if rect.name == "cancel":
            return cancel(state)
        step = 1 if rect.name == "adjustUp" else -1
        return replace(state, draft=overlay.adjust(state.draft, step))
    return state


def reduce(state: AppState, event: Event) -> AppState:
    if isinstance(event, Ticked):
        return replace(state, tick=event.tick)

    if isinstance(event, Key):
        if state.editing:
            return _reduce_editor_key(state, event.name)
        if event.name in ("e", "E"):
            return open_editor(state)
        if event.name in ("s", "S", "space"):
            return toggle_perspective(state)
        return state

    if isinstance(event, Click):
        if state.editing:
            return _reduce_editor_click(state, event.x, event.y)
        if EDIT_BUTTON.contains(event.x, event.y):
            return open_editor(state)
        if SWITCH_BUTTON.contains(event.x, event.y):
            return toggle_perspective(state)
        return state

    logger.debug("ignoring unknown event %r", event)
    return state


def render(state: AppState) -> Frame:
    now = state.now
    configuration = state.configuration
    derived = timecalc.derive(configuration, now)
    duration = configuration.duration_years if configuration is not None else 0
    bars = build_bar_specs(derived, timecalc.as_aware(now), duration)
    panel = overlay.build_overlay(state.draft).buffer if state.editing else None
    return compose(
        now,
        state.perspective,
        derived,
        bars,
        configuration=configuration,
        animations=state.tick.animations,
        flashes=state.tick.flashes,
        overlay=panel,
    )


def hit_regions(state: AppState) -> List[Rect]:
    """Every clickable rect for the current state, in grid cells."""
    rects = [EDIT_BUTTON, SWITCH_BUTTON]
    if state.editing:
        content = overlay.build_overlay(state.draft)
        rects.extend(content.fields)
        rects.extend(content.buttons())
    return rects
