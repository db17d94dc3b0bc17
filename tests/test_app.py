from datetime import datetime, timezone

from lifeclock import app
from lifeclock.app import Click, Key, Ticked
from lifeclock.model import HEIGHT, WIDTH, Configuration, Perspective
from lifeclock.ticker import TickState

NOW = datetime(2000, 1, 1, 0, 0, 30, tzinfo=timezone.utc)
CONFIG = Configuration(2000, 1, 1, 80)


def feed(state, *events):
    for event in events:
        state = app.reduce(state, event)
    return state


def test_unconfigured_start_opens_editor():
    state = app.initial_state(None, NOW)
    assert state.editing
    assert state.draft.year == 1990


def test_configured_start_shows_clock():
    state = app.initial_state(CONFIG, NOW, Perspective.REMAINING)
    assert not state.editing
    assert state.perspective is Perspective.REMAINING
    assert state.draft.year == 2000


def test_switch_key_toggles_perspective():
    state = app.initial_state(CONFIG, NOW)
    state = feed(state, Key("s"))
    assert state.perspective is Perspective.REMAINING
    state = feed(state, Key("S"), Key("space"))
    assert state.perspective is Perspective.REMAINING
    assert feed(state, Key("q")) == state


def test_edit_then_escape_restores_draft():
    state = feed(app.initial_state(CONFIG, NOW), Key("e"), Key("up"), Key("up"))
    assert state.editing
    assert state.draft.year == 2002
    state = feed(state, Key("escape"))
    assert not state.editing
    assert state.configuration == CONFIG
    assert state.draft.year == 2000


def test_e_inside_editor_cancels():
    state = feed(app.initial_state(CONFIG, NOW), Key("E"), Key("E"))
    assert not state.editing


def test_switch_key_is_a_no_op_while_editing():
    state = feed(app.initial_state(CONFIG, NOW), Key("e"), Key("s"))
    assert state.editing
    assert state.perspective is Perspective.ELAPSED


def test_enter_confirms_typed_values():
    state = app.initial_state(None, NOW)
    state = feed(state, *[Key(k) for k in ["backspace"] * 4 + list("1985") + ["enter"]])
    assert not state.editing
    assert state.configuration == Configuration(1985, 1, 1, 80)


def test_cancel_without_configuration_keeps_editor_open():
    state = feed(app.initial_state(None, NOW), Key("up"), Key("escape"))
    assert state.editing
    assert state.configuration is None
    assert state.draft.year == 1990


def test_footer_clicks():
    state = app.initial_state(CONFIG, NOW)
    assert feed(state, Click(11, 25)).perspective is Perspective.REMAINING
    assert feed(state, Click(18, 25)).perspective is Perspective.REMAINING
    assert feed(state, Click(2, 25)).editing
    assert feed(state, Click(9, 25)) == state


def test_click_outside_panel_cancels():
    state = feed(app.initial_state(CONFIG, NOW), Key("e"), Click(0, 0))
    assert not state.editing


def test_click_on_field_moves_focus():
    state = feed(app.initial_state(CONFIG, NOW), Key("e"), Click(48, 12))
    assert state.editing
    assert state.draft.active_field == "month"


def test_click_on_adjust_buttons():
    state = feed(app.initial_state(None, NOW), Click(56, 12))
    assert state.draft.year == 1991
    state = feed(state, Click(62, 12))
    assert state.draft.year == 1990


def test_click_on_confirm():
    state = app.initial_state(None, NOW)
    confirm = next(r for r in app.hit_regions(state) if r.name == "confirm")
    state = feed(state, Click(confirm.x, confirm.y))
    assert not state.editing
    assert state.configuration == Configuration(1990, 1, 1, 80)


def test_tick_replaces_clock_state_only():
    state = app.initial_state(CONFIG, NOW)
    later = TickState(now=NOW.replace(second=31))
    ticked = feed(state, Ticked(later))
    assert ticked.tick is later
    assert ticked.now.second == 31
    assert ticked.configuration == state.configuration


def test_render_produces_full_grid():
    for state in (app.initial_state(None, NOW), app.initial_state(CONFIG, NOW)):
        frame = app.render(state)
        assert len(frame.rows) == HEIGHT
        assert all(len(row) == WIDTH for row in frame.rows)
    assert "LIFE CLOCK :: BORN 2000/01/01" in app.render(app.initial_state(CONFIG, NOW)).rows[1]


def test_render_draws_panel_only_while_editing():
    state = app.initial_state(CONFIG, NOW)
    assert "S  E  T  U  P" not in app.render(state).text()
    assert "S  E  T  U  P" in app.render(feed(state, Key("e"))).text()


def test_hit_regions():
    names = [r.name for r in app.hit_regions(app.initial_state(CONFIG, NOW))]
    assert names == ["edit", "switch"]
    names = [r.name for r in app.hit_regions(app.initial_state(None, NOW))]
    assert names[:6] == ["edit", "switch", "year", "month", "day", "duration"]
    assert {"confirm", "cancel", "adjustUp", "adjustDown"} <= set(names)
