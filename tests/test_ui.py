import curses
from datetime import datetime, timezone

import pytest

from lifeclock import config, ui
from lifeclock.app import Key, initial_state
from lifeclock.model import HEIGHT, WIDTH, Configuration

NOW = datetime(2000, 1, 1, tzinfo=timezone.utc)


class FakeScreen:
    def __init__(self, keys=(), size=(40, 120)):
        self.keys = list(keys)
        self.size = size
        self.lines = {}

    def getch(self):
        return self.keys.pop(0) if self.keys else -1

    def getmaxyx(self):
        return self.size

    def erase(self):
        self.lines.clear()

    def addstr(self, y, x, text):
        self.lines[y] = (x, text)

    def refresh(self):
        pass


class FakeScheduler:
    stopped = False

    def stop(self):
        self.stopped = True


@pytest.mark.parametrize(
    "code, name",
    [
        (curses.KEY_LEFT, "left"),
        (27, "escape"),
        (10, "enter"),
        (127, "backspace"),
        (ord("7"), "7"),
        (ord("e"), "e"),
        (0, None),
        (4000, None),
    ],
)
def test_decode_key(code, name):
    assert ui.decode_key(code) == name


def test_grid_is_centred_in_larger_terminal():
    assert ui.grid_origin(HEIGHT, WIDTH) == (0, 0)
    assert ui.grid_origin(31, 99) == (5, 2)


def test_draw_centres_frame():
    screen = FakeScreen(size=(31, 99))
    ui.Terminal(screen, initial_state(Configuration(1990, 1, 1, 80), NOW)).draw()
    assert sorted(screen.lines) == list(range(2, 2 + HEIGHT))
    x, text = screen.lines[2]
    assert x == 5
    assert len(text) == WIDTH


def test_draw_warns_when_terminal_too_small():
    screen = FakeScreen(size=(20, 60))
    ui.Terminal(screen, initial_state(None, NOW)).draw()
    assert screen.lines[0][1].startswith("terminal too small")


def test_confirmed_edit_is_saved(tmp_path, monkeypatch):
    monkeypatch.setenv(config.CONFIG_ENV, str(tmp_path / "config.json"))
    terminal = ui.Terminal(FakeScreen(), initial_state(None, NOW))
    terminal.dispatch(Key("enter"))
    assert config.load() == Configuration(1990, 1, 1, 80)


def test_q_quits_only_outside_editor():
    scheduler = FakeScheduler()
    screen = FakeScreen(keys=[ord("q")])
    terminal = ui.Terminal(screen, initial_state(None, NOW))
    terminal.on_tick(terminal.state.tick, scheduler)
    assert not scheduler.stopped

    screen = FakeScreen(keys=[ord("s"), ord("q")])
    terminal = ui.Terminal(screen, initial_state(Configuration(1990, 1, 1, 80), NOW))
    terminal.on_tick(terminal.state.tick, scheduler)
    assert scheduler.stopped
    assert terminal.state.perspective.value == "REMAINING"
