import curses
import locale
import logging
import sys
from typing import List, Optional

from . import config as config_store
from .app import AppState, Click, Event, Key, Ticked, initial_state, reduce, render
from .model import HEIGHT, WIDTH, Configuration, Perspective
from .ticker import TickScheduler, TickState

logger = logging.getLogger(__name__)

KEY_NAMES = {
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_ENTER: "enter",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "backspace",
    9: "tab",
    10: "enter",
    13: "enter",
    27: "escape",
    8: "backspace",
    127: "backspace",
    32: "space",
}
CLICK_MASK = curses.BUTTON1_PRESSED | curses.BUTTON1_CLICKED


def decode_key(key: int) -> Optional[str]:
    if key in KEY_NAMES:
        return KEY_NAMES[key]
    if 0 <= key <= 255:
        ch = chr(key)
        if ch.isprintable():
            return ch
    return None


def grid_origin(rows: int, cols: int):
    return max(0, (cols - WIDTH) // 2), max(0, (rows - HEIGHT) // 2)


class Terminal:
    """Curses side of the clock: reads keys and mouse presses, draws frames."""

    def __init__(self, stdscr, state: AppState) -> None:
        self.stdscr = stdscr
        self.state = state
        self.quit = False

    def dispatch(self, event: Event) -> None:
        before = self.state.configuration
        self.state = reduce(self.state, event)
        after = self.state.configuration
        if after is not None and after != before:
            config_store.save(after)

    def _read_events(self) -> List[Event]:
        events: List[Event] = []
        while True:
            key = self.stdscr.getch()
            if key == -1:
                return events
            if key == curses.KEY_MOUSE:
                try:
                    _, mx, my, _, bstate = curses.getmouse()
                except curses.error:
                    continue
                if bstate & CLICK_MASK:
                    rows, cols = self.stdscr.getmaxyx()
                    left, top = grid_origin(rows, cols)
                    events.append(Click(mx - left, my - top))
                continue
            if key == curses.KEY_RESIZE:
                continue
            name = decode_key(key)
            if name is None:
                continue
            if name in ("q", "Q") and not self.state.editing:
                self.quit = True
                return events
            events.append(Key(name))

    def on_tick(self, tick: TickState, scheduler: TickScheduler) -> None:
        self.dispatch(Ticked(tick))
        for event in self._read_events():
            self.dispatch(event)
        if self.quit:
            scheduler.stop()
            return
        self.draw()

    def draw(self) -> None:
        rows, cols = self.stdscr.getmaxyx()
        self.stdscr.erase()
        if rows < HEIGHT or cols < WIDTH:
            message = f"terminal too small: need {WIDTH}x{HEIGHT}, have {cols}x{rows}"
            try:
                self.stdscr.addstr(0, 0, message[: max(0, cols - 1)])
            except curses.error:
                pass
            self.stdscr.refresh()
            return

        frame = render(self.state)
        left, top = grid_origin(rows, cols)
        for y, line in enumerate(frame.rows):
            try:
                self.stdscr.addstr(top + y, left, line)
            except curses.error:
                # writing the bottom-right cell moves the cursor off screen
                pass
        self.stdscr.refresh()


def _setup(stdscr) -> None:
    curses.noecho()
    curses.cbreak()
    stdscr.keypad(True)
    stdscr.nodelay(True)
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    try:
        curses.set_escdelay(25)
    except (AttributeError, curses.error):
        pass
    curses.mousemask(curses.ALL_MOUSE_EVENTS)


def run(configuration: Optional[Configuration], perspective: Perspective = Perspective.ELAPSED) -> None:
    locale.setlocale(locale.LC_ALL, "")
    scheduler = TickScheduler()
    state = initial_state(configuration, scheduler.state.now, perspective)

    stdscr = curses.initscr()
    sys.stdout.write("\x1b[?1049h")
    sys.stdout.flush()
    try:
        _setup(stdscr)
        terminal = Terminal(stdscr, state)
        terminal.draw()
        scheduler.run(
            lambda tick: terminal.on_tick(tick, scheduler),
            perspective=lambda: terminal.state.perspective,
            configuration=lambda: terminal.state.configuration,
        )
    finally:
        curses.nocbreak()
        stdscr.keypad(False)
        curses.echo()
        curses.endwin()
        sys.stdout.write("\x1b[?1049l")
        sys.stdout.flush()
