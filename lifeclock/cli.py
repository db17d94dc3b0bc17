import argparse
import logging
import sys
from datetime import datetime

from . import __version__
from . import config as config_store
from .app import initial_state, render
from .logging_utils import configure_logging
from .model import Perspective

logger = logging.getLogger(__name__)

PERSPECTIVES = ["elapsed", "remaining"]


def _headless_snapshot(perspective: Perspective) -> str:
    configuration = config_store.load()
    state = initial_state(configuration, datetime.now().astimezone(), perspective)
    return render(state).text()


def parse_args(argv=None):
    epilog = (
        "Controls (interactive): e edit birth date and life expectancy, "
        "s or space switch perspective, q quit. "
        "The editor takes digits, arrows, tab, backspace, enter and escape."
    )
    parser = argparse.ArgumentParser(
        prog="lifeclock",
        description="Full-screen terminal life clock: minute, hour, day, month, year and life progress bars",
        epilog=epilog,
    )
    parser.add_argument("--perspective", default="elapsed", choices=PERSPECTIVES)
    parser.add_argument("--headless", action="store_true", help="print a single frame and exit")
    parser.add_argument("--log-level", default=None, help="log level for the log file (default WARNING)")
    parser.add_argument("--version", action="version", version=f"lifeclock {__version__}")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(config_store.get_config_dir(), args.log_level)
    perspective = Perspective(args.perspective.upper())

    if args.headless:
        print(_headless_snapshot(perspective))
        return 0

    try:
        from .ui import run

        run(config_store.load(), perspective)
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
