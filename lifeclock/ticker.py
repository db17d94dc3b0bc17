import enum
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from . import timecalc
from .model import Configuration, Perspective

logger = logging.getLogger(__name__)

FRAME_COUNT = 5
TICK_SECONDS = 0.1

# scale label -> calendar field whose change starts that scale's slide
BOUNDARY_FIELDS = (
    ("HOUR", "minute"),
    ("DAY", "hour"),
    ("MONTH", "day"),
    ("YEAR", "month"),
    ("LIFE", "year"),
)
FLASH_SCALE = "MINUTE"


class AnimationKind(enum.Enum):
    GROW = "grow"
    SHRINK = "shrink"


@dataclass(frozen=True)
class AnimationEntry:
    kind: AnimationKind
    frame: int = 1
    origin: float = 0.0


def _frozen(mapping: Dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class TickState:
    now: datetime
    animations: Mapping[str, AnimationEntry] = field(default_factory=lambda: _frozen({}))
    flashes: Mapping[str, bool] = field(default_factory=lambda: _frozen({}))


def _local_now() -> datetime:
    return datetime.now().astimezone()


def advance(
    previous: TickState,
    now: datetime,
    perspective: Perspective,
    configuration: Optional[Configuration],
) -> TickState:
    """Compute the tick that follows ``previous``; ``previous`` is left untouched."""
    before = previous.now
    animations: Dict[str, AnimationEntry] = {}

    for scale, entry in previous.animations.items():
        if entry.frame < FRAME_COUNT:
            animations[scale] = AnimationEntry(entry.kind, entry.frame + 1, entry.origin)

    kind = AnimationKind.GROW if perspective is Perspective.ELAPSED else AnimationKind.SHRINK
    for scale, attr in BOUNDARY_FIELDS:
        if scale == "LIFE" and configuration is None:
            continue
        if getattr(now, attr) != getattr(before, attr):
            origin = timecalc.elapsed_fraction(scale, configuration, before)
            animations[scale] = AnimationEntry(kind, 1, origin)
            logger.debug("%s boundary crossed at %s (%s)", scale, now.isoformat(), kind.value)

    flashes = {FLASH_SCALE: now.second != before.second}
    return TickState(now=now, animations=_frozen(animations), flashes=_frozen(flashes))


class TickScheduler:
    """Drives ``advance`` every ``period`` seconds from a single thread.

    ``clock`` and ``sleep`` are injectable so tests can step time by hand.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = _local_now,
        period: float = TICK_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.clock = clock
        self.period = period
        self.sleep = sleep
        self.state = TickState(now=clock())
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def tick(self, perspective: Perspective, configuration: Optional[Configuration]) -> TickState:
        self.state = advance(self.state, self.clock(), perspective, configuration)
        return self.state

    def run(
        self,
        on_tick: Callable[[TickState], None],
        perspective: Callable[[], Perspective],
        configuration: Callable[[], Optional[Configuration]],
    ) -> None:
        self._running = True
        logger.debug("tick scheduler started, period=%.3fs", self.period)
        try:
            while self._running:
                started = time.monotonic()
                on_tick(self.tick(perspective(), configuration()))
                if not self._running:
                    break
                self.sleep(max(0.0, self.period - (time.monotonic() - started)))
        finally:
            self._running = False
            logger.debug("tick scheduler stopped")

    def stop(self) -> None:
        self._running = False
