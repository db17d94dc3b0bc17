from datetime import datetime, timezone

import pytest

from lifeclock import timecalc
from lifeclock.bars import (
    BAR_WIDTH,
    EMPTY,
    FILL,
    HEAD,
    LINE_WIDTH,
    BarSpec,
    build_bar_specs,
    render_bar,
)
from lifeclock.model import Configuration, Perspective
from lifeclock.ticker import AnimationEntry, AnimationKind

ELAPSED = Perspective.ELAPSED
REMAINING = Perspective.REMAINING


def cells(line: str) -> str:
    start = line.index("|") + 1
    return line[start : start + BAR_WIDTH]


def countdown(second: int) -> BarSpec:
    return BarSpec("MINUTE", "SEC", second, 60, is_countdown_style=True)


def test_countdown_thirty_seconds_elapsed():
    line = render_bar(countdown(30), ELAPSED)
    assert line == " MINUTE[30/60] SEC |>" + "=" * 28 + "█" + "=" * 30 + "|  48% "


def test_countdown_thirty_seconds_remaining():
    line = render_bar(countdown(30), REMAINING)
    assert line == " MINUTE[30/60] SEC |" + "=" * 29 + "█" + "=" * 29 + "<|  50% "


def test_countdown_zero_second_shows_sixty():
    line = render_bar(countdown(0), ELAPSED)
    assert line.startswith(" MINUTE[60/60] SEC |>")
    assert cells(line)[-1] == HEAD
    assert line.endswith("|  98% ")


def test_countdown_flash_swaps_head_glyph():
    assert "▓" in cells(render_bar(countdown(30), ELAPSED, flash=True))
    assert HEAD not in cells(render_bar(countdown(30), ELAPSED, flash=True))
    assert HEAD in cells(render_bar(countdown(30), ELAPSED, flash=False))


def test_calendar_bar_half_way_elapsed():
    spec = BarSpec("HOUR", "MIN", 30, 60, False, 1800, 3600)
    line = render_bar(spec, ELAPSED)
    assert line == "   HOUR[30/60] MIN |" + FILL * 29 + HEAD + EMPTY * 30 + "|  50% "


def test_calendar_bar_half_way_remaining_is_mirrored():
    spec = BarSpec("HOUR", "MIN", 30, 60, False, 1800, 3600)
    line = render_bar(spec, REMAINING)
    assert line == "   HOUR[30/60] MIN |" + EMPTY * 30 + HEAD + FILL * 29 + "|  50% "


def test_one_based_scale_displays_completed_units():
    spec = BarSpec("MONTH", "DAY", 15, 31, False, 14 * 24, 31 * 24, one_based=True)
    assert render_bar(spec, ELAPSED).startswith("  MONTH[14/31] DAY |")
    assert render_bar(spec, REMAINING).startswith("  MONTH[17/31] DAY |")


@pytest.mark.parametrize("numerator", [0, 1, 7, 59, 359, 720, 1439, 1440])
def test_elapsed_and_remaining_are_mirror_images(numerator):
    spec = BarSpec("DAY", "HRS", numerator // 60, 24, False, numerator, 1440)
    elapsed = cells(render_bar(spec, ELAPSED))
    remaining = cells(render_bar(spec, REMAINING))
    filled = BAR_WIDTH - elapsed.count(EMPTY)
    assert abs(filled - remaining.count(EMPTY)) <= 1


@pytest.mark.parametrize("perspective", [ELAPSED, REMAINING])
@pytest.mark.parametrize("numerator", [-5, 0, 1, 30, 59, 60, 61, 500])
def test_percentage_stays_in_range(perspective, numerator):
    line = render_bar(BarSpec("HOUR", "MIN", 0, 60, False, numerator, 60), perspective)
    assert len(line) == LINE_WIDTH
    pct = int(line[-5:-2])
    assert 0 <= pct <= 100


def test_zero_denominator_renders_empty_progress():
    line = render_bar(BarSpec("LIFE", "YRS", 0, 0, False, 0, 0), ELAPSED)
    assert len(line) == LINE_WIDTH
    assert line.endswith("|   0% ")
    assert cells(line)[0] == HEAD


@pytest.mark.parametrize("second", range(0, 60, 7))
@pytest.mark.parametrize("perspective", [ELAPSED, REMAINING])
def test_every_line_has_fixed_width(second, perspective):
    assert len(render_bar(countdown(second), perspective)) == LINE_WIDTH


def test_growing_head_slides_from_previous_position():
    spec = BarSpec("HOUR", "MIN", 30, 60, False, 1800, 3600)
    first = render_bar(spec, ELAPSED, animation=AnimationEntry(AnimationKind.GROW, 1, 0.25))
    assert cells(first) == FILL * 15 + EMPTY * 2 + HEAD + EMPTY * 42

    last = render_bar(spec, ELAPSED, animation=AnimationEntry(AnimationKind.GROW, 5, 0.25))
    assert cells(last) == FILL * 15 + EMPTY * 14 + HEAD + EMPTY * 30


def test_shrinking_head_slides_over_resting_fill():
    spec = BarSpec("HOUR", "MIN", 30, 60, False, 1800, 3600)
    line = render_bar(spec, REMAINING, animation=AnimationEntry(AnimationKind.SHRINK, 2, 0.25))
    assert cells(line) == EMPTY * 16 + FILL * 5 + HEAD + FILL * 38


def test_expired_animation_shows_resting_position():
    spec = BarSpec("HOUR", "MIN", 30, 60, False, 1800, 3600)
    expired = render_bar(spec, ELAPSED, animation=AnimationEntry(AnimationKind.GROW, 6, 0.25))
    assert expired == render_bar(spec, ELAPSED)


def test_build_bar_specs_in_screen_order():
    now = datetime(2000, 1, 1, 0, 0, 30, tzinfo=timezone.utc)
    derived = timecalc.derive(Configuration(2000, 1, 1, 80), now)
    specs = build_bar_specs(derived, now, 80)
    assert [spec.label for spec in specs] == ["MINUTE", "HOUR", "DAY", "MONTH", "YEAR", "LIFE"]
    assert specs[0].is_countdown_style
    assert specs[3].total == 31
    assert specs[3].one_based and specs[4].one_based
    assert (specs[5].value, specs[5].total) == (0, 80)


def test_build_bar_specs_empty_until_configured():
    now = datetime(2000, 1, 1, tzinfo=timezone.utc)
    assert build_bar_specs(timecalc.derive(None, now), now, 0) == []
