from __future__ import annotations

import inspect

import pytest

from rewind.replay import LiveTickDriver, MandatoryStream, ModeViolation, PlaybackTickDriver, RunContext
from rewind.sim.clock import TickPacer


def _clock(values: list[float]):
    it = iter(values)
    return lambda: next(it)


def test_live_driver_records_measured_durations() -> None:
    ctx = RunContext()
    durations: MandatoryStream[float] = MandatoryStream(ctx, "durations")
    order: list[str] = []
    stops = iter([False, False, True])

    def _tick(dt: float) -> None:
        order.append(f"tick:{len(durations)}")

    def _should_stop() -> bool:
        order.append(f"stop:{len(durations)}")
        return next(stops)

    driver = LiveTickDriver(ctx, durations, tick_rate=None, clock=_clock([0.0, 0.1, 0.2, 0.3]))
    ticks = driver.run(_tick, _should_stop)

    assert ticks == 3
    assert list(durations.values()) == pytest.approx([0.1, 0.1, 0.1])
    # dt is appended after the tick and before the stop check.
    assert order == ["tick:0", "stop:1", "tick:1", "stop:2", "tick:2", "stop:3"]


def test_live_driver_runs_at_least_one_tick() -> None:
    ctx = RunContext()
    durations: MandatoryStream[float] = MandatoryStream(ctx, "durations")
    driver = LiveTickDriver(ctx, durations, tick_rate=None, clock=_clock([5.0, 5.0]))
    assert driver.run(lambda dt: None, lambda: True) == 1
    assert durations.values() == (0.0,)


def test_live_driver_sleeps_toward_tick_rate() -> None:
    ctx = RunContext()
    durations: MandatoryStream[float] = MandatoryStream(ctx, "durations")
    slept: list[float] = []
    driver = LiveTickDriver(
        ctx,
        durations,
        tick_rate=10,
        clock=_clock([0.0, 0.02, 0.1]),
        sleep=slept.append,
    )
    driver.run(lambda dt: None, lambda: True)

    assert slept == [pytest.approx(0.08)]
    assert durations.values() == (pytest.approx(0.1),)


def test_live_driver_requires_recording_mode() -> None:
    ctx = RunContext()
    durations: MandatoryStream[float] = MandatoryStream(ctx, "durations")
    ctx.enter_playback()
    driver = LiveTickDriver(ctx, durations, tick_rate=None, clock=_clock([0.0]))
    with pytest.raises(ModeViolation):
        driver.run(lambda dt: None, lambda: True)


def test_playback_driver_replays_every_recorded_duration() -> None:
    ctx = RunContext()
    durations: MandatoryStream[float] = MandatoryStream(ctx, "durations")
    for value in (0.1, 0.2, 0.3, 0.4, 0.5):
        durations.record(value)
    ctx.enter_playback()

    seen: list[float] = []
    ticks = PlaybackTickDriver(ctx, durations).run(seen.append)

    assert ticks == 5
    assert seen == [0.1, 0.2, 0.3, 0.4, 0.5]
    assert durations.remaining == 0


def test_playback_driver_takes_no_stop_predicate() -> None:
    params = list(inspect.signature(PlaybackTickDriver.run).parameters)
    assert params == ["self", "tick"]


def test_playback_driver_requires_playback_mode() -> None:
    ctx = RunContext()
    durations: MandatoryStream[float] = MandatoryStream(ctx, "durations")
    durations.record(0.1)
    with pytest.raises(ModeViolation):
        PlaybackTickDriver(ctx, durations).run(lambda dt: None)


def test_tick_pacer_rejects_non_positive_rate() -> None:
    with pytest.raises(ValueError, match="tick_rate must be positive"):
        TickPacer(tick_rate=0)


def test_tick_pacer_resyncs_after_stall() -> None:
    pacer = TickPacer(tick_rate=10)
    pacer.reset(0.0)
    assert pacer.wait_time(0.05) == pytest.approx(0.05)
    pacer.advance(2.0)
    assert pacer.next_deadline == pytest.approx(2.1)
    assert pacer.wait_time(3.0) == 0.0


def test_live_driver_first_duration_is_measured_from_run_start() -> None:
    ctx = RunContext()
    durations: MandatoryStream[float] = MandatoryStream(ctx, "durations")
    stops = iter([False, True])
    driver = LiveTickDriver(ctx, durations, tick_rate=None, clock=_clock([10.0, 10.25, 9.0]))

    assert driver.run(lambda dt: None, lambda: next(stops)) == 2
    # Baseline is the reading taken as run starts; a backwards clock clamps to 0.
    assert durations.values() == (0.25, 0.0)
