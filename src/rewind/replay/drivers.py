from __future__ import annotations

from collections.abc import Callable
import time

from ..sim.clock import TickPacer
from .streams import MandatoryStream
from .types import Mode, RunContext

TickFn = Callable[[float], None]
StopFn = Callable[[], bool]


class LiveTickDriver:
    """Run `tick(dt)` at real elapsed time and record every dt.

    Every dt, the first included, is a measured clock difference: `run` reads
    the clock once before the loop and that reading is the baseline for tick 1.
    The first dt is therefore the time spent between `run` starting and the
    first tick (about one period when paced, near zero when unpaced, and
    exactly zero for a clock that has not moved). Negative differences clamp
    to zero. With a `tick_rate` the loop sleeps toward a fixed cadence;
    `tick_rate=None` runs unpaced.
    """

    def __init__(
        self,
        ctx: RunContext,
        durations: MandatoryStream[float],
        *,
        tick_rate: int | None = 60,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._ctx = ctx
        self._durations = durations
        self._pacer = TickPacer(tick_rate=int(tick_rate)) if tick_rate is not None else None
        self._clock = clock
        self._sleep = sleep

    @property
    def durations(self) -> MandatoryStream[float]:
        return self._durations

    def run(self, tick: TickFn, should_stop: StopFn) -> int:
        self._ctx.require(Mode.RECORDING, action="LiveTickDriver.run")
        pacer = self._pacer
        last = float(self._clock())
        if pacer is not None:
            pacer.reset(last)

        ticks = 0
        while True:
            if pacer is not None:
                wait = pacer.wait_time(float(self._clock()))
                if wait > 0.0:
                    self._sleep(wait)
            now = float(self._clock())
            dt = max(0.0, now - last)
            last = now
            if pacer is not None:
                pacer.advance(now)

            tick(dt)
            self._durations.record(dt)
            ticks += 1
            if should_stop():
                return ticks


class PlaybackTickDriver:
    """Feed the recorded durations back into `tick(dt)`, in order.

    There is deliberately no stop predicate: playback runs exactly as many
    ticks as were recorded and ends when the duration stream is exhausted.
    """

    def __init__(self, ctx: RunContext, durations: MandatoryStream[float]) -> None:
        self._ctx = ctx
        self._durations = durations

    @property
    def durations(self) -> MandatoryStream[float]:
        return self._durations

    def run(self, tick: TickFn) -> int:
        self._ctx.require(Mode.PLAYBACK, action="PlaybackTickDriver.run")
        ticks = 0
        while self._durations.remaining > 0:
            tick(self._durations.replay_next())
            ticks += 1
        return ticks
