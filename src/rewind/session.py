from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
import time

from gfx.geom import Vec3

from .paths import default_runtime_dir
from .platform import Platform
from .replay.capture import EventCapture, PredicateCapture
from .replay.drivers import LiveTickDriver, PlaybackTickDriver
from .replay.streams import MandatoryStream, OptionalStream
from .replay.types import InputEvent, Mode, ModeViolation, RunContext
from .sim.fingerprint import TrajectoryDiff, compare_trajectories, fingerprint_trajectory
from .sim.state import Simulation
from .trace_log import trace_log

DEFAULT_MAX_TICKS = 300


@dataclass(frozen=True, slots=True)
class RunConfig:
    width: int = 640
    height: int = 480
    title: str = "Input Recorder/Playback"
    fps: int = 60
    max_ticks: int | None = DEFAULT_MAX_TICKS
    trace: bool = False
    base_dir: Path = field(default_factory=default_runtime_dir)

    def __post_init__(self) -> None:
        if int(self.fps) <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.max_ticks is not None and int(self.max_ticks) <= 0:
            raise ValueError(f"max_ticks must be positive, got {self.max_ticks}")
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(f"window size must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True, slots=True)
class PhaseResult:
    mode: Mode
    ticks: int
    polls: int
    final_position: Vec3
    trajectory: tuple[Vec3, ...]
    fingerprint: int


@dataclass(frozen=True, slots=True)
class SessionResult:
    recording: PhaseResult
    playback: PhaseResult
    durations: tuple[float, ...]
    events: tuple[InputEvent | None, ...]
    close_values: tuple[bool, ...]
    diff: TrajectoryDiff

    @property
    def identical(self) -> bool:
        return bool(self.diff.ok) and self.recording.fingerprint == self.playback.fingerprint


class RecordReplaySession:
    """Record one live run against `platform`, then replay it in the same process.

    Both phases share one tick callback. The close query is folded into the
    live stop condition (and therefore recorded); playback never consults it.
    """

    def __init__(
        self,
        platform: Platform,
        *,
        max_ticks: int | None = DEFAULT_MAX_TICKS,
        tick_rate: int | None = 60,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_ticks is not None and int(max_ticks) <= 0:
            raise ValueError(f"max_ticks must be positive, got {max_ticks}")
        self._platform = platform
        self._max_ticks = None if max_ticks is None else int(max_ticks)
        self._tick_rate = tick_rate
        self._clock = clock
        self._sleep = sleep

        self.ctx = RunContext()
        self.durations: MandatoryStream[float] = MandatoryStream(self.ctx, "durations")
        self.events: OptionalStream[InputEvent] = OptionalStream(self.ctx, "events")
        self.close_values: MandatoryStream[bool] = MandatoryStream(self.ctx, "should_close")
        self.simulation = Simulation()

        self._event_capture = EventCapture(
            self.ctx,
            poll_input=platform.poll_input,
            on_key_event=self._on_key_event,
            stream=self.events,
        )
        self._close_capture = PredicateCapture(self.ctx, query=platform.should_close, stream=self.close_values)
        self._recorded = False
        self._recording_done = False

    def _on_key_event(self, event: InputEvent) -> None:
        trace_log(
            "key",
            phase=self.ctx.mode.value,
            tick=self.simulation.tick_index,
            key=int(event.key),
            action=event.action.name.lower(),
            mods=int(event.mods),
        )
        self.simulation.on_key_event(event)

    def tick(self, dt: float) -> None:
        self._event_capture.poll()

        sim = self.simulation
        before = sim.position
        update = sim.step(dt)
        trace_log(
            "tick",
            phase=self.ctx.mode.value,
            index=sim.tick_index - 1,
            dt=f"{float(dt):.9g}",
            before=before,
            update=update,
            after=sim.position,
        )

        if self.ctx.recording and self._max_ticks is not None:
            self._recording_done = sim.tick_index >= self._max_ticks
        self._platform.render_frame(sim)

    def should_stop(self) -> bool:
        # The close query runs first so that every live tick records one value.
        return self._close_capture() or self._recording_done

    def record(self) -> PhaseResult:
        self.ctx.require(Mode.RECORDING, action="record")
        if self._recorded:
            raise ModeViolation("recording already ran for this session")
        self._recorded = True
        driver = LiveTickDriver(
            self.ctx,
            self.durations,
            tick_rate=self._tick_rate,
            clock=self._clock,
            sleep=self._sleep,
        )
        ticks = driver.run(self.tick, self.should_stop)
        result = self._phase_result(ticks)
        trace_log("run_done", phase=result.mode.value, ticks=ticks, position=result.final_position)
        return result

    def playback(self) -> PhaseResult:
        if not self._recorded:
            raise ModeViolation("playback requires a completed recording")
        self.ctx.enter_playback()
        self.simulation = Simulation()
        self._recording_done = False
        self._event_capture.reset_counters()
        trace_log(
            "mode_switch",
            mode=self.ctx.mode.value,
            durations=len(self.durations),
            events=len(self.events),
            close_values=len(self.close_values),
        )
        driver = PlaybackTickDriver(self.ctx, self.durations)
        ticks = driver.run(self.tick)
        result = self._phase_result(ticks)
        trace_log("run_done", phase=result.mode.value, ticks=ticks, position=result.final_position)
        return result

    def run(self) -> SessionResult:
        recording = self.record()
        playback = self.playback()
        return SessionResult(
            recording=recording,
            playback=playback,
            durations=self.durations.values(),
            events=self.events.values(),
            close_values=self.close_values.values(),
            diff=compare_trajectories(recording.trajectory, playback.trajectory),
        )

    def _phase_result(self, ticks: int) -> PhaseResult:
        sim = self.simulation
        trajectory = tuple(sim.trajectory)
        return PhaseResult(
            mode=self.ctx.mode,
            ticks=int(ticks),
            polls=self._event_capture.polls,
            final_position=sim.position,
            trajectory=trajectory,
            fingerprint=fingerprint_trajectory(trajectory),
        )
