from __future__ import annotations

from pathlib import Path

import typer

from gfx.keys import KeyAction, key_code_from_name

from .debug import debug_enabled
from .paths import default_runtime_dir
from .platform import ScriptedPlatform
from .replay.types import InputEvent, ModeViolation, PollContractError, StreamExhausted
from .report import RunReport, build_run_report, encode_report, format_report
from .session import DEFAULT_MAX_TICKS, RecordReplaySession, RunConfig
from .trace_log import close_trace_log, init_trace_log

app = typer.Typer(add_completion=False)

_ACTIONS = {
    "press": KeyAction.PRESS,
    "release": KeyAction.RELEASE,
    "repeat": KeyAction.REPEAT,
}


def parse_event_spec(text: str) -> tuple[int, InputEvent]:
    """Parse `TICK:KEY[:ACTION[:MODS]]` into a 0-based poll index and an event.

    Ticks are 1-based, e.g. `2:up:press` delivers UP-press on the second tick.
    """
    parts = [part.strip() for part in str(text).split(":")]
    if len(parts) < 2 or len(parts) > 4:
        raise ValueError(f"event must look like TICK:KEY[:ACTION[:MODS]], got {text!r}")
    try:
        tick = int(parts[0])
    except ValueError:
        raise ValueError(f"event tick must be an integer, got {parts[0]!r}") from None
    if tick <= 0:
        raise ValueError(f"event tick must be >= 1, got {tick}")
    key = key_code_from_name(parts[1])
    if key is None:
        raise ValueError(f"unknown key {parts[1]!r}")
    action_name = parts[2].lower() if len(parts) >= 3 else "press"
    action = _ACTIONS.get(action_name)
    if action is None:
        raise ValueError(f"unknown key action {parts[2]!r} (expected one of: {', '.join(_ACTIONS)})")
    try:
        mods = int(parts[3], 0) if len(parts) == 4 else 0
    except ValueError:
        raise ValueError(f"event mods must be an integer, got {parts[3]!r}") from None
    return tick - 1, InputEvent(key=key, scancode=0, action=action, mods=mods)


class _StepClock:
    """Fake wall clock advancing a fixed step on every read."""

    def __init__(self, step: float) -> None:
        self._step = float(step)
        self._reads = 0

    def __call__(self) -> float:
        now = self._step * float(self._reads)
        self._reads += 1
        return now


def _run_session(
    session: RecordReplaySession,
    *,
    command: str,
    trace: bool,
    base_dir: Path,
    max_ticks: int | None,
    tick_rate: int | None,
) -> RunReport:
    trace_enabled = bool(trace) or debug_enabled()
    if trace_enabled:
        path = init_trace_log(base_dir=base_dir, command=command, max_ticks=max_ticks, tick_rate=tick_rate)
        typer.echo(f"trace log: {path}")
    try:
        result = session.run()
    except (StreamExhausted, ModeViolation, PollContractError) as exc:
        typer.echo(f"replay failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        if trace_enabled:
            close_trace_log()
    return build_run_report(result)


def _emit(report: RunReport, *, json_out: bool) -> None:
    if json_out:
        typer.echo(encode_report(report).decode("utf-8"))
    else:
        typer.echo(format_report(report))
    if not report.identical:
        raise typer.Exit(code=1)


@app.command("run")
def cmd_run(
    width: int = typer.Option(640, help="window width"),
    height: int = typer.Option(480, help="window height"),
    fps: int = typer.Option(60, help="live tick rate / target fps"),
    max_ticks: int = typer.Option(
        DEFAULT_MAX_TICKS,
        help="stop recording after N ticks (0 = only when the window closes)",
    ),
    trace: bool = typer.Option(False, "--trace/--no-trace", help="write a per-tick trace log (or set REWIND_DEBUG=1)"),
    base_dir: Path = typer.Option(
        default_runtime_dir(),
        "--base-dir",
        help="base path for trace logs (default: ./artifacts/runtime; override with REWIND_BASE_DIR)",
    ),
    json_out: bool = typer.Option(False, "--json", help="print the run report as JSON"),
) -> None:
    """Record a live windowed run, then replay it and compare trajectories."""
    from gfx.app import RaylibWindow

    from .window_platform import RaylibPlatform

    try:
        config = RunConfig(
            width=width,
            height=height,
            fps=fps,
            max_ticks=max_ticks or None,
            trace=trace,
            base_dir=base_dir,
        )
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    with RaylibWindow(width=config.width, height=config.height, title=config.title, fps=config.fps) as window:
        session = RecordReplaySession(
            RaylibPlatform(window),
            max_ticks=config.max_ticks,
            tick_rate=config.fps,
        )
        report = _run_session(
            session,
            command="run",
            trace=config.trace,
            base_dir=config.base_dir,
            max_ticks=config.max_ticks,
            tick_rate=config.fps,
        )
    _emit(report, json_out=json_out)


@app.command("demo")
def cmd_demo(
    event: list[str] = typer.Option(
        ["2:up:press"],
        "--event",
        "-e",
        help="scripted input TICK:KEY[:ACTION[:MODS]] (repeatable), e.g. 2:up:press",
    ),
    close_after: int = typer.Option(3, help="close query answers true on this tick"),
    max_ticks: int = typer.Option(0, help="also stop recording after N ticks (0 = no cap)"),
    dt: float = typer.Option(0.1, help="simulated seconds between live ticks"),
    trace: bool = typer.Option(False, "--trace/--no-trace", help="write a per-tick trace log (or set REWIND_DEBUG=1)"),
    base_dir: Path = typer.Option(
        default_runtime_dir(),
        "--base-dir",
        help="base path for trace logs (default: ./artifacts/runtime; override with REWIND_BASE_DIR)",
    ),
    json_out: bool = typer.Option(False, "--json", help="print the run report as JSON"),
) -> None:
    """Record a scripted headless run, then replay it and compare trajectories."""
    if close_after <= 0:
        typer.echo(f"close-after must be positive, got {close_after}", err=True)
        raise typer.Exit(code=1)
    if dt < 0.0:
        typer.echo(f"dt must be non-negative, got {dt}", err=True)
        raise typer.Exit(code=1)
    if max_ticks < 0:
        typer.echo(f"max-ticks must be non-negative (0 = no cap), got {max_ticks}", err=True)
        raise typer.Exit(code=1)

    events: dict[int, InputEvent] = {}
    for spec in event:
        try:
            poll_index, parsed = parse_event_spec(spec)
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        if poll_index in events:
            typer.echo(f"tick {poll_index + 1} already has an event; one event per poll", err=True)
            raise typer.Exit(code=1)
        events[poll_index] = parsed

    platform = ScriptedPlatform(events=events, close_values=[False] * (close_after - 1) + [True])
    cap = max_ticks or None
    session = RecordReplaySession(
        platform,
        max_ticks=cap,
        tick_rate=None,
        clock=_StepClock(dt),
        sleep=lambda _seconds: None,
    )
    report = _run_session(session, command="demo", trace=trace, base_dir=base_dir, max_ticks=cap, tick_rate=None)
    _emit(report, json_out=json_out)


def main(argv: list[str] | None = None) -> None:
    app(prog_name="rewind", args=argv)


if __name__ == "__main__":
    main()
