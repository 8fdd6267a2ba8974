from __future__ import annotations

import msgspec

from .session import PhaseResult, SessionResult


class PhaseReport(msgspec.Struct, forbid_unknown_fields=True):
    mode: str
    ticks: int
    polls: int
    final_position: tuple[float, float, float]
    fingerprint: str


class RunReport(msgspec.Struct, forbid_unknown_fields=True):
    recording: PhaseReport
    playback: PhaseReport
    durations_len: int
    events_len: int
    events_delivered: int
    close_values_len: int
    identical: bool
    first_mismatch_tick: int | None = None


def _phase_report(phase: PhaseResult) -> PhaseReport:
    return PhaseReport(
        mode=phase.mode.value,
        ticks=int(phase.ticks),
        polls=int(phase.polls),
        final_position=phase.final_position.to_tuple(),
        fingerprint=f"{int(phase.fingerprint):016x}",
    )


def build_run_report(result: SessionResult) -> RunReport:
    return RunReport(
        recording=_phase_report(result.recording),
        playback=_phase_report(result.playback),
        durations_len=len(result.durations),
        events_len=len(result.events),
        events_delivered=sum(1 for event in result.events if event is not None),
        close_values_len=len(result.close_values),
        identical=bool(result.identical),
        first_mismatch_tick=result.diff.first_mismatch_tick,
    )


def encode_report(report: RunReport) -> bytes:
    return msgspec.json.encode(report)


def decode_report(data: bytes) -> RunReport:
    return msgspec.json.decode(data, type=RunReport)


def format_report(report: RunReport) -> str:
    lines = []
    for phase in (report.recording, report.playback):
        x, y, z = phase.final_position
        lines.append(
            f"{phase.mode:<9}  ticks={phase.ticks:4d}  polls={phase.polls:4d}  "
            f"final=({x:g}, {y:g}, {z:g})  fingerprint={phase.fingerprint}"
        )
    lines.append(
        f"streams    durations={report.durations_len}  events={report.events_len} "
        f"({report.events_delivered} delivered)  should_close={report.close_values_len}"
    )
    if report.identical:
        lines.append("replay identical")
    else:
        lines.append(f"replay DIVERGED at tick {report.first_mismatch_tick}")
    return "\n".join(lines)
