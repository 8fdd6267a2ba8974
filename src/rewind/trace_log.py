from __future__ import annotations

import datetime as dt
import os
from pathlib import Path
from threading import Lock


_TRACE_LOCK = Lock()
_TRACE_PATH: Path | None = None
_NEEDS_QUOTES = frozenset(' \t"=')


def _format_value(value: object) -> str:
    """Render one field value, double-quoting anything that would break key=value splitting."""
    text = str(value).replace("\\", "\\\\").replace("\n", "\\n")
    if text and not _NEEDS_QUOTES.intersection(text):
        return text
    return '"' + text.replace('"', '\\"') + '"'


def _format_fields(fields: dict[str, object]) -> str:
    parts: list[str] = []
    for key in sorted(fields):
        parts.append(f"{key}={_format_value(fields[key])}")
    return " ".join(parts)


def trace_log_path() -> Path | None:
    with _TRACE_LOCK:
        return _TRACE_PATH


def init_trace_log(
    *,
    base_dir: Path,
    command: str,
    max_ticks: int | None = None,
    tick_rate: int | None = None,
) -> Path:
    command_name = str(command).strip().lower() or "unknown"
    timestamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%S.%fZ")
    path = Path(base_dir) / "logs" / f"rewind-{command_name}-pid{os.getpid()}-{timestamp}.log"
    path.parent.mkdir(parents=True, exist_ok=True)

    with _TRACE_LOCK:
        global _TRACE_PATH
        _TRACE_PATH = path

    trace_log(
        "init",
        command=command_name,
        max_ticks="none" if max_ticks is None else int(max_ticks),
        tick_rate="none" if tick_rate is None else int(tick_rate),
        pid=int(os.getpid()),
    )
    return path


def trace_log(event: str, **fields: object) -> None:
    with _TRACE_LOCK:
        path = _TRACE_PATH
    if path is None:
        return

    timestamp = dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds")
    payload = _format_fields(fields)
    line = f"{timestamp} event={str(event).strip()}"
    if payload:
        line += f" {payload}"
    line += "\n"

    with _TRACE_LOCK:
        if _TRACE_PATH is None:
            return
        with _TRACE_PATH.open("a", encoding="utf-8") as handle:
            handle.write(line)


def close_trace_log() -> None:
    with _TRACE_LOCK:
        global _TRACE_PATH
        _TRACE_PATH = None


__all__ = [
    "close_trace_log",
    "init_trace_log",
    "trace_log",
    "trace_log_path",
]
