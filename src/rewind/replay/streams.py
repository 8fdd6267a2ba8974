from __future__ import annotations

from typing import Generic, Optional, TypeVar

from .types import Mode, RunContext, StreamExhausted

T = TypeVar("T")


class _RecordedStream(Generic[T]):
    """Append-only while recording, forward-only cursor reads during playback."""

    def __init__(self, ctx: RunContext, name: str) -> None:
        self._ctx = ctx
        self._name = str(name)
        self._values: list[T] = []
        self._cursor = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def cursor(self) -> int:
        return int(self._cursor)

    @property
    def remaining(self) -> int:
        return max(0, len(self._values) - self._cursor)

    def __len__(self) -> int:
        return len(self._values)

    def values(self) -> tuple[T, ...]:
        return tuple(self._values)

    def _append(self, value: T) -> None:
        self._ctx.require(Mode.RECORDING, action=f"{self._name}.record")
        self._values.append(value)

    def _next(self) -> T:
        self._ctx.require(Mode.PLAYBACK, action=f"{self._name}.replay_next")
        cursor = self._cursor
        if cursor >= len(self._values):
            raise StreamExhausted(self._name, cursor=cursor, length=len(self._values))
        self._cursor = cursor + 1
        return self._values[cursor]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, len={len(self._values)}, cursor={self._cursor})"


class MandatoryStream(_RecordedStream[T]):
    """Exactly one value per call, e.g. a close-query result or a tick duration."""

    def record(self, value: T) -> None:
        if value is None:
            raise TypeError(f"stream {self.name!r} does not accept None")
        self._append(value)

    def replay_next(self) -> T:
        return self._next()


class OptionalStream(_RecordedStream[Optional[T]]):
    """Zero-or-one value per call; an empty call still occupies a slot as None."""

    def record(self, value: T | None) -> None:
        self._append(value)

    def replay_next(self) -> T | None:
        return self._next()
