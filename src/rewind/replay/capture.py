from __future__ import annotations

from collections.abc import Callable

from .streams import MandatoryStream, OptionalStream
from .types import InputEvent, PollContractError, RunContext

KeyListener = Callable[[InputEvent], None]
PollInput = Callable[[KeyListener], None]
CloseQuery = Callable[[], bool]


class EventCapture:
    """Make a listener-driven input poll replayable.

    While recording, the real poll runs once and whatever it delivered to the
    listener (or None) takes one stream slot. During playback the slot is read
    back and fed to the same listener, so key state changes through a single
    code path and the real poll is never touched.
    """

    def __init__(
        self,
        ctx: RunContext,
        *,
        poll_input: PollInput,
        on_key_event: KeyListener,
        stream: OptionalStream[InputEvent],
    ) -> None:
        self._ctx = ctx
        self._poll_input = poll_input
        self._on_key_event = on_key_event
        self._stream = stream
        self._polls = 0

    @property
    def stream(self) -> OptionalStream[InputEvent]:
        return self._stream

    @property
    def polls(self) -> int:
        return int(self._polls)

    def reset_counters(self) -> None:
        self._polls = 0

    def poll(self) -> InputEvent | None:
        self._polls += 1
        if self._ctx.recording:
            return self._poll_recording()
        event = self._stream.replay_next()
        if event is not None:
            self._on_key_event(event)
        return event

    def _poll_recording(self) -> InputEvent | None:
        delivered: list[InputEvent] = []

        def _capture(event: InputEvent) -> None:
            if delivered:
                raise PollContractError(
                    f"poll delivered a second event ({event}) after {delivered[0]}; expected at most one"
                )
            delivered.append(event)
            self._on_key_event(event)

        self._poll_input(_capture)
        event = delivered[0] if delivered else None
        self._stream.record(event)
        return event


class PredicateCapture:
    """Record a boolean query while live, answer from the recording in playback."""

    def __init__(self, ctx: RunContext, *, query: CloseQuery, stream: MandatoryStream[bool]) -> None:
        self._ctx = ctx
        self._query = query
        self._stream = stream

    @property
    def stream(self) -> MandatoryStream[bool]:
        return self._stream

    def __call__(self) -> bool:
        if self._ctx.recording:
            value = bool(self._query())
            self._stream.record(value)
            return value
        return bool(self._stream.replay_next())
