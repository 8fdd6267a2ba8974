from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gfx.keys import KeyAction, key_name


class Mode(Enum):
    RECORDING = "recording"
    PLAYBACK = "playback"


class ModeViolation(RuntimeError):
    """An operation was invoked in the wrong run mode, or the mode moved illegally."""


class StreamExhausted(LookupError):
    """Playback asked a recorded stream for more entries than were recorded."""

    def __init__(self, name: str, *, cursor: int, length: int) -> None:
        super().__init__(f"stream {name!r} exhausted: cursor {cursor} >= recorded length {length}")
        self.name = str(name)
        self.cursor = int(cursor)
        self.length = int(length)


class PollContractError(RuntimeError):
    """A single input poll delivered more than one event."""


@dataclass(slots=True)
class RunContext:
    """Mode shared by every stream, capture wrapper and driver of one run.

    Starts in RECORDING; the only legal move is a single switch to PLAYBACK.
    """

    mode: Mode = Mode.RECORDING

    @property
    def recording(self) -> bool:
        return self.mode is Mode.RECORDING

    @property
    def playback(self) -> bool:
        return self.mode is Mode.PLAYBACK

    def require(self, mode: Mode, *, action: str) -> None:
        if self.mode is not mode:
            raise ModeViolation(f"{action} requires {mode.value} mode (current: {self.mode.value})")

    def enter_playback(self) -> None:
        self.require(Mode.RECORDING, action="enter_playback")
        self.mode = Mode.PLAYBACK


@dataclass(frozen=True, slots=True)
class InputEvent:
    key: int
    scancode: int = 0
    action: KeyAction = KeyAction.PRESS
    mods: int = 0

    @property
    def pressed(self) -> bool:
        return self.action in (KeyAction.PRESS, KeyAction.REPEAT)

    def __str__(self) -> str:
        return f"{key_name(self.key)}-{self.action.name.lower()} mods={int(self.mods)}"
