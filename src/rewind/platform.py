from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .replay.capture import KeyListener
from .replay.types import InputEvent
from .sim.state import Simulation


class Platform(Protocol):
    """External collaborators one record/replay session drives."""

    def poll_input(self, listener: KeyListener) -> None: ...

    def should_close(self) -> bool: ...

    def render_frame(self, simulation: Simulation) -> None: ...


@dataclass(slots=True)
class ScriptedPlatform:
    """Synthetic collaborators for headless runs.

    `events` maps a 0-based poll index to the event that poll delivers.
    `close_values` answers the close query call by call; once exhausted the
    window stays open.
    """

    events: Mapping[int, InputEvent] = field(default_factory=dict)
    close_values: Sequence[bool] = ()
    poll_calls: int = 0
    close_calls: int = 0
    frames: int = 0

    def poll_input(self, listener: KeyListener) -> None:
        idx = self.poll_calls
        self.poll_calls += 1
        event = self.events.get(idx)
        if event is not None:
            listener(event)

    def should_close(self) -> bool:
        idx = self.close_calls
        self.close_calls += 1
        if idx < len(self.close_values):
            return bool(self.close_values[idx])
        return False

    def render_frame(self, simulation: Simulation) -> None:
        self.frames += 1
