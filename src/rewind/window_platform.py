from __future__ import annotations

from collections import deque

from gfx.app import RaylibWindow

from .replay.capture import KeyListener
from .replay.types import InputEvent
from .sim.state import Simulation

_PIXELS_PER_UNIT = 100.0


class RaylibPlatform:
    """Real collaborators backed by a raylib window.

    Raylib reports key edges per frame rather than through a callback, so the
    edges of a frame are queued and handed out one per poll.
    """

    def __init__(self, window: RaylibWindow) -> None:
        self._window = window
        self._pending: deque[InputEvent] = deque()
        self._harvested = False

    @property
    def pending_events(self) -> int:
        return len(self._pending)

    def poll_input(self, listener: KeyListener) -> None:
        if not self._harvested:
            mods = self._window.modifiers()
            for key, action in self._window.harvest_key_events():
                self._pending.append(InputEvent(key=int(key), scancode=0, action=action, mods=mods))
            self._harvested = True
        if self._pending:
            listener(self._pending.popleft())

    def should_close(self) -> bool:
        return self._window.should_close()

    def render_frame(self, simulation: Simulation) -> None:
        window = self._window
        center_x = window.width * 0.5
        center_y = window.height * 0.5
        pos = simulation.position

        def _draw() -> None:
            # Screen y grows downward, simulation +Y is up.
            window.draw_marker(center_x + pos.x * _PIXELS_PER_UNIT, center_y - pos.y * _PIXELS_PER_UNIT)
            window.draw_text(f"tick {simulation.tick_index}  {pos}", 10, 10)

        window.present(_draw)
        self._harvested = False
