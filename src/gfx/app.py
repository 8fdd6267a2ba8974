from __future__ import annotations

from collections.abc import Callable

import pyray as rl

from .keys import MODIFIER_KEYS, TRACKED_KEYS, KeyAction, modifier_bits


class RaylibWindow:
    """Raylib window exposing the per-frame hooks an external loop drives.

    Unlike a `run_view` style loop the window does not own the frame loop:
    callers ask for close state, key edges and frame presentation themselves.
    """

    def __init__(
        self,
        *,
        width: int = 640,
        height: int = 480,
        title: str = "Input Recorder/Playback",
        fps: int = 60,
    ) -> None:
        self.width = int(width)
        self.height = int(height)
        self.title = str(title)
        self.fps = int(fps)
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        if self._open:
            return
        rl.init_window(self.width, self.height, self.title)
        if not rl.is_window_ready():
            raise RuntimeError(f"failed to open raylib window {self.width}x{self.height}")
        if self.fps > 0:
            rl.set_target_fps(self.fps)
        self._open = True

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        rl.close_window()

    def __enter__(self) -> RaylibWindow:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def should_close(self) -> bool:
        return bool(rl.window_should_close())

    def modifiers(self) -> int:
        down = {key for key, _bit in MODIFIER_KEYS if rl.is_key_down(key)}
        return modifier_bits(down)

    def harvest_key_events(self) -> list[tuple[int, KeyAction]]:
        """Return key edges raylib observed for the current frame, in key order."""
        events: list[tuple[int, KeyAction]] = []
        for key in TRACKED_KEYS:
            if rl.is_key_pressed(key):
                events.append((key, KeyAction.PRESS))
            elif rl.is_key_pressed_repeat(key):
                events.append((key, KeyAction.REPEAT))
            if rl.is_key_released(key):
                events.append((key, KeyAction.RELEASE))
        return events

    def present(self, draw: Callable[[], None] | None = None) -> None:
        """Clear, draw and swap one frame. `end_drawing` also polls window input."""
        rl.begin_drawing()
        rl.clear_background(rl.BLACK)
        if draw is not None:
            draw()
        rl.end_drawing()

    def draw_marker(self, x: float, y: float, *, radius: float = 8.0) -> None:
        rl.draw_circle(int(x), int(y), float(radius), rl.RAYWHITE)

    def draw_text(self, text: str, x: int, y: int, *, size: int = 16) -> None:
        rl.draw_text(str(text), int(x), int(y), int(size), rl.LIGHTGRAY)
