from __future__ import annotations

from dataclasses import dataclass, field

from gfx.geom import Vec3
from gfx.keys import KEY_A, KEY_D, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_S, KEY_UP, KEY_W

from ..replay.types import InputEvent

_UP_KEYS = frozenset((KEY_W, KEY_UP))
_DOWN_KEYS = frozenset((KEY_S, KEY_DOWN))
_LEFT_KEYS = frozenset((KEY_A, KEY_LEFT))
_RIGHT_KEYS = frozenset((KEY_D, KEY_RIGHT))


@dataclass(slots=True)
class KeyState:
    up_pressed: bool = False
    down_pressed: bool = False
    left_pressed: bool = False
    right_pressed: bool = False

    def apply(self, event: InputEvent) -> bool:
        """Update the matching direction; returns False for keys that do not steer."""
        key = int(event.key)
        pressed = bool(event.pressed)
        if key in _UP_KEYS:
            self.up_pressed = pressed
        elif key in _DOWN_KEYS:
            self.down_pressed = pressed
        elif key in _LEFT_KEYS:
            self.left_pressed = pressed
        elif key in _RIGHT_KEYS:
            self.right_pressed = pressed
        else:
            return False
        return True

    def movement(self) -> Vec3:
        # Diagonals sum without normalization.
        x = 0.0
        y = 0.0
        if self.up_pressed:
            y += 1.0
        if self.down_pressed:
            y -= 1.0
        if self.left_pressed:
            x -= 1.0
        if self.right_pressed:
            x += 1.0
        return Vec3(x, y, 0.0)


@dataclass(frozen=True, slots=True)
class StateUpdate:
    up: bool
    down: bool
    left: bool
    right: bool
    dt: float
    delta: Vec3

    @classmethod
    def from_keys(cls, keys: KeyState, dt: float) -> StateUpdate:
        return cls(
            up=bool(keys.up_pressed),
            down=bool(keys.down_pressed),
            left=bool(keys.left_pressed),
            right=bool(keys.right_pressed),
            dt=float(dt),
            delta=keys.movement() * float(dt),
        )

    def __str__(self) -> str:
        return (
            f"StateUpdate(up={int(self.up)}, down={int(self.down)}, left={int(self.left)}, "
            f"right={int(self.right)}, dt={self.dt:g}, delta={self.delta})"
        )


@dataclass(slots=True)
class Simulation:
    """Toy entity whose position trajectory is compared between record and playback."""

    keys: KeyState = field(default_factory=KeyState)
    position: Vec3 = field(default_factory=Vec3)
    tick_index: int = 0
    trajectory: list[Vec3] = field(default_factory=list)

    def on_key_event(self, event: InputEvent) -> None:
        self.keys.apply(event)

    def update_for(self, dt: float) -> StateUpdate:
        return StateUpdate.from_keys(self.keys, dt)

    def step(self, dt: float) -> StateUpdate:
        update = self.update_for(dt)
        self.position = self.position + update.delta
        self.trajectory.append(self.position)
        self.tick_index += 1
        return update
