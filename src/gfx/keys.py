from __future__ import annotations

from enum import IntEnum

# Key codes follow the GLFW numbering, which raylib's `KeyboardKey` reuses.
KEY_SPACE = 32
KEY_A = 65
KEY_D = 68
KEY_S = 83
KEY_W = 87
KEY_ESCAPE = 256
KEY_RIGHT = 262
KEY_LEFT = 263
KEY_DOWN = 264
KEY_UP = 265
KEY_LEFT_SHIFT = 340
KEY_LEFT_CONTROL = 341
KEY_LEFT_ALT = 342
KEY_LEFT_SUPER = 343
KEY_RIGHT_SHIFT = 344
KEY_RIGHT_CONTROL = 345
KEY_RIGHT_ALT = 346
KEY_RIGHT_SUPER = 347

MOD_SHIFT = 1 << 0
MOD_CONTROL = 1 << 1
MOD_ALT = 1 << 2
MOD_SUPER = 1 << 3

# Keys whose press/release edges are harvested from the window every frame.
TRACKED_KEYS: tuple[int, ...] = (
    KEY_W,
    KEY_A,
    KEY_S,
    KEY_D,
    KEY_UP,
    KEY_DOWN,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_SPACE,
)

MODIFIER_KEYS: tuple[tuple[int, int], ...] = (
    (KEY_LEFT_SHIFT, MOD_SHIFT),
    (KEY_RIGHT_SHIFT, MOD_SHIFT),
    (KEY_LEFT_CONTROL, MOD_CONTROL),
    (KEY_RIGHT_CONTROL, MOD_CONTROL),
    (KEY_LEFT_ALT, MOD_ALT),
    (KEY_RIGHT_ALT, MOD_ALT),
    (KEY_LEFT_SUPER, MOD_SUPER),
    (KEY_RIGHT_SUPER, MOD_SUPER),
)


class KeyAction(IntEnum):
    """Key transition kinds, numbered like GLFW's `GLFW_RELEASE/PRESS/REPEAT`."""

    RELEASE = 0
    PRESS = 1
    REPEAT = 2


def key_name(key_code: int) -> str:
    key_code = int(key_code)
    name = {
        KEY_SPACE: "Space",
        KEY_A: "A",
        KEY_D: "D",
        KEY_S: "S",
        KEY_W: "W",
        KEY_ESCAPE: "Escape",
        KEY_RIGHT: "Right",
        KEY_LEFT: "Left",
        KEY_DOWN: "Down",
        KEY_UP: "Up",
    }.get(key_code)
    if name is not None:
        return name
    return f"KEY_{key_code:04X}"


def key_code_from_name(name: str) -> int | None:
    wanted = str(name).strip().lower()
    for code in TRACKED_KEYS + (KEY_ESCAPE,):
        if key_name(code).lower() == wanted:
            return code
    return None


def modifier_bits(down_keys: set[int] | frozenset[int]) -> int:
    mods = 0
    for key_code, bit in MODIFIER_KEYS:
        if key_code in down_keys:
            mods |= bit
    return int(mods)
