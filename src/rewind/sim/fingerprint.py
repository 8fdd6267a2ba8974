from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import hashlib
import struct

from gfx.geom import Vec3

_U32 = struct.Struct("<I")
_VEC3 = struct.Struct("<ddd")


def _h_u32(h: "hashlib._Hash", value: int) -> None:
    h.update(_U32.pack(int(value) & 0xFFFF_FFFF))


def _vec_bits(pos: Vec3) -> bytes:
    return _VEC3.pack(float(pos.x), float(pos.y), float(pos.z))


def fingerprint_trajectory(trajectory: Sequence[Vec3]) -> int:
    """Return a stable 64-bit digest of a tick-by-tick position sequence.

    Positions are packed as float64 so that any bit difference shows up.
    """

    h = hashlib.blake2b(digest_size=8)
    _h_u32(h, len(trajectory))
    for pos in trajectory:
        h.update(_vec_bits(pos))
    return int.from_bytes(h.digest(), "little")


@dataclass(frozen=True, slots=True)
class TrajectoryDiff:
    ok: bool
    checked_count: int
    first_mismatch_tick: int | None = None
    expected: Vec3 | None = None
    actual: Vec3 | None = None


def compare_trajectories(expected: Sequence[Vec3], actual: Sequence[Vec3]) -> TrajectoryDiff:
    """Find the first tick whose position differs bit-for-bit (so 0.0 != -0.0)."""

    checked = min(len(expected), len(actual))
    for idx in range(checked):
        if _vec_bits(expected[idx]) != _vec_bits(actual[idx]):
            return TrajectoryDiff(
                ok=False,
                checked_count=idx + 1,
                first_mismatch_tick=idx,
                expected=expected[idx],
                actual=actual[idx],
            )
    if len(expected) != len(actual):
        idx = checked
        return TrajectoryDiff(
            ok=False,
            checked_count=checked,
            first_mismatch_tick=idx,
            expected=expected[idx] if idx < len(expected) else None,
            actual=actual[idx] if idx < len(actual) else None,
        )
    return TrajectoryDiff(ok=True, checked_count=checked)
