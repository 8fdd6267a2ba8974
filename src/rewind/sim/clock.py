from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickPacer:
    """Deadline tracker that keeps a live loop near `tick_rate` ticks per second."""

    tick_rate: int = 60
    next_deadline: float | None = None

    def __post_init__(self) -> None:
        tick_rate = int(self.tick_rate)
        if tick_rate <= 0:
            raise ValueError(f"tick_rate must be positive, got {tick_rate}")
        self.tick_rate = tick_rate

    @property
    def dt_tick(self) -> float:
        return 1.0 / float(self.tick_rate)

    def reset(self, now: float) -> None:
        self.next_deadline = float(now) + self.dt_tick

    def wait_time(self, now: float) -> float:
        """Seconds left until the next deadline (0 when already late)."""
        if self.next_deadline is None:
            self.reset(now)
        assert self.next_deadline is not None
        return max(0.0, self.next_deadline - float(now))

    def advance(self, now: float) -> None:
        if self.next_deadline is None:
            self.reset(now)
            return
        self.next_deadline += self.dt_tick
        # Do not try to catch up after a long stall; resync to the current time.
        if self.next_deadline < float(now):
            self.next_deadline = float(now) + self.dt_tick
