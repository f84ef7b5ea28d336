from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol


@dataclass
class TimerHandle:
    delay_ms: int
    due_ms: int
    seq: int
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


@dataclass
class VirtualClock:
    """Deterministic scheduler driven by explicit time advances.

    Nothing runs until `advance` is called, so rules can be tested without
    waiting on wall-clock time. The pygame client advances it once per frame.
    """

    now_ms: int = 0
    _timers: list[TimerHandle] = field(default_factory=list)
    _seq: int = 0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        delay = max(0, int(delay_ms))
        self._seq += 1
        handle = TimerHandle(delay_ms=delay, due_ms=self.now_ms + delay, seq=self._seq, callback=callback)
        self._timers.append(handle)
        return handle

    @property
    def pending(self) -> list[TimerHandle]:
        live = [t for t in self._timers if t.active]
        return sorted(live, key=lambda t: (t.due_ms, t.seq))

    def _next_due(self, until_ms: int) -> TimerHandle | None:
        for t in self.pending:
            if t.due_ms <= until_ms:
                return t
            break
        return None

    def advance(self, ms: float) -> int:
        """Move time forward, firing due timers in order. Returns how many fired."""
        target = self.now_ms + max(0, int(ms))
        fired = 0
        while True:
            t = self._next_due(target)
            if t is None:
                break
            self.now_ms = max(self.now_ms, t.due_ms)
            t.fired = True
            self._timers.remove(t)
            t.callback()
            fired += 1
        self.now_ms = target
        self._timers = [t for t in self._timers if t.active]
        return fired

    def run_all(self) -> int:
        fired = 0
        while self.pending:
            fired += self.advance(self.pending[0].due_ms - self.now_ms)
        return fired
