"""Cancellable delayed calls used for recognition auto-restart."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, List


class ThreadingScheduler:
    """Runs callbacks on a daemon ``threading.Timer`` after a delay."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay_ms / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return timer


@dataclass
class ScheduledCall:
    due_ms: int
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Scheduler driven by an explicit clock, for replaying sessions and tests.

    Nothing runs until ``advance`` (or ``run_pending``) is called.
    """
    now_ms: int = 0
    calls: List[ScheduledCall] = field(default_factory=list)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(due_ms=self.now_ms + delay_ms, callback=callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> List[ScheduledCall]:
        return [c for c in self.calls if not c.cancelled and not c.fired]

    def advance(self, delta_ms: int) -> int:
        """Move the clock forward and fire every call that came due, in order.

        Returns:
            Number of callbacks fired
        """
        self.now_ms += delta_ms
        fired = 0
        for call in sorted(self.pending, key=lambda c: c.due_ms):
            if call.due_ms > self.now_ms or call.cancelled:
                continue
            call.fired = True
            call.callback()
            fired += 1
        return fired

    def run_pending(self) -> int:
        """Fire everything scheduled so far, regardless of due time."""
        if not self.pending:
            return 0
        latest = max(c.due_ms for c in self.pending)
        return self.advance(max(0, latest - self.now_ms))
