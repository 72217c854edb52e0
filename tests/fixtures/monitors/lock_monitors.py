"""
Lock monitors used by the CLI and trace reader tests.

Event classes are named after their trace terms so that the trace
``acquire(1, 10)`` builds ``acquire(thread=1, lock=10)``.
"""

from dataclasses import dataclass

from datamon.core.monitor import Monitor
from datamon.core.state import State, ensure, error, lift, ok


@dataclass(frozen=True)
class acquire:
    thread: int
    lock: int


@dataclass(frozen=True)
class release:
    thread: int
    lock: int


@dataclass(frozen=True)
class Locked(State):
    thread: int
    lock: int


class AcquireRelease(Monitor):
    """A lock is held by one thread at a time and is eventually released."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.always(self.idle)

    def idle(self, event):
        if isinstance(event, acquire):
            return self.find(
                lambda s: lift(ok) if isinstance(s, Locked) and s.lock == event.lock else None,
                orelse=lambda: lift(self.locked(event.thread, event.lock)),
            )
        if isinstance(event, release):
            return lift(ensure(self.holds(Locked(event.thread, event.lock))))
        return None

    def locked(self, thread, lock):
        def step(event):
            if isinstance(event, acquire) and event.lock == lock:
                return lift(error)
            if isinstance(event, release) and (event.thread, event.lock) == (thread, lock):
                return lift(ok)
            return None

        return Locked(thread, lock).hot(step)


class LockOrder(Monitor):
    """Groups lock monitors; used to exercise sub-monitor aggregation."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.monitor(AcquireRelease(), AcquireRelease(name="AcquireReleaseCopy"))
