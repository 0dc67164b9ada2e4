"""Single-threaded timer service for the cooperative main loop.

Callbacks never run on their own: the owner pumps :meth:`TimerQueue.run_due`
once per loop iteration, so every callback runs on the same thread as
the code that scheduled it.
"""

import heapq
import itertools
import time
from typing import Callable, List, Optional


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class TimerHandle:
    """Returned by :meth:`TimerQueue.call_later`. ``cancel()`` is idempotent."""

    __slots__ = ("deadline", "seq", "callback", "cancelled")

    def __init__(self, deadline: float, seq: int, callback: Callable[[], None]):
        self.deadline = deadline
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        self.callback = None

    def __lt__(self, other: "TimerHandle") -> bool:
        return (self.deadline, self.seq) < (other.deadline, other.seq)


class TimerQueue:
    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self.clock = clock
        self._heap: List[TimerHandle] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        return self.call_at(self.clock() + max(0.0, delay_ms), callback)

    def call_at(self, deadline_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule at an absolute clock time. A deadline in the past fires on the next pump."""
        handle = TimerHandle(deadline_ms, next(self._counter), callback)
        heapq.heappush(self._heap, handle)
        return handle

    def run_due(self) -> int:
        """Fire every callback whose deadline has passed. Returns how many ran."""
        fired = 0
        while self._heap:
            head = self._heap[0]
            if head.cancelled:
                heapq.heappop(self._heap)
                continue
            if head.deadline > self.clock():
                break
            heapq.heappop(self._heap)
            callback = head.callback
            head.cancel()
            callback()
            fired += 1
        return fired

    def next_delay_ms(self) -> Optional[float]:
        """Milliseconds until the next live timer, or None if nothing is pending."""
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
        if not self._heap:
            return None
        return max(0.0, self._heap[0].deadline - self.clock())

    def cancel_all(self) -> None:
        for handle in self._heap:
            handle.cancel()
        self._heap.clear()
