# timer.py

import time


class Timer:
    """
    Countdown driven by the caller's own time deltas (e.g. frame dt).
    tick() reports whether the accumulated time has reached the target.
    """
    def __init__(self, seconds: float):
        self.seconds = seconds
        self.elapsed = 0.0

    def tick(self, delta: float) -> bool:
        self.elapsed += delta
        return self.elapsed >= self.seconds

    def reset(self):
        self.elapsed = 0.0


class IntervalTimer:
    """Wall-clock interval measured from the last reset."""
    def __init__(self, seconds: float, clock=time.perf_counter):
        self.seconds = seconds
        self._clock = clock
        self._start = clock()

    def tick(self) -> bool:
        return self._clock() - self._start >= self.seconds

    def tick_reset(self) -> bool:
        """Like tick(), but restarts the interval when it has elapsed."""
        if self.tick():
            self.reset()
            return True
        return False

    def reset(self):
        self._start = self._clock()
