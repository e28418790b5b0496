"""Counters and response time histograms of the executed actions."""

from __future__ import annotations

import bisect
import threading
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable

RESPONSE_TIME_BUCKETS = (0.5, 1.0, 2.0, 3.0, 4.0, 5.0)
STATUS_OK = "200"
STATUS_INTERNAL_ERROR = "500"


@dataclass
class _Histogram:
    buckets: tuple[float, ...]
    bucket_counts: list[int] = field(init=False)
    count: int = 0
    sum: float = 0.0

    def __post_init__(self) -> None:
        self.bucket_counts = [0] * len(self.buckets)

    def observe(self, value: float) -> None:
        self.count += 1
        self.sum += value
        for index in range(bisect.bisect_left(self.buckets, value), len(self.buckets)):
            self.bucket_counts[index] += 1


class ActionMetrics:
    """Tracks how many actions succeeded or failed and how long they took."""

    def __init__(
        self,
        clock: Callable[[], float] = time.perf_counter,
        buckets: Iterable[float] = RESPONSE_TIME_BUCKETS,
    ) -> None:
        self.clock = clock
        self.buckets = tuple(sorted(buckets))
        self.requests: Counter[tuple[str, str]] = Counter()
        self.errors: Counter[tuple[str, str]] = Counter()
        self.response_times: dict[tuple[str, str], _Histogram] = {}
        self._lock = threading.Lock()

    def success(self, path: str) -> None:
        """Count one successful action on the given path."""
        with self._lock:
            self.requests[(path, STATUS_OK)] += 1

    def error(self, path: str) -> None:
        """Count one failed action on the given path."""
        with self._lock:
            self.errors[(path, STATUS_INTERNAL_ERROR)] += 1

    def observe_response_time(self, path: str, start: float) -> float:
        """Record the time elapsed since ``start`` and return it in seconds."""
        elapsed = self.clock() - start
        key = (path, repr(elapsed))
        with self._lock:
            histogram = self.response_times.get(key)
            if histogram is None:
                histogram = self.response_times[key] = _Histogram(self.buckets)
            histogram.observe(elapsed)
        return elapsed