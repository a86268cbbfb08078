"""Named metrics with a rolling one-second window."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

BUCKET_SIZE = 10000
WINDOW_SECONDS = 1.0


@dataclass
class _Metric:
    window: deque[tuple[float, float]] = field(default_factory=deque)
    window_sum: float = 0.0
    latest: float = 0.0


class MetricsRegistry:
    """Records values per name and reports the latest value and one-second totals.

    At most ``BUCKET_SIZE`` data points are kept per name.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._metrics: dict[str, _Metric] = {}

    def inc(self, name: str, value: float) -> None:
        metric = self._metrics.setdefault(name, _Metric())
        if len(metric.window) == BUCKET_SIZE:
            _, dropped = metric.window.popleft()
            metric.window_sum -= dropped
        metric.window.append((self._clock(), value))
        metric.window_sum += value
        metric.latest = value
        self._advance(metric)

    def get_latest(self, name: str) -> float:
        metric = self._metrics.get(name)
        if metric is None:
            return 0.0
        self._advance(metric)
        return metric.latest

    def get_one_second_sum(self, name: str) -> float:
        metric = self._metrics.get(name)
        if metric is None:
            return 0.0
        self._advance(metric)
        return metric.window_sum

    def get_one_second_average(self, name: str) -> float:
        metric = self._metrics.get(name)
        if metric is None:
            return 0.0
        total = self.get_one_second_sum(name)
        count = len(metric.window)
        return total / count if count else 0.0

    def _advance(self, metric: _Metric) -> None:
        """Drop data points older than the window."""
        now = self._clock()
        window = metric.window
        while window and now - window[0][0] > WINDOW_SECONDS:
            _, value = window.popleft()
            metric.window_sum -= value