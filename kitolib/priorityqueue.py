"""A min-priority queue of arbitrary values."""

from __future__ import annotations

import heapq
import itertools
from typing import Any


class PriorityQueue:
    """Values come out lowest priority first; ties come out in insertion order."""

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, Any]] = []
        self._counter = itertools.count()

    def push(self, value: Any, priority: float) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), value))

    def pop(self) -> Any:
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        return heapq.heappop(self._heap)[2]

    def __len__(self) -> int:
        return len(self._heap)

    def empty(self) -> bool:
        return not self._heap