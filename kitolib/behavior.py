"""Behaviour tree nodes: sequences, selectors, values and a shared memory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from enum import IntEnum
from typing import Any


class Status(IntEnum):
    RUNNING = 0
    SUCCESS = 1
    FAILURE = 2


@dataclass
class AIState:
    black_board: dict[str, str] = field(default_factory=dict)


class Node(ABC):
    """A behaviour tree node; nodes are compared and hashed by identity."""

    @abstractmethod
    def tick(self, value: Any, state: AIState, delta: timedelta) -> tuple[Any, Status]:
        """Run the node on ``value`` and return its output and status."""

    @abstractmethod
    def reset(self) -> None:
        """Forget any state kept between ticks."""


class NodeCache:
    """Remembers which nodes have finished, with success or failure."""

    def __init__(self) -> None:
        self._cache: dict[Node, Status] = {}

    def add(self, node: Node, status: Status) -> None:
        # running nodes must be evaluated again
        if status in (Status.SUCCESS, Status.FAILURE):
            self._cache[node] = status

    def get(self, node: Node) -> Status:
        return self._cache.get(node, Status.RUNNING)

    def contains(self, node: Node) -> bool:
        return node in self._cache

    __contains__ = contains

    def reset(self) -> None:
        self._cache = {}


class Memory:
    """A key-value store shared by the Set and Get nodes it creates."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def set(self, key: str) -> Set:
        return Set(self, key)

    def get(self, key: str) -> Get:
        return Get(self, key)

    def reset(self) -> None:
        self._data = {}


class Set(Node):
    """Stores its input under a key and passes it on."""

    def __init__(self, memory: Memory, key: str) -> None:
        self._memory = memory
        self._key = key

    def tick(self, value: Any, state: AIState, delta: timedelta) -> tuple[Any, Status]:
        self._memory._data[self._key] = value
        return value, Status.SUCCESS

    def reset(self) -> None:
        self._memory.reset()


class Get(Node):
    """Outputs the value stored under a key; fails when there is none."""

    def __init__(self, memory: Memory, key: str) -> None:
        self._memory = memory
        self._key = key

    def tick(self, value: Any, state: AIState, delta: timedelta) -> tuple[Any, Status]:
        if self._key in self._memory._data:
            return self._memory._data[self._key], Status.SUCCESS
        return None, Status.FAILURE

    def reset(self) -> None:
        self._memory.reset()


class Selector(Node):
    """Succeeds as soon as one child succeeds; fails if none does."""

    def __init__(self) -> None:
        self.children: list[Node] = []

    def add_child(self, node: Node) -> None:
        self.children.append(node)

    def tick(self, value: Any, state: AIState, delta: timedelta) -> tuple[Any, Status]:
        for child in self.children:
            value, status = child.tick(value, state, delta)
            if status == Status.SUCCESS:
                return None, Status.SUCCESS
        return None, Status.FAILURE

    def reset(self) -> None:
        for child in self.children:
            child.reset()


class Sequence(Node):
    """Runs children in order, feeding each the previous output.

    Stops at the first child that does not succeed. Finished children are
    remembered until the sequence is reset.
    """

    def __init__(self) -> None:
        self.children: list[Node] = []
        self._cache = NodeCache()

    def add_child(self, node: Node) -> None:
        self.children.append(node)

    def tick(self, value: Any, state: AIState, delta: timedelta) -> tuple[Any, Status]:
        for child in self.children:
            if child in self._cache:
                status = self._cache.get(child)
            else:
                value, status = child.tick(value, state, delta)
                self._cache.add(child, status)
            if status != Status.SUCCESS:
                return None, status
        return None, Status.SUCCESS

    def reset(self) -> None:
        self._cache.reset()
        for child in self.children:
            child.reset()


class Value(Node):
    """Always succeeds, outputting a fixed value."""

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def tick(self, value: Any, state: AIState, delta: timedelta) -> tuple[Any, Status]:
        return self.value, Status.SUCCESS

    def reset(self) -> None:
        pass