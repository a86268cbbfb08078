"""A uniform grid that buckets entities by their bounding boxes."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Protocol

from kitolib.collider import BoundingBox
from kitolib.vecmath import Vec3

PartitionKey = tuple[int, int, int]


class Entity(Protocol):
    id: int
    position: Vec3
    bounding_box: BoundingBox


@dataclass
class Partition:
    key: PartitionKey
    aabb: BoundingBox
    entities: dict[int, Entity] = field(default_factory=dict)

    def __str__(self) -> str:
        return "Partition [" + " ".join(str(k) for k in self.key) + "]"


class SpatialPartition:
    """A cube of ``partition_count`` cells per side, each ``partition_dimension`` wide.

    The grid is centred on the origin.
    """

    def __init__(self, partition_dimension: int, partition_count: int) -> None:
        self.partition_dimension = partition_dimension
        self.partition_count = partition_count
        self._initialize()

    def _initialize(self) -> None:
        self.partitions = _build_partitions(self.partition_dimension, self.partition_count)
        self._entity_partitions: dict[int, set[PartitionKey]] = {}
        self._entity_positions: dict[int, Vec3] = {}

    def clear(self) -> None:
        self._initialize()

    def _partition(self, key: PartitionKey) -> Partition:
        i, j, k = key
        return self.partitions[i][j][k]

    def query_entities(self, bounding_box: BoundingBox) -> list[Entity]:
        """Entities in any partition the bounding box touches, each once."""
        seen: set[int] = set()
        candidates = []
        for key in self.intersecting_partitions(bounding_box):
            for entity in self._partition(key).entities.values():
                if entity.id not in seen:
                    seen.add(entity.id)
                    candidates.append(entity)
        return candidates

    def index_entities(self, entities) -> None:
        """Place entities into the partitions their bounding boxes touch.

        Entities whose position has not changed since they were last indexed
        are left where they are.
        """
        for entity in entities:
            entity_id = entity.id
            position = entity.position
            if self._entity_positions.get(entity_id) == position:
                continue
            self._entity_positions[entity_id] = position

            for key in self._entity_partitions.get(entity_id, ()):
                self._partition(key).entities.pop(entity_id, None)

            new_keys = self.intersecting_partitions(entity.bounding_box)
            for key in new_keys:
                self._partition(key).entities[entity_id] = entity
            if new_keys:
                self._entity_partitions[entity_id] = set(new_keys)

    def intersecting_partitions(self, bounding_box: BoundingBox) -> list[PartitionKey]:
        low = self.vertex_to_partition_clamped(bounding_box.min_vertex, True, False)
        if low is None:
            return []
        high = self.vertex_to_partition_clamped(bounding_box.max_vertex, False, True)
        if high is None:
            return []
        ranges = (range(lo, hi + 1) for lo, hi in zip(low, high))
        return list(itertools.product(*ranges))

    def _min_vertex(self) -> Vec3:
        half = (self.partition_dimension * self.partition_count) // 2
        return Vec3(-half, -half, -half)

    def _max_vertex(self) -> Vec3:
        half = (self.partition_dimension * self.partition_count) // 2
        edge = self.partition_count * self.partition_dimension - half
        return Vec3(edge, edge, edge)

    def vertex_to_partition_clamped(
        self, vertex: Vec3, clamp_min: bool, clamp_max: bool
    ) -> PartitionKey | None:
        """The partition holding ``vertex``, or None when it lies outside the grid.

        With ``clamp_min`` coordinates below the grid map to the first cell;
        with ``clamp_max`` coordinates at or above the grid map to the last.
        """
        min_delta = vertex - self._min_vertex()
        max_delta = vertex - self._max_vertex()

        if not clamp_min and any(d < 0 for d in min_delta):
            return None
        if not clamp_max and any(d > 0 for d in max_delta):
            return None

        indices = []
        for low_d, high_d in zip(min_delta, max_delta):
            index = int(low_d / self.partition_dimension)
            if clamp_min and low_d < 0:
                index = 0
            if clamp_max and high_d >= 0:
                index = self.partition_count - 1
            indices.append(index)
        return indices[0], indices[1], indices[2]

    def delete_entity(self, entity_id: int) -> None:
        for key in self._entity_partitions.pop(entity_id, ()):
            self._partition(key).entities.pop(entity_id, None)
        self._entity_positions.pop(entity_id, None)


def _build_partitions(dimension: int, count: int) -> list[list[list[Partition]]]:
    half = (dimension * count) // 2

    def make(i: int, j: int, k: int) -> Partition:
        return Partition(
            key=(i, j, k),
            aabb=BoundingBox(
                Vec3(i * dimension - half, j * dimension - half, k * dimension - half),
                Vec3(
                    (i + 1) * dimension - half,
                    (j + 1) * dimension - half,
                    (k + 1) * dimension - half,
                ),
            ),
        )

    return [[[make(i, j, k) for k in range(count)] for j in range(count)] for i in range(count)]