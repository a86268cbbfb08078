from dataclasses import dataclass

from kitolib.collider import BoundingBox
from kitolib.spatialpartition import SpatialPartition
from kitolib.vecmath import Vec3


@dataclass
class _Entity:
    id: int
    position: Vec3
    bounding_box: BoundingBox


def _cube(center, half):
    return BoundingBox(
        Vec3(center.x - half, center.y - half, center.z - half),
        Vec3(center.x + half, center.y + half, center.z + half),
    )


def _entity(entity_id, center, half=1):
    return _Entity(entity_id, center, _cube(center, half))


def test_partition_count():
    p = SpatialPartition(5, 3)
    count = sum(1 for plane in p.partitions for row in plane for _ in row)
    assert count == 27


def test_partition_bounds():
    p = SpatialPartition(5, 3)
    first = p.partitions[0][0][0]
    assert first.key == (0, 0, 0)
    assert first.aabb.min_vertex == Vec3(-7, -7, -7)
    assert first.aabb.max_vertex == Vec3(-2, -2, -2)
    assert str(p.partitions[0][1][2]) == "Partition [0 1 2]"


def test_vertex_to_partition():
    p = SpatialPartition(10, 4)
    assert p.vertex_to_partition_clamped(Vec3(0, 0, 0), False, False) == (2, 2, 2)
    assert p.vertex_to_partition_clamped(Vec3(-30, 0, 0), True, False) == (0, 2, 2)
    assert p.vertex_to_partition_clamped(Vec3(-30, 0, 0), False, False) is None
    assert p.vertex_to_partition_clamped(Vec3(30, 0, 0), False, True) == (3, 2, 2)
    assert p.vertex_to_partition_clamped(Vec3(30, 0, 0), False, False) is None


def test_intersecting_partitions():
    p = SpatialPartition(10, 4)
    keys = p.intersecting_partitions(_cube(Vec3(0, 0, 0), 1))
    assert sorted(keys) == [
        (i, j, k) for i in (1, 2) for j in (1, 2) for k in (1, 2)
    ]
    everything = p.intersecting_partitions(_cube(Vec3(0, 0, 0), 100))
    assert len(everything) == 64
    outside = BoundingBox(Vec3(25, 25, 25), Vec3(30, 30, 30))
    assert p.intersecting_partitions(outside) == []


def test_index_and_query():
    p = SpatialPartition(10, 4)
    entity = _entity(7, Vec3(0, 0, 0))
    p.index_entities([entity])
    found = p.query_entities(_cube(Vec3(0.2, 0.2, 0.2), 0.1))
    assert [e.id for e in found] == [7]
    assert p.query_entities(_cube(Vec3(15, 15, 15), 0.5)) == []
    assert [e.id for e in p.query_entities(_cube(Vec3(0, 0, 0), 100))] == [7]


def test_moving_entity_reindexes():
    p = SpatialPartition(10, 4)
    entity = _entity(1, Vec3(0, 0, 0))
    p.index_entities([entity])
    entity.position = Vec3(15, 15, 15)
    entity.bounding_box = _cube(entity.position, 0.5)
    p.index_entities([entity])
    assert p.query_entities(_cube(Vec3(0.2, 0.2, 0.2), 0.1)) == []
    assert [e.id for e in p.query_entities(_cube(Vec3(15, 15, 15), 0.1))] == [1]


def test_unchanged_position_is_skipped():
    p = SpatialPartition(10, 4)
    entity = _entity(1, Vec3(0, 0, 0))
    p.index_entities([entity])
    entity.bounding_box = _cube(Vec3(15, 15, 15), 0.5)
    p.index_entities([entity])
    assert [e.id for e in p.query_entities(_cube(Vec3(0.2, 0.2, 0.2), 0.1))] == [1]
    assert p.query_entities(_cube(Vec3(15, 15, 15), 0.1)) == []


def test_delete_and_clear():
    p = SpatialPartition(10, 4)
    p.index_entities([_entity(1, Vec3(0, 0, 0)), _entity(2, Vec3(-15, -15, -15))])
    p.delete_entity(1)
    ids = [e.id for e in p.query_entities(_cube(Vec3(0, 0, 0), 100))]
    assert ids == [2]
    p.clear()
    assert p.query_entities(_cube(Vec3(0, 0, 0), 100)) == []