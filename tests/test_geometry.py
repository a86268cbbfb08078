import pytest

from kitolib.geometry import Edge, Polygon
from kitolib.vecmath import Vec3


def _default_polygon():
    return Polygon([Vec3(0, 0, 0), Vec3(0, 0, 6), Vec3(6, 0, 6), Vec3(6, 0, 0)])


@pytest.mark.parametrize(
    "point",
    [
        Vec3(3, 0, 0),
        Vec3(3, 0, 6),
        Vec3(0, 0, 3),
        Vec3(0, 0, 0),
        Vec3(0, 0, 6),
        Vec3(6, 0, 6),
        Vec3(6, 0, 0),
    ],
)
def test_contains_point_on_border(point):
    assert _default_polygon().contains_point(point) is True


@pytest.mark.parametrize(
    "point", [Vec3(3, 0, 3), Vec3(1, 0, 2), Vec3(5, 0, 4), Vec3(3, 0, 1)]
)
def test_contains_point_within_border(point):
    assert _default_polygon().contains_point(point) is True


@pytest.mark.parametrize(
    "point", [Vec3(3, 0, -10), Vec3(3, 0, 10), Vec3(10, 0, 3), Vec3(-10, 0, 3)]
)
def test_does_not_contain_point(point):
    assert _default_polygon().contains_point(point) is False


def test_point_off_the_plane_is_not_contained():
    assert _default_polygon().contains_point(Vec3(3, 5, 3)) is False


def test_edges_wrap_around():
    edges = _default_polygon().edges()
    assert len(edges) == 4
    assert edges[0] == Edge(Vec3(0, 0, 0), Vec3(0, 0, 6))
    assert edges[-1] == Edge(Vec3(6, 0, 0), Vec3(0, 0, 0))


def test_too_few_points():
    with pytest.raises(ValueError):
        Polygon([Vec3(0, 0, 0), Vec3(1, 0, 0)])