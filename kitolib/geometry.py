"""Convex polygons lying on the XZ plane."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from kitolib.vecmath import Vec3, cross_2d

EPSILON = 0.1

Point = Vec3


@dataclass(frozen=True)
class Edge:
    a: Point
    b: Point


class Polygon:
    """A convex polygon with counter-clockwise winding; compared by identity."""

    def __init__(self, points: Iterable[Point]) -> None:
        self._points = tuple(points)
        if len(self._points) < 3:
            raise ValueError(f"a polygon needs at least 3 points, got {len(self._points)}")

    @property
    def points(self) -> tuple[Point, ...]:
        return self._points

    def __repr__(self) -> str:
        return f"Polygon({list(self._points)!r})"

    def _point_pairs(self):
        return zip(self._points, self._points[1:] + self._points[:1])

    def edges(self) -> list[Edge]:
        return [Edge(a, b) for a, b in self._point_pairs()]

    def contains_point(self, point: Point) -> bool:
        """Whether ``point`` lies inside or on the border of the polygon."""
        for current, following in self._point_pairs():
            if cross_2d(following - current, point - current) > 0:
                return False
        return self._coplanar(point)

    def _coplanar(self, point: Point) -> bool:
        p0, p1, p2 = self._points[:3]
        vec1 = p1 - p0
        vec2 = p2 - p1
        vec3 = point - p2
        return abs(vec1.cross(vec2).dot(vec3)) < EPSILON