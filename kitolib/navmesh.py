"""Navigation meshes built from convex polygons that share edges."""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import dataclass, field

from kitolib.geometry import Point, Polygon
from kitolib.vecmath import Vec3


@dataclass(frozen=True)
class NavNode:
    """A polygon vertex (or any point) as seen from one particular polygon."""

    point: Point
    polygon: Polygon


@dataclass(frozen=True)
class Portal:
    """An edge joining two polygons."""

    point1: Point
    point2: Point

    def __str__(self) -> str:
        return f"P{{{self.point1}, {self.point2}}}"


def _ordered_portal(point1: Point, point2: Point) -> Portal:
    """A portal whose end points are ordered so that both polygons agree on it."""
    for a, b in zip(point1, point2):
        if a != b:
            return Portal(point1, point2) if a > b else Portal(point2, point1)
    return Portal(point1, point2)


@dataclass
class NavMeshRenderData:
    id: str = ""
    visible: bool = False

    def is_visible(self) -> bool:
        return True


@dataclass
class RenderComponent:
    render_data: NavMeshRenderData = field(default_factory=NavMeshRenderData)

    @property
    def position(self) -> Vec3:
        """A navigation mesh always sits at the origin."""
        return Vec3()

    @position.setter
    def position(self, value: Vec3) -> None:
        # the mesh cannot be moved
        pass


class NavMesh:
    """A graph of polygon vertices, linked across the edges that polygons share."""

    def __init__(self, polygons: Iterable[Polygon] = ()) -> None:
        self._neighbors: dict[NavNode, list[NavNode]] = {}
        self._polygons: list[Polygon] = []
        self._portal_to_polygons: dict[Portal, list[Polygon]] = {}
        self._poly_pair_to_portal: dict[Polygon, dict[Polygon, Portal]] = {}
        for polygon in polygons:
            self.add_polygon(polygon)
        self.render_component = RenderComponent(NavMeshRenderData(id="tile", visible=True))

    @property
    def polygons(self) -> list[Polygon]:
        return list(self._polygons)

    def _link(self, source: NavNode, target: NavNode) -> None:
        self._neighbors.setdefault(source, []).append(target)

    def add_polygon(self, polygon: Polygon) -> None:
        """Add a polygon, joining it to any polygon already added that shares an edge."""
        self._polygons.append(polygon)
        for point1, point2 in itertools.combinations(polygon.points, 2):
            node1 = NavNode(point1, polygon)
            node2 = NavNode(point2, polygon)
            self._link(node1, node2)
            self._link(node2, node1)

            portal = _ordered_portal(point1, point2)
            sharing = self._portal_to_polygons.setdefault(portal, [])
            if len(sharing) == 1 and sharing[0] is not polygon:
                other = sharing[0]
                self._poly_pair_to_portal.setdefault(polygon, {})[other] = portal
                self._poly_pair_to_portal.setdefault(other, {})[polygon] = portal

                # the end points of the shared edge are the same place in both polygons
                for point in (point1, point2):
                    here = NavNode(point, polygon)
                    there = NavNode(point, other)
                    self._link(here, there)
                    self._link(there, here)
            sharing.append(polygon)

    def neighbors(self, node: NavNode) -> list[NavNode]:
        """A fresh list of the nodes directly reachable from ``node``."""
        return list(self._neighbors.get(node, ()))

    def cost(self, start: Point, end: Point) -> float:
        """The straight-line distance between two points."""
        return (start - end).length()

    def portal_between(self, polygon1: Polygon, polygon2: Polygon) -> Portal:
        """The edge shared by two neighbouring polygons; KeyError if they share none."""
        return self._poly_pair_to_portal[polygon1][polygon2]