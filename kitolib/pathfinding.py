"""Path planning over a navigation mesh with funnel smoothing."""

from __future__ import annotations

from collections.abc import Sequence

from kitolib.geometry import Point
from kitolib.navmesh import NavMesh, NavNode, Portal
from kitolib.priorityqueue import PriorityQueue
from kitolib.vecmath import Vec3, cross_2d

FLOAT_EPSILON = 0.001 * 0.001


class Planner:
    """Finds paths across a navigation mesh."""

    def __init__(self, navmesh: NavMesh | None = None) -> None:
        self._navmesh = navmesh

    def set_nav_mesh(self, navmesh: NavMesh) -> None:
        self._navmesh = navmesh

    def find_path(self, start: Point, goal: Point) -> list[Point] | None:
        """Points from ``start`` to ``goal`` inclusive, or None when there is no path."""
        if start == goal:
            return [start, goal]

        rough_path = self._find_path(start, goal)
        if rough_path is None:
            return None

        if len(rough_path) >= 3:
            return smooth_path(self._find_portals(rough_path))

        return [node.point for node in rough_path]

    def _require_navmesh(self) -> NavMesh:
        if self._navmesh is None:
            raise RuntimeError("no navigation mesh has been set")
        return self._navmesh

    def _find_portals(self, path: Sequence[NavNode]) -> list[Portal]:
        if not path:
            return []
        navmesh = self._require_navmesh()
        first = path[0].point
        portals = [Portal(first, first)]
        previous = path[0].polygon
        for node in path:
            if node.polygon is not previous:
                portals.append(navmesh.portal_between(previous, node.polygon))
                previous = node.polygon
        last = path[-1].point
        portals.append(Portal(last, last))
        return portals

    def _find_path(self, start: Point, goal: Point) -> list[NavNode] | None:
        navmesh = self._require_navmesh()
        frontier = PriorityQueue()
        came_from: dict[NavNode, NavNode] = {}
        cost_so_far: dict[NavNode, float] = {}

        start_node: NavNode | None = None
        goal_node: NavNode | None = None

        for polygon in navmesh.polygons:
            if start_node is not None and goal_node is not None:
                break
            if start_node is None and polygon.contains_point(start):
                start_node = NavNode(start, polygon)
                for point in polygon.points:
                    node = NavNode(point, polygon)
                    cost = (point - start).length()
                    came_from[node] = start_node
                    cost_so_far[node] = cost
                    frontier.push(node, cost)
            if goal_node is None and polygon.contains_point(goal):
                goal_node = NavNode(goal, polygon)

        if start_node is None or goal_node is None:
            return None

        if start_node.polygon is goal_node.polygon:
            return [start_node, goal_node]

        goal_neighbors = {NavNode(point, goal_node.polygon) for point in goal_node.polygon.points}
        explored: set[NavNode] = set()

        while not frontier.empty():
            current = frontier.pop()
            if current == goal_node:
                break
            explored.add(current)

            neighbors = navmesh.neighbors(current)
            if current in goal_neighbors:
                neighbors.append(goal_node)

            for neighbor in neighbors:
                if neighbor in explored:
                    continue
                new_cost = cost_so_far.get(current, 0.0) + navmesh.cost(
                    current.point, neighbor.point
                )
                known = cost_so_far.get(neighbor)
                if known is None or new_cost < known:
                    cost_so_far[neighbor] = new_cost
                    frontier.push(neighbor, new_cost + navmesh.cost(goal_node.point, neighbor.point))
                    came_from[neighbor] = current

        if goal_node not in came_from:
            return None

        path = [goal_node]
        node = goal_node
        while node != start_node:
            node = came_from[node]
            path.append(node)
        path.reverse()
        return path


def order_portal_points(portals: Sequence[Portal]) -> list[Point]:
    """Flatten portals into (left, right) point pairs with a consistent side order."""
    first = portals[0]
    points = [first.point1, first.point2]
    prev_left, prev_right = first.point1, first.point2

    for portal in portals[1:]:
        next_left, next_right = portal.point1, portal.point2
        left_vec = next_left - prev_left
        right_vec = next_right - prev_right
        if cross_2d(right_vec, left_vec) > 0:
            next_left, next_right = next_right, next_left
        points.extend((next_left, next_right))
        prev_left, prev_right = next_left, next_right

    return points


def _vec_on_left(reference: Vec3, v: Vec3) -> bool:
    return cross_2d(reference, v) < FLOAT_EPSILON


def _vec_on_right(reference: Vec3, v: Vec3) -> bool:
    return cross_2d(reference, v) > -FLOAT_EPSILON


def smooth_path(portals: Sequence[Portal]) -> list[Point]:
    """Pull a path taut through a corridor of portals (simple stupid funnel)."""
    portal_points = order_portal_points(portals)

    # these index the left point of a portal pair; they mark where to resume
    # the scan after the apex moves
    last_valid_left_index = 0
    last_valid_right_index = 0

    apex = portal_points[0]
    portal_left = apex
    portal_right = apex
    contact_points = [apex]

    i = 2
    while i < len(portal_points):
        left_point = portal_points[i]
        right_point = portal_points[i + 1]

        left_vec = left_point - apex
        right_vec = right_point - apex
        last_valid_left_vec = portal_left - apex
        last_valid_right_vec = portal_right - apex

        if _vec_on_left(left_vec, last_valid_left_vec):
            if portal_left == apex or not _vec_on_right(last_valid_right_vec, left_vec):
                portal_left = left_point
                last_valid_left_index = i
            else:
                apex = portal_right
                portal_left = apex
                if contact_points[-1] != apex:
                    contact_points.append(apex)
                last_valid_left_index = last_valid_right_index
                i = last_valid_right_index + 2
                continue

        if _vec_on_right(right_vec, last_valid_right_vec):
            if portal_right == apex or not _vec_on_left(last_valid_left_vec, right_vec):
                portal_right = right_point
                last_valid_right_index = i
            else:
                apex = portal_left
                portal_right = apex
                if contact_points[-1] != apex:
                    contact_points.append(apex)
                last_valid_right_index = last_valid_left_index
                i = last_valid_left_index + 2
                continue

        i += 2

    if contact_points[-1] != portal_points[-1]:
        contact_points.append(portal_points[-1])

    return contact_points