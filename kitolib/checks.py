"""Geometric queries between points, rays, segments, planes and triangles."""

from __future__ import annotations

from collections.abc import Iterable

from kitolib.collider import BoundingBox, Line, Plane, Ray, Triangle, TriMesh
from kitolib.vecmath import Vec3, clamp

EPSILON = 0.000001

PointPair = tuple[Vec3, Vec3]


def project_point_on_plane(point: Vec3, plane: Plane) -> Vec3:
    t = (point - plane.point).dot(plane.normal)
    return point + plane.normal * (-t)


def intersect_ray_plane(ray: Ray, plane: Plane) -> Vec3 | None:
    """The point where ``ray`` meets ``plane``, or None if it never does."""
    direction_dot_normal = ray.direction.dot(plane.normal)
    if direction_dot_normal == 0:
        return None
    t = (plane.point - ray.origin).dot(plane.normal) / direction_dot_normal
    if t < 0:
        return None
    return ray.origin + ray.direction * t


def intersect_ray_triangle(ray: Ray, triangle: Triangle) -> Vec3 | None:
    """The point where ``ray`` hits ``triangle``, or None."""
    n_dot_dir = triangle.normal.dot(ray.direction)
    if abs(n_dot_dir) <= 0.001:
        # the ray runs along the triangle's plane
        return None
    d = triangle.points[0].dot(triangle.normal)
    t = (d - triangle.normal.dot(ray.origin)) / n_dot_dir
    if t < 0:
        return None
    point = ray.origin + ray.direction * t
    return point if point_in_triangle(point, triangle) else None


def intersect_ray_trimesh(ray: Ray, tri_mesh: TriMesh) -> Vec3 | None:
    """The hit on ``tri_mesh`` nearest the ray origin, or None."""
    best: Vec3 | None = None
    best_distance = 0.0
    for triangle in tri_mesh.triangles:
        point = intersect_ray_triangle(ray, triangle)
        if point is None:
            continue
        distance = (ray.origin - point).length()
        if best is None or distance < best_distance:
            best = point
            best_distance = distance
    return best


def closest_point_on_line_to_point(a: Vec3, b: Vec3, c: Vec3) -> Vec3:
    """The point on segment AB closest to point C."""
    ac = c - a
    ab = b - a
    t = clamp(ac.dot(ab) / ab.dot(ab), 0, 1)
    return a + ab * t


def closest_point_ray_vs_point(origin: Vec3, direction: Vec3, point: Vec3) -> Vec3:
    """The point on the infinite line through ``origin`` closest to ``point``."""
    t = (point - origin).dot(direction) / direction.dot(direction)
    return origin + direction * t


def closest_points_line_vs_triangle(line: Line, triangle: Triangle) -> tuple[PointPair, float]:
    """Closest points between a segment and a triangle and their distance.

    The first point lies on the segment, the second on the triangle.
    """
    a, b, c = triangle.points
    closest, distance = closest_points_line_vs_line(line, Line(a, b))
    for edge in (Line(b, c), Line(c, a)):
        points, edge_distance = closest_points_line_vs_line(line, edge)
        if edge_distance < distance:
            closest, distance = points, edge_distance

    for end in (line.p1, line.p2):
        projection, inside = project_point_on_triangle(end, triangle)
        if inside:
            end_distance = (end - projection).length()
            if end_distance < distance:
                closest, distance = (end, projection), end_distance

    return closest, distance


def closest_points_line_vs_line(line1: Line, line2: Line) -> tuple[PointPair, float]:
    """Closest points between two segments (one on each) and their distance."""
    p1, q1, p2, q2 = line1.p1, line1.p2, line2.p1, line2.p2
    d1 = q1 - p1
    d2 = q2 - p2
    r = p1 - p2
    a = d1.dot(d1)
    e = d2.dot(d2)
    f = d2.dot(r)

    if a <= EPSILON and e <= EPSILON:
        # both segments degenerate into points
        return (p1, p2), (p1 - p2).length()

    if a <= EPSILON:
        s = 0.0
        t = clamp(f / e, 0, 1)
    else:
        c = d1.dot(r)
        if e <= EPSILON:
            t = 0.0
            s = clamp(-c / a, 0, 1)
        else:
            b = d1.dot(d2)
            denom = a * e - b * b
            s = clamp((b * f - c * e) / denom, 0, 1) if denom != 0 else 0.0
            t = (b * s + f) / e
            if t < 0:
                t = 0.0
                s = clamp(-c / a, 0, 1)
            elif t > 1:
                t = 1.0
                s = clamp((b - c) / a, 0, 1)

    c1 = p1 + d1 * s
    c2 = p2 + d2 * t
    return (c1, c2), (c1 - c2).length()


def project_point_on_triangle(point: Vec3, triangle: Triangle) -> tuple[Vec3, bool]:
    """Project ``point`` onto the triangle's plane; also tell whether it lands inside."""
    plane = Plane(triangle.points[0], triangle.normal)
    projected = project_point_on_plane(point, plane)
    return projected, point_in_triangle(projected, triangle)


def point_in_triangle(point: Vec3, triangle: Triangle) -> bool:
    """Whether ``point`` lies in or on ``triangle``."""
    a, b, c = (p - point for p in triangle.points)
    u = b.cross(c)
    v = c.cross(a)
    if u.dot(v) < 0:
        return False
    w = a.cross(b)
    return u.dot(w) >= 0


def point_in_aabb(point: Vec3, bounding_box: BoundingBox) -> bool:
    low, high = bounding_box.min_vertex, bounding_box.max_vertex
    return all(lo <= p <= hi for p, lo, hi in zip(point, low, high))


def _closest_params(p1: Vec3, q1: Vec3, p2: Vec3, q2: Vec3) -> tuple[float, float] | None:
    r = p1 - p2
    d1 = q1 - p1
    d2 = q2 - p2
    a = d1.dot(d1)
    b = d1.dot(d2)
    c = d1.dot(r)
    e = d2.dot(d2)
    f = d2.dot(r)
    d = a * e - b * b
    if d == 0:
        return None
    return (b * f - c * e) / d, (a * f - b * c) / d


def _points_at(p1: Vec3, q1: Vec3, p2: Vec3, q2: Vec3, s: float, t: float) -> PointPair:
    return p1 + (q1 - p1) * s, p2 + (q2 - p2) * t


def closest_points_infinite_lines(p1: Vec3, q1: Vec3, p2: Vec3, q2: Vec3) -> PointPair | None:
    """Closest points of the infinite lines through (p1, q1) and (p2, q2); None if parallel."""
    params = _closest_params(p1, q1, p2, q2)
    if params is None:
        return None
    return _points_at(p1, q1, p2, q2, *params)


def closest_points_infinite_line_vs_line(
    p1: Vec3, q1: Vec3, p2: Vec3, q2: Vec3
) -> PointPair | None:
    """Closest points of the infinite line (p1, q1) and the segment (p2, q2); None if parallel."""
    params = _closest_params(p1, q1, p2, q2)
    if params is None:
        return None
    s, t = params
    l1, l2 = _points_at(p1, q1, p2, q2, s, t)
    if t > 0:
        if (l2 - p2).length() > (q2 - p2).length():
            return l1, q2
        return l1, l2
    return l1, p2


def _iter_points(points: Iterable[Vec3]) -> list[Vec3]:
    return list(points)