"""Collision shapes: boxes, planes, rays, segments, capsules, spheres and triangle meshes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from kitolib.modelspec import PrimitiveSpecification
from kitolib.vecmath import Mat4, Vec3, decompose


def _transform_point(mat: Mat4, point: Vec3) -> Vec3:
    return mat.mul4x1(point.vec4(1)).vec3()


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned bounding box."""

    min_vertex: Vec3 = Vec3()
    max_vertex: Vec3 = Vec3()

    def _corners(self) -> list[Vec3]:
        low, high = self.min_vertex, self.max_vertex
        delta = high - low
        return [
            low,
            low + Vec3(delta.x, 0, 0),
            low + Vec3(delta.x, delta.y, 0),
            low + Vec3(0, delta.y, 0),
            high,
            high - Vec3(delta.x, 0, 0),
            high - Vec3(delta.x, delta.y, 0),
            high - Vec3(0, delta.y, 0),
        ]

    def transform(self, mat: Mat4) -> BoundingBox:
        """The axis-aligned box enclosing this box's corners after ``mat``."""
        return bounding_box_from_vertices(_transform_point(mat, c) for c in self._corners())


EMPTY_BOUNDING_BOX = BoundingBox()


def bounding_box_from_vertices(vertices: Iterable[Vec3]) -> BoundingBox:
    points = list(vertices)
    if not points:
        raise ValueError("cannot build a bounding box from no vertices")
    return BoundingBox(
        Vec3(min(p.x for p in points), min(p.y for p in points), min(p.z for p in points)),
        Vec3(max(p.x for p in points), max(p.y for p in points), max(p.z for p in points)),
    )


@dataclass(frozen=True)
class Plane:
    point: Vec3 = Vec3()
    normal: Vec3 = Vec3()


@dataclass(frozen=True)
class Ray:
    origin: Vec3 = Vec3()
    direction: Vec3 = Vec3()


@dataclass(frozen=True)
class Line:
    """A line segment from ``p1`` to ``p2``."""

    p1: Vec3 = Vec3()
    p2: Vec3 = Vec3()


@dataclass(frozen=True)
class Capsule:
    radius: float = 0.0
    top: Vec3 = Vec3()
    bottom: Vec3 = Vec3()

    def transform(self, transform: Mat4) -> Capsule:
        """Move the end points by ``transform`` and scale the radius by its largest scale."""
        top = _transform_point(transform, self.top)
        bottom = _transform_point(transform, self.bottom)
        _, _, scale = decompose(transform)
        return Capsule(self.radius * max(scale), top, bottom)


def bounding_box_from_capsule(capsule: Capsule) -> BoundingBox:
    r = capsule.radius
    return BoundingBox(capsule.bottom + Vec3(-r, -r, -r), capsule.top + Vec3(r, r, r))


def capsule_from_vertices(vertices: Iterable[Vec3]) -> Capsule:
    """A vertical capsule centred on the model-space origin that sits above the ground."""
    points = list(vertices)
    if not points:
        raise ValueError("cannot build a capsule from no vertices")
    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    max_y = max(p.y for p in points)
    min_z = min(p.z for p in points)
    max_z = max(p.z for p in points)

    radius = max(abs(min_x), abs(max_x), abs(min_z), abs(max_z))
    # a t-pose usually makes the model wider than it needs to be
    radius /= 2

    top_y = max(2 * radius + 1, max_y)
    return Capsule(radius=radius, top=Vec3(0, top_y - radius, 0), bottom=Vec3(0, radius, 0))


@dataclass(frozen=True)
class Sphere:
    center: Vec3 = Vec3()
    radius: float = 0.0

    @property
    def radius_squared(self) -> float:
        return self.radius * self.radius


@dataclass(frozen=True)
class Triangle:
    normal: Vec3
    points: tuple[Vec3, Vec3, Vec3]

    def transform(self, transform: Mat4) -> Triangle:
        return new_triangle(_transform_point(transform, p) for p in self.points)


def new_triangle(points: Iterable[Vec3]) -> Triangle:
    """A triangle whose normal follows the counter-clockwise winding of ``points``."""
    pts = tuple(points)
    if len(pts) != 3:
        raise ValueError(f"a triangle needs 3 points, got {len(pts)}")
    normal = (pts[1] - pts[0]).cross(pts[2] - pts[0]).normalize()
    return Triangle(normal, pts)


@dataclass
class TriMesh:
    triangles: list[Triangle] = field(default_factory=list)
    debug_points: list[Vec3] = field(default_factory=list)

    def transform(self, transform: Mat4) -> TriMesh:
        return TriMesh([tri.transform(transform) for tri in self.triangles])


def trimesh_from_primitives(primitives: Iterable[PrimitiveSpecification]) -> TriMesh:
    """Build a triangle mesh from the ordered vertex triplets of each primitive."""
    mesh = TriMesh()
    for primitive in primitives:
        vertices = primitive.vertices
        if len(vertices) % 3 != 0:
            raise ValueError(
                f"primitive vertex count {len(vertices)} is not a multiple of 3"
            )
        positions = iter([v.position for v in vertices])
        for p0, p1, p2 in zip(positions, positions, positions):
            normal = (p1 - p0).cross(p2 - p1).normalize()
            mesh.triangles.append(Triangle(normal, (p0, p1, p2)))
    return mesh