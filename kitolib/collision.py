"""Contact generation between capsules, triangles, triangle meshes and boxes."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from kitolib.checks import closest_points_line_vs_line, closest_points_line_vs_triangle
from kitolib.collider import BoundingBox, Capsule, Line, Triangle, TriMesh
from kitolib.pprint import pprint_vec
from kitolib.vecmath import Vec3


class ContactType(str, Enum):
    CAPSULE_TRIMESH = "TRIMESH"
    CAPSULE_CAPSULE = "CAPSULE"


@dataclass
class Contact:
    """A penetration between two shapes and the vector that separates them."""

    entity_id: int | None = None
    source_entity_id: int | None = None
    type: ContactType | None = None

    tri_index: int | None = None
    point: Vec3 = Vec3()
    normal: Vec3 = Vec3()
    separating_vector: Vec3 = Vec3()
    separating_distance: float = 0.0

    def __str__(self) -> str:
        return (
            f"{{ EntityID: {self.entity_id}, TriIndex: {self.tri_index} "
            f"[ SV: {pprint_vec(self.separating_vector)}, N: {pprint_vec(self.normal)}, "
            f"D: {self.separating_distance:.3f} D2: {self.separating_vector.length():.3f}]"
            " }"
        )


def sorted_by_separating_distance(contacts: Iterable[Contact]) -> list[Contact]:
    """Contacts ordered from the smallest separating distance to the largest."""
    return sorted(contacts, key=lambda contact: contact.separating_distance)


def check_collision_capsule_trimesh(capsule: Capsule, tri_mesh: TriMesh) -> list[Contact]:
    """One contact for every triangle of ``tri_mesh`` that the capsule penetrates."""
    contacts = []
    for index, triangle in enumerate(tri_mesh.triangles):
        contact = check_collision_capsule_triangle(capsule, triangle)
        if contact is not None:
            contacts.append(dataclasses.replace(contact, tri_index=index))
    return contacts


def check_collision_capsule_triangle(capsule: Capsule, triangle: Triangle) -> Contact | None:
    """The contact between a capsule and a triangle, or None if they do not touch."""
    closest_points, distance = closest_points_line_vs_triangle(
        Line(capsule.top, capsule.bottom), triangle
    )

    if distance == 0:
        # no direction to separate along
        return None

    if distance >= capsule.radius:
        return None

    separating_distance = capsule.radius - distance
    separating_vector = (closest_points[0] - closest_points[1]).normalize() * separating_distance
    if separating_vector.dot(triangle.normal) < 0:
        # the capsule would be pushed through the back of the triangle; push it out the front
        separating_vector = separating_vector + triangle.normal * (capsule.radius * 2)
        separating_distance = separating_vector.length()

    return Contact(
        type=ContactType.CAPSULE_TRIMESH,
        point=closest_points[1],
        normal=triangle.normal,
        separating_vector=separating_vector,
        separating_distance=separating_distance,
    )


def check_collision_capsule_capsule(capsule1: Capsule, capsule2: Capsule) -> Contact | None:
    """The contact pushing ``capsule1`` out of ``capsule2``, or None.

    Capsules are assumed to be vertical.
    """
    closest_points, distance = closest_points_line_vs_line(
        Line(capsule1.top, capsule1.bottom),
        Line(capsule2.top, capsule2.bottom),
    )

    separating_distance = (capsule1.radius + capsule2.radius) - distance
    if separating_distance <= 0:
        return None

    capsule2_to_1 = closest_points[0] - closest_points[1]
    if capsule2_to_1.length_sqr() == 0:
        # directly atop one another: push the capsule up over the other one
        separating_distance = (capsule2.top - capsule2.bottom).length() + 2 * capsule2.radius
        capsule2_to_1 = Vec3(0, 1, 0)

    direction = capsule2_to_1.normalize()
    return Contact(
        type=ContactType.CAPSULE_CAPSULE,
        point=direction * distance,
        separating_vector=direction * separating_distance,
        separating_distance=separating_distance,
    )


def check_overlap_aabb_aabb(aabb1: BoundingBox, aabb2: BoundingBox) -> bool:
    """Whether two axis-aligned boxes overlap; touching faces count as overlap."""
    return all(
        not (max1 < min2 or min1 > max2)
        for min1, max1, min2, max2 in zip(
            aabb1.min_vertex, aabb1.max_vertex, aabb2.min_vertex, aabb2.max_vertex
        )
    )