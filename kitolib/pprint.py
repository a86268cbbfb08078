"""Compact text rendering of vectors."""

from __future__ import annotations

from collections.abc import Iterable

from kitolib.modelspec import Vertex
from kitolib.vecmath import Quat, Vec3


def pprint_vec(v: Vec3) -> str:
    return f"Vec3[{v.x:.1f}, {v.y:.1f}, {v.z:.1f}]"


def pprint_quat_as_vec(q: Quat) -> str:
    """Render the forward direction (0, 0, -1) turned by ``q``."""
    return pprint_vec(q.rotate(Vec3(0, 0, -1)))


def pprint_vec_list(vectors: Iterable[Vec3]) -> str:
    rendered = [pprint_vec(v) for v in vectors]
    if not rendered:
        raise ValueError("cannot render an empty vector list")
    return "[ " + ", ".join(rendered) + " ]"


def model_spec_verts_to_vec3(vertices: Iterable[Vertex]) -> list[Vec3]:
    return [vertex.position for vertex in vertices]