"""Tool-agnostic description of models, skeletons and animations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from kitolib.vecmath import Mat4, Quat, Vec2, Vec3, Vec4


@dataclass
class JointTransform:
    """Joint-space translation, rotation and scale for one key frame."""

    translation: Vec3 = Vec3(0, 0, 0)
    rotation: Quat = Quat.ident()
    scale: Vec3 = Vec3(1, 1, 1)


def new_default_joint_transform() -> JointTransform:
    return JointTransform(Vec3(0, 0, 0), Quat.ident(), Vec3(1, 1, 1))


@dataclass
class KeyFrame:
    """A pose, mapping joint ids to transforms, starting at ``start``."""

    pose: dict[int, JointTransform] = field(default_factory=dict)
    start: timedelta = timedelta(0)


@dataclass
class AnimationSpec:
    name: str = ""
    key_frames: list[KeyFrame] = field(default_factory=list)
    length: timedelta = timedelta(0)


@dataclass(eq=False)
class JointSpec:
    """A joint in a skeleton; compared and hashed by identity."""

    id: int = 0
    name: str = ""
    inverse_bind_transform: Mat4 = field(default_factory=Mat4.ident)
    full_bind_transform: Mat4 = field(default_factory=Mat4.ident)
    children: list[JointSpec] = field(default_factory=list, repr=False)
    parent: JointSpec | None = field(default=None, repr=False)


@dataclass
class PBRMetallicRoughness:
    base_color_texture_index: int = 0
    base_color_texture_name: str = ""
    base_color_factor: Vec4 = Vec4()
    metalic_factor: float = 0.0
    roughness_factor: float = 0.0
    base_color_texture_coords_index: int = 0


@dataclass
class PBRMaterial:
    pbr_metallic_roughness: PBRMetallicRoughness = field(default_factory=PBRMetallicRoughness)


@dataclass
class Vertex:
    position: Vec3 = Vec3()
    normal: Vec3 = Vec3()
    texture0_coords: Vec2 = Vec2()
    texture1_coords: Vec2 = Vec2()
    joint_ids: list[int] = field(default_factory=list)
    joint_weights: list[float] = field(default_factory=list)


@dataclass
class PrimitiveSpecification:
    """Vertex data for one mesh chunk.

    ``vertices`` holds triangles as consecutive triplets; ``unique_vertices``
    together with ``vertex_indices`` describe the same mesh indexed.
    """

    vertex_indices: list[int] = field(default_factory=list)
    unique_vertices: list[Vertex] = field(default_factory=list)
    vertices: list[Vertex] = field(default_factory=list)
    material_index: str = ""


@dataclass
class MaterialSpecification:
    id: str = ""
    pbr_material: PBRMaterial = field(default_factory=PBRMaterial)


@dataclass
class MeshSpecification:
    id: int = 0
    primitives: list[PrimitiveSpecification] = field(default_factory=list)


@dataclass
class ModelSpecification:
    meshes: list[MeshSpecification] = field(default_factory=list)
    root_joint: JointSpec | None = None
    animations: dict[str, AnimationSpec] = field(default_factory=dict)
    root_transforms: Mat4 = field(default_factory=Mat4.ident)
    joint_map: dict[int, JointSpec] = field(default_factory=dict)
    textures: list[str] = field(default_factory=list)


@dataclass
class Node:
    name: str = ""
    mesh_id: int | None = None
    transform: Mat4 = field(default_factory=Mat4.ident)
    children: list[Node] = field(default_factory=list)
    translation: Vec3 = Vec3()
    rotation: Quat = Quat.ident()
    scale: Vec3 = Vec3(1, 1, 1)


@dataclass
class Scene:
    nodes: list[Node] = field(default_factory=list)


@dataclass
class Document:
    name: str = ""
    scenes: list[Scene] = field(default_factory=list)
    meshes: list[MeshSpecification] = field(default_factory=list)
    materials: list[MaterialSpecification] = field(default_factory=list)
    textures: list[str] = field(default_factory=list)
    joint_map: dict[int, JointSpec] = field(default_factory=dict)
    animations: dict[str, AnimationSpec] = field(default_factory=dict)
    root_joint: JointSpec | None = None
    peripheral_files: list[str] = field(default_factory=list)