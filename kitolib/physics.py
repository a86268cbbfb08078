"""Simple rigid-body collider shapes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kitolib.vecmath import Vec3


class ColliderType(str, Enum):
    CAPSULE = "CAPSULE"
    BOX = "BOX"
    SPHERE = "SPHERE"


@dataclass
class Capsule:
    position: Vec3 = Vec3()


@dataclass
class Sphere:
    position: Vec3 = Vec3()
    radius: float = 0.0


@dataclass
class Box:
    pass