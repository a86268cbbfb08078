"""Asset descriptions: fonts, textures and the manager that serves textures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from kitolib.vecmath import Vec2


@dataclass
class Glyph:
    texture_coords: Vec2
    width: int
    height: int


@dataclass
class Font:
    texture_id: int
    total_height: int
    total_width: int
    glyphs: dict[str, Glyph] = field(default_factory=dict)


@dataclass(frozen=True)
class Texture:
    id: int


class AssetManager(Protocol):
    """Looks up loaded textures by name."""

    def get_texture(self, texture_name: str) -> int: ...