"""Immutable vector, quaternion and 4x4 matrix types with helper functions."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator

EPSILON = 1e-10
_MIN_NORMAL = 2.2250738585072014e-308


def _float_equal(a: float, b: float, epsilon: float = EPSILON) -> bool:
    if a == b:
        return True
    diff = abs(a - b)
    if a * b == 0 or diff < _MIN_NORMAL:
        return diff < epsilon * epsilon
    return diff / (abs(a) + abs(b)) < epsilon


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into the closed range [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


@dataclass(frozen=True, slots=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]


@dataclass(frozen=True, slots=True)
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_sqr(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.length_sqr())

    def normalize(self) -> Vec3:
        """Unit vector in the same direction; all NaN for the zero vector."""
        length = self.length()
        if length == 0:
            return Vec3(math.nan, math.nan, math.nan)
        inverse = 1.0 / length
        return Vec3(self.x * inverse, self.y * inverse, self.z * inverse)

    def approx_equal(self, other: Vec3) -> bool:
        return all(_float_equal(a, b) for a, b in zip(self, other))

    def vec4(self, w: float) -> Vec4:
        return Vec4(self.x, self.y, self.z, w)


@dataclass(frozen=True, slots=True)
class Vec4:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z, self.w))

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z, self.w)[index]

    def vec3(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)


_IDENTITY_VALUES = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)


@dataclass(frozen=True, slots=True)
class Mat4:
    """A 4x4 matrix stored in column-major order."""

    values: tuple[float, ...] = _IDENTITY_VALUES

    def __post_init__(self) -> None:
        values = tuple(float(v) for v in self.values)
        if len(values) != 16:
            raise ValueError(f"a 4x4 matrix needs 16 values, got {len(values)}")
        object.__setattr__(self, "values", values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, key: int | tuple[int, int]) -> float:
        if isinstance(key, tuple):
            row, col = key
            return self.values[col * 4 + row]
        return self.values[key]

    def __matmul__(self, other: Mat4 | Vec4) -> Mat4 | Vec4:
        if isinstance(other, Mat4):
            return self.mul4(other)
        if isinstance(other, Vec4):
            return self.mul4x1(other)
        return NotImplemented

    @classmethod
    def ident(cls) -> Mat4:
        return cls(_IDENTITY_VALUES)

    @classmethod
    def from_rows(
        cls, r0: Iterable[float], r1: Iterable[float], r2: Iterable[float], r3: Iterable[float]
    ) -> Mat4:
        rows = [tuple(r) for r in (r0, r1, r2, r3)]
        if any(len(row) != 4 for row in rows):
            raise ValueError("every row needs 4 values")
        return cls(tuple(rows[r][c] for c in range(4) for r in range(4)))

    @classmethod
    def translate3d(cls, x: float, y: float, z: float) -> Mat4:
        return cls((1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, x, y, z, 1))

    @classmethod
    def scale3d(cls, x: float, y: float, z: float) -> Mat4:
        return cls((x, 0, 0, 0, 0, y, 0, 0, 0, 0, z, 0, 0, 0, 0, 1))

    def mul4(self, other: Mat4) -> Mat4:
        a, b = self.values, other.values
        return Mat4(
            tuple(
                sum(a[k * 4 + r] * b[c * 4 + k] for k in range(4))
                for c in range(4)
                for r in range(4)
            )
        )

    def mul4x1(self, v: Vec4) -> Vec4:
        a = self.values
        components = tuple(v)
        return Vec4(*(sum(a[k * 4 + r] * components[k] for k in range(4)) for r in range(4)))

    def col(self, index: int) -> Vec4:
        if not 0 <= index < 4:
            raise IndexError("column index out of range")
        return Vec4(*self.values[index * 4 : index * 4 + 4])

    def with_col(self, index: int, v: Vec4) -> Mat4:
        """Return a copy with column ``index`` replaced by ``v``."""
        if not 0 <= index < 4:
            raise IndexError("column index out of range")
        values = list(self.values)
        values[index * 4 : index * 4 + 4] = tuple(v)
        return Mat4(tuple(values))


@dataclass(frozen=True, slots=True)
class Quat:
    w: float = 1.0
    v: Vec3 = Vec3()

    @classmethod
    def ident(cls) -> Quat:
        return cls(1.0, Vec3())

    @classmethod
    def _rotate(cls, angle: float, axis: Vec3) -> Quat:
        return cls(math.cos(angle / 2), axis * math.sin(angle / 2))

    @classmethod
    def between_vectors(cls, start: Vec3, dest: Vec3) -> Quat:
        """The rotation that turns direction ``start`` into direction ``dest``."""
        start = start.normalize()
        dest = dest.normalize()
        epsilon = 0.001

        cos_theta = start.dot(dest)
        if cos_theta < -1.0 + epsilon:
            axis = Vec3(1, 0, 0).cross(start)
            if axis.dot(axis) < epsilon:
                axis = Vec3(0, 1, 0).cross(start)
            return cls._rotate(math.pi, axis.normalize())

        axis = start.cross(dest)
        angle = math.sqrt((1.0 + cos_theta) * 2.0)
        inverse = 1.0 / angle
        return cls(angle * 0.5, axis * inverse)

    @classmethod
    def from_mat4(cls, m: Mat4) -> Quat:
        """Extract the rotation of a pure rotation matrix."""
        v = m.values
        trace = v[0] + v[5] + v[10]
        if trace > 0:
            s = 0.5 / math.sqrt(trace + 1.0)
            return cls(0.25 / s, Vec3((v[6] - v[9]) * s, (v[8] - v[2]) * s, (v[1] - v[4]) * s))
        if v[0] > v[5] and v[0] > v[10]:
            s = 2.0 * math.sqrt(1.0 + v[0] - v[5] - v[10])
            return cls((v[6] - v[9]) / s, Vec3(0.25 * s, (v[4] + v[1]) / s, (v[8] + v[2]) / s))
        if v[5] > v[10]:
            s = 2.0 * math.sqrt(1.0 + v[5] - v[0] - v[10])
            return cls((v[8] - v[2]) / s, Vec3((v[4] + v[1]) / s, 0.25 * s, (v[9] + v[6]) / s))
        s = 2.0 * math.sqrt(1.0 + v[10] - v[0] - v[5])
        return cls((v[1] - v[4]) / s, Vec3((v[8] + v[2]) / s, (v[9] + v[6]) / s, 0.25 * s))

    def length(self) -> float:
        return math.sqrt(self.w * self.w + self.v.dot(self.v))

    def normalize(self) -> Quat:
        length = self.length()
        if _float_equal(1, length):
            return self
        if length == 0:
            return Quat.ident()
        if math.isinf(length):
            length = sys.float_info.max
        return Quat(self.w * 1 / length, self.v * (1 / length))

    def mat4(self) -> Mat4:
        w, x, y, z = self.w, self.v.x, self.v.y, self.v.z
        return Mat4(
            (
                1 - 2 * y * y - 2 * z * z, 2 * x * y + 2 * w * z, 2 * x * z - 2 * w * y, 0,
                2 * x * y - 2 * w * z, 1 - 2 * x * x - 2 * z * z, 2 * y * z + 2 * w * x, 0,
                2 * x * z + 2 * w * y, 2 * y * z - 2 * w * x, 1 - 2 * x * x - 2 * y * y, 0,
                0, 0, 0, 1,
            )
        )

    def rotate(self, v: Vec3) -> Vec3:
        cross = self.v.cross(v)
        return v + cross * (2 * self.w) + (self.v * 2).cross(cross)


def mat4_from_column_major_floats(values: Iterable[float]) -> Mat4:
    """Build a matrix whose rows are consecutive groups of four values."""
    m = tuple(values)
    if len(m) != 16:
        raise ValueError(f"a 4x4 matrix needs 16 values, got {len(m)}")
    return Mat4.from_rows(m[0:4], m[4:8], m[8:12], m[12:16])


def vec3_approx_equal_threshold(v1: Vec3, v2: Vec3, threshold: float) -> bool:
    return all(abs(a - b) < threshold for a, b in zip(v1, v2))


def vec3_approx_equal_zero(v: Vec3) -> bool:
    return vec3_approx_equal_threshold(v, Vec3(), 1)


def vec3_is_zero(v: Vec3) -> bool:
    return v.x == 0 and v.y == 0 and v.z == 0


def cross_2d(v1: Vec3, v2: Vec3) -> float:
    """Cross product of two vectors projected on the XZ plane."""
    return v1.x * v2.z - v1.z * v2.x


def sign(a: float) -> float:
    if a > 0:
        return 1
    if a < 0:
        return -1
    return 0


def same_sign(a: float, b: float) -> bool:
    return (a > 0 and b > 0) or (a < 0 and b < 0) or (a == 0 and b == 0)


def decompose(m: Mat4) -> tuple[Vec3, Quat, Vec3]:
    """Split a translate-rotate-scale matrix into translation, rotation and scale."""
    translation = m.col(3).vec3()
    m = m.with_col(3, Vec4(0, 0, 0, 1))

    x_col = m.col(0).vec3()
    y_col = m.col(1).vec3()
    z_col = m.col(2).vec3()
    m = m.with_col(0, x_col.normalize().vec4(0))
    m = m.with_col(1, y_col.normalize().vec4(0))
    m = m.with_col(2, z_col.normalize().vec4(0))

    rotation = Quat.from_mat4(m)
    scale = Vec3(x_col.length(), y_col.length(), z_col.length())
    return translation, rotation, scale


def q_interpolate(a: Quat, b: Quat, blend: float) -> Quat:
    """Blend two rotations along the shorter arc and normalize the result."""
    dot = a.w * b.w + a.v.x * b.v.x + a.v.y * b.v.y + a.v.z * b.v.z
    if dot < 0:
        b = Quat(-b.w, -b.v)
    blend_i = 1 - blend
    result = Quat(blend_i * a.w + blend * b.w, a.v * blend_i + b.v * blend)
    return result.normalize()


def vec3_to_quat(v: Vec3) -> Quat:
    """The rotation that turns the forward direction (0, 0, -1) towards ``v``."""
    return Quat.between_vectors(Vec3(0, 0, -1), v)