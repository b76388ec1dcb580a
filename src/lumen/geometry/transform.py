"""Instance transforms: translation and rotation wrappers.

A transform wrapper owns another primitive and answers every primitive
query by moving the ray (or sampling origin) into the wrapped primitive's
local space, delegating, and moving the answer back. Material, emission
and light status are those of the wrapped primitive.

Rotations are given as a rotation vector in degrees: the axis of rotation
scaled by the angle. ``Vec3(0, 15, 0)`` turns 15 degrees about +y.

Example:
    >>> box = Block(Vec3(0, 0, 0), Vec3(165, 330, 165), white)
    >>> box = Translate(Rotate(box, Vec3(0, 15, 0)), Vec3(265, 0, 295))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from lumen.core.ray import Ray
from lumen.core.vec3 import Color, Vec3
from lumen.geometry.aabb import AABB
from lumen.geometry.hit import Hit

if TYPE_CHECKING:
    from lumen.geometry import Primitive

Matrix3 = tuple[tuple[float, float, float], tuple[float, float, float], tuple[float, float, float]]

IDENTITY: Matrix3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


def rotation_matrix(degrees: Vec3) -> Matrix3:
    """Rotation matrix for a rotation vector given in degrees (Rodrigues' formula)."""
    vector = np.radians(np.array(degrees.to_tuple(), dtype=np.float64))
    angle = float(np.linalg.norm(vector))
    if angle == 0.0:
        return IDENTITY
    kx, ky, kz = vector / angle
    cross = np.array([[0.0, -kz, ky], [kz, 0.0, -kx], [-ky, kx, 0.0]])
    matrix = np.eye(3) + math.sin(angle) * cross + (1.0 - math.cos(angle)) * (cross @ cross)
    rows = [tuple(float(x) for x in row) for row in matrix]
    return (rows[0], rows[1], rows[2])  # type: ignore[return-value]


def apply(m: Matrix3, v: Vec3) -> Vec3:
    """Matrix-vector product ``m @ v``."""
    return Vec3(
        m[0][0] * v.x + m[0][1] * v.y + m[0][2] * v.z,
        m[1][0] * v.x + m[1][1] * v.y + m[1][2] * v.z,
        m[2][0] * v.x + m[2][1] * v.y + m[2][2] * v.z,
    )


def apply_transposed(m: Matrix3, v: Vec3) -> Vec3:
    """Product with the transpose, which is the inverse for a rotation."""
    return Vec3(
        m[0][0] * v.x + m[1][0] * v.y + m[2][0] * v.z,
        m[0][1] * v.x + m[1][1] * v.y + m[2][1] * v.z,
        m[0][2] * v.x + m[1][2] * v.y + m[2][2] * v.z,
    )


@dataclass(frozen=True, eq=False)
class Translate:
    """Primitive moved by ``offset``."""

    primitive: Primitive
    offset: Vec3

    def bounding_box(self) -> AABB:
        box = self.primitive.bounding_box()
        return AABB(box.minimum + self.offset, box.maximum + self.offset)

    def _local(self, ray: Ray) -> Ray:
        return Ray(ray.origin - self.offset, ray.direction)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        hit = self.primitive.hit(self._local(ray), t_min, t_max)
        if hit is None:
            return None
        return hit.moved(ray.at(hit.t), hit.normal)

    def is_light(self) -> bool:
        return self.primitive.is_light()

    def pdf(self, ray: Ray) -> float:
        return self.primitive.pdf(self._local(ray))

    def random(self, origin: Vec3, rng: np.random.Generator) -> Vec3:
        return self.primitive.random(origin - self.offset, rng)

    def emit(self, rng: np.random.Generator) -> tuple[Ray, Vec3, Color]:
        ray, normal, radiance = self.primitive.emit(rng)
        return Ray(ray.origin + self.offset, ray.direction), normal, radiance


@dataclass(frozen=True, eq=False)
class Rotate:
    """Primitive rotated about the origin.

    Attributes:
        primitive: The wrapped primitive.
        degrees: Rotation vector in degrees.
        matrix: World-from-local rotation matrix derived from ``degrees``.
    """

    primitive: Primitive
    degrees: Vec3
    matrix: Matrix3 = field(init=False, repr=False)
    _bbox: AABB = field(init=False, repr=False)

    def __post_init__(self) -> None:
        matrix = rotation_matrix(self.degrees)
        object.__setattr__(self, "matrix", matrix)
        corners = [apply(matrix, c) for c in self.primitive.bounding_box().corners()]
        lo = hi = corners[0]
        for corner in corners[1:]:
            lo = lo.min(corner)
            hi = hi.max(corner)
        object.__setattr__(self, "_bbox", AABB(lo, hi))

    def bounding_box(self) -> AABB:
        return self._bbox

    def _local(self, ray: Ray) -> Ray:
        return Ray(
            apply_transposed(self.matrix, ray.origin),
            apply_transposed(self.matrix, ray.direction),
        )

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        hit = self.primitive.hit(self._local(ray), t_min, t_max)
        if hit is None:
            return None
        return hit.moved(ray.at(hit.t), apply(self.matrix, hit.normal))

    def is_light(self) -> bool:
        return self.primitive.is_light()

    def pdf(self, ray: Ray) -> float:
        return self.primitive.pdf(self._local(ray))

    def random(self, origin: Vec3, rng: np.random.Generator) -> Vec3:
        local = self.primitive.random(apply_transposed(self.matrix, origin), rng)
        return apply(self.matrix, local)

    def emit(self, rng: np.random.Generator) -> tuple[Ray, Vec3, Color]:
        ray, normal, radiance = self.primitive.emit(rng)
        world = Ray(apply(self.matrix, ray.origin), apply(self.matrix, ray.direction))
        return world, apply(self.matrix, normal), radiance
