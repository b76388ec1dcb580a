"""Axis-aligned rectangle primitive.

A rect lies in one of the coordinate planes (XY, XZ or YZ) at offset ``k``
along the remaining axis. Its outward normal is that axis' unit vector, or
the negated one for a flipped rect. Rects are the building block of area
lights, Cornell box walls and blocks.

The bounds check uses a small epsilon so that adjacent rects sharing an
edge do not leak rays through the seam.

Example:
    >>> from lumen.core.vec3 import Vec3
    >>> from lumen.materials import Emission
    >>> light = Rect.from_bounds(
    ...     Emission.solid(Vec3(15, 15, 15)), RectAxis.XZ, (213, 227), (343, 332), 554
    ... )
    >>> light.area
    13650.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from lumen.core.ray import ONB, T_MIN, Ray, random_cosine_direction
from lumen.core.vec3 import Color, Vec3
from lumen.geometry.aabb import AABB
from lumen.geometry.hit import Hit
from lumen.materials import Emission, Material

# Tolerance of the in-plane bounds check
EPS = 1e-4

# Half thickness of the bounding box along the normal axis
PAD = 1e-3


class RectAxis(IntEnum):
    """Plane of an axis-aligned rect, valued by the index of its normal axis."""

    YZ = 0
    XZ = 1
    XY = 2

    @property
    def plane_axes(self) -> tuple[int, int]:
        """Indices of the two in-plane axes, in (a, b) order."""
        return _PLANE_AXES[self]

    @property
    def normal(self) -> Vec3:
        return _NORMALS[self]

    def point(self, a: float, b: float, k: float) -> Vec3:
        """World point with in-plane coordinates (a, b) and plane offset k."""
        coords = [0.0, 0.0, 0.0]
        ia, ib = self.plane_axes
        coords[ia] = a
        coords[ib] = b
        coords[int(self)] = k
        return Vec3(coords[0], coords[1], coords[2])


_PLANE_AXES = {RectAxis.YZ: (1, 2), RectAxis.XZ: (0, 2), RectAxis.XY: (0, 1)}
_NORMALS = {axis: Vec3.axis(int(axis)) for axis in RectAxis}


@dataclass(frozen=True, eq=False)
class Rect:
    """Rectangle ``[a0, a1] x [b0, b1]`` in the plane ``axis`` at offset ``k``.

    Attributes:
        axis: Plane of the rect.
        corner1: Minimum in-plane corner (a0, b0).
        corner2: Maximum in-plane corner (a1, b1).
        k: Offset along the normal axis.
        material: Material of both faces.
        flipped: Take the negative axis as the outward normal. Selects the
            front face for refraction and the side an emitter emits toward.
    """

    axis: RectAxis
    corner1: tuple[float, float]
    corner2: tuple[float, float]
    k: float
    material: Material
    flipped: bool = False
    area: float = field(init=False)

    def __post_init__(self) -> None:
        (a0, b0), (a1, b1) = self.corner1, self.corner2
        # Normalize so corner1 <= corner2 componentwise
        object.__setattr__(self, "corner1", (min(a0, a1), min(b0, b1)))
        object.__setattr__(self, "corner2", (max(a0, a1), max(b0, b1)))
        object.__setattr__(self, "area", abs((a1 - a0) * (b1 - b0)))

    @property
    def outward_normal(self) -> Vec3:
        normal = self.axis.normal
        return -normal if self.flipped else normal

    @classmethod
    def from_bounds(
        cls,
        material: Material,
        axis: RectAxis,
        start: tuple[float, float],
        end: tuple[float, float],
        k: float,
        *,
        flipped: bool = False,
    ) -> Rect:
        return cls(
            axis,
            (float(start[0]), float(start[1])),
            (float(end[0]), float(end[1])),
            float(k),
            material,
            flipped,
        )

    def bounding_box(self) -> AABB:
        (a0, b0), (a1, b1) = self.corner1, self.corner2
        return AABB(
            self.axis.point(a0, b0, self.k - PAD),
            self.axis.point(a1, b1, self.k + PAD),
        )

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        n = int(self.axis)
        d_k = ray.direction[n]
        if d_k == 0.0:
            return None
        t = (self.k - ray.origin[n]) / d_k
        if not t_min <= t < t_max:
            return None

        ia, ib = self.axis.plane_axes
        point = ray.at(t)
        a, b = point[ia], point[ib]
        (a0, b0), (a1, b1) = self.corner1, self.corner2
        if a < a0 - EPS or a > a1 + EPS or b < b0 - EPS or b > b1 + EPS:
            return None

        u = (a - a0) / (a1 - a0) if a1 > a0 else 0.0
        v = (b - b0) / (b1 - b0) if b1 > b0 else 0.0
        return Hit.from_ray(ray, t, self.outward_normal, self.material, u, v)

    def is_light(self) -> bool:
        return isinstance(self.material, Emission)

    def pdf(self, ray: Ray) -> float:
        """Solid angle density of ``ray.direction`` under uniform area sampling."""
        hit = self.hit(ray, T_MIN, math.inf)
        if hit is None:
            return 0.0
        direction = ray.direction
        length_squared = direction.length_squared()
        distance_squared = hit.t * hit.t * length_squared
        cosine = abs(direction[int(self.axis)]) / math.sqrt(length_squared)
        denominator = cosine * self.area
        if denominator == 0.0:
            return 0.0
        return distance_squared / denominator

    def random_point(self, rng: np.random.Generator) -> Vec3:
        (a0, b0), (a1, b1) = self.corner1, self.corner2
        return self.axis.point(
            a0 + (a1 - a0) * rng.random(),
            b0 + (b1 - b0) * rng.random(),
            self.k,
        )

    def random(self, origin: Vec3, rng: np.random.Generator) -> Vec3:
        return self.random_point(rng) - origin

    def emit(self, rng: np.random.Generator) -> tuple[Ray, Vec3, Color]:
        """Ray leaving a random point, cosine-distributed around the outward normal."""
        point = self.random_point(rng)
        normal = self.outward_normal
        direction = ONB.from_w(normal).local(random_cosine_direction(rng))
        (a0, b0), (a1, b1) = self.corner1, self.corner2
        ia, ib = self.axis.plane_axes
        u = (point[ia] - a0) / (a1 - a0) if a1 > a0 else 0.0
        v = (point[ib] - b0) / (b1 - b0) if b1 > b0 else 0.0
        hit = Hit(point, normal, 0.0, True, self.material, u, v)
        return Ray(point, direction), normal, self.material.emitted(hit)
