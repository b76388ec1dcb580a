"""Axis-aligned bounding boxes and the ray slab test.

Every primitive reports an AABB; the BVH stores one per node and rejects
whole subtrees with a single slab test.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from lumen.core.ray import Ray
from lumen.core.vec3 import Vec3


def _inverse(component: float) -> float:
    # Float division by zero raises in Python; IEEE gives a signed infinity.
    if component == 0.0:
        return math.copysign(math.inf, component)
    return 1.0 / component


@dataclass(frozen=True)
class AABB:
    """Axis-aligned box between ``minimum`` and ``maximum`` (inclusive).

    Attributes:
        minimum: Corner with the smallest coordinates.
        maximum: Corner with the largest coordinates.
    """

    minimum: Vec3
    maximum: Vec3

    def __post_init__(self) -> None:
        for i in range(3):
            if self.minimum[i] > self.maximum[i]:
                raise ValueError(
                    f"AABB minimum {self.minimum!r} exceeds maximum {self.maximum!r} on axis {i}"
                )

    @classmethod
    def from_points(cls, a: Vec3, b: Vec3) -> AABB:
        """Box spanned by two arbitrary opposite corners."""
        return cls(a.min(b), b.max(a))

    @staticmethod
    def containing(box1: AABB, box2: AABB) -> AABB:
        """Smallest box enclosing both boxes."""
        return AABB(box1.minimum.min(box2.minimum), box1.maximum.max(box2.maximum))

    def corners(self) -> list[Vec3]:
        lo, hi = self.minimum, self.maximum
        return [
            Vec3(x, y, z)
            for x in (lo.x, hi.x)
            for y in (lo.y, hi.y)
            for z in (lo.z, hi.z)
        ]

    def hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Slab test against the half-open range ``[t_min, t_max)``.

        Each axis narrows the running interval; the test fails as soon as
        the interval is empty. A NaN crossing (origin on a slab plane with a
        zero direction component) leaves the interval unchanged.
        """
        origin = ray.origin
        direction = ray.direction
        lo = self.minimum
        hi = self.maximum
        for o, d, a, b in (
            (origin.x, direction.x, lo.x, hi.x),
            (origin.y, direction.y, lo.y, hi.y),
            (origin.z, direction.z, lo.z, hi.z),
        ):
            inv = _inverse(d)
            t0 = (a - o) * inv
            t1 = (b - o) * inv
            if inv < 0.0:
                t0, t1 = t1, t0
            if t0 > t_min:
                t_min = t0
            if t1 < t_max:
                t_max = t1
            if t_max <= t_min:
                return False
        return True


# Bounding box of an empty aggregate
EMPTY_AABB = AABB(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, 0.0))
