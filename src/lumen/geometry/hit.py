"""Hit record produced by ray/primitive intersection."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from lumen.core.ray import Ray
from lumen.core.vec3 import Vec3

if TYPE_CHECKING:
    from lumen.materials import Material


@dataclass(frozen=True)
class Hit:
    """Information about a ray-surface intersection.

    Attributes:
        point: The intersection point in world space.
        normal: Unit surface normal, flipped to face against the ray.
        t: The ray parameter at the intersection.
        front_facing: True if the ray hit the outside of the surface.
        material: The material of the struck surface.
        u: Texture coordinate u in [0, 1].
        v: Texture coordinate v in [0, 1].
    """

    point: Vec3
    normal: Vec3
    t: float
    front_facing: bool
    material: Material
    u: float = 0.0
    v: float = 0.0

    @classmethod
    def from_ray(
        cls,
        ray: Ray,
        t: float,
        outward_normal: Vec3,
        material: Material,
        u: float = 0.0,
        v: float = 0.0,
    ) -> Hit:
        """Build a hit at ``ray.at(t)`` from the geometric outward normal.

        The stored normal always opposes the ray direction; ``front_facing``
        records whether that required a flip.
        """
        front_facing = ray.direction.dot(outward_normal) < 0.0
        normal = outward_normal if front_facing else -outward_normal
        return cls(ray.at(t), normal, t, front_facing, material, u, v)

    def moved(self, point: Vec3, normal: Vec3) -> Hit:
        """Copy of this hit relocated by a transform wrapper."""
        return replace(self, point=point, normal=normal)
