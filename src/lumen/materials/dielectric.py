"""Dielectric (glass/water) material.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when eta * sin(theta) > 1

The material randomly chooses between reflection and refraction based on
the Fresnel reflectance probability, which increases at grazing angles.
Clear glass absorbs nothing, so the attenuation is always white.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from lumen.core.ray import Ray, reflect, refract, schlick_fresnel
from lumen.core.vec3 import BLACK, WHITE, Color, Vec3
from lumen.materials.scatter import Scatter

if TYPE_CHECKING:
    from lumen.geometry.hit import Hit


def scatter_direction(
    direction: Vec3, normal: Vec3, front_facing: bool, ior: float, sample: float
) -> Vec3:
    """Choose between reflection and refraction for a unit ``direction``.

    Args:
        direction: Normalized incident direction.
        normal: Front-facing unit normal.
        front_facing: True when entering the material.
        ior: Index of refraction of the material.
        sample: Uniform random number in [0, 1) for the Fresnel choice.
    """
    eta = 1.0 / ior if front_facing else ior
    cos_theta = min(-direction.dot(normal), 1.0)
    sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    if eta * sin_theta > 1.0 or sample < schlick_fresnel(cos_theta, ior):
        return reflect(direction, normal)
    return refract(direction, normal, eta)


@dataclass(frozen=True, eq=False)
class Dielectric:
    """Transparent material.

    Attributes:
        ior: Index of refraction. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ior: float

    def __post_init__(self) -> None:
        if self.ior <= 0.0:
            raise ValueError(f"Index of refraction = {self.ior} must be positive")

    def scatter(self, ray: Ray, hit: Hit, rng: np.random.Generator) -> Scatter:
        direction = scatter_direction(
            ray.direction.normalized(), hit.normal, hit.front_facing, self.ior, rng.random()
        )
        return Scatter(attenuation=WHITE, specular=Ray(hit.point, direction))

    def emitted(self, hit: Hit) -> Color:
        return BLACK
