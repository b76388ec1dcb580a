"""Lambertian (ideal diffuse) material.

A Lambertian surface scatters light equally in all directions; the
outgoing radiance is independent of viewing angle. The BRDF is
``albedo / pi`` and the matching importance sampling density is the
cosine-weighted hemisphere ``cos(theta) / pi``, so the material returns a
cosine PDF around the shading normal and lets the integrator draw the
direction.

Example:
    >>> from lumen.core.vec3 import Vec3
    >>> from lumen.materials.texture import SolidTexture
    >>> red = Lambertian(SolidTexture(Vec3(0.65, 0.05, 0.05)))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from lumen.core.pdf import CosinePDF
from lumen.core.ray import Ray
from lumen.core.vec3 import BLACK, Color
from lumen.materials.scatter import Scatter
from lumen.materials.texture import SolidTexture, Texture

if TYPE_CHECKING:
    from lumen.geometry.hit import Hit


@dataclass(frozen=True, eq=False)
class Lambertian:
    """Diffuse material whose albedo comes from a texture."""

    texture: Texture

    @classmethod
    def solid(cls, albedo: Color) -> Lambertian:
        """Lambertian material with a constant albedo.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
        """
        for i, component in enumerate(albedo):
            if component < 0.0 or component > 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        return cls(SolidTexture(albedo))

    def scatter(self, ray: Ray, hit: Hit, rng: np.random.Generator) -> Scatter:
        return Scatter(
            attenuation=self.texture.value(hit.u, hit.v, hit.point),
            pdf=CosinePDF.around(hit.normal),
        )

    def emitted(self, hit: Hit) -> Color:
        return BLACK
