"""Metal (specular reflective) material.

Perfect metals (roughness=0) produce mirror-like reflections, while rougher
metals perturb the mirror direction by a random offset inside a sphere of
radius ``roughness``. The reflection formula is ``R = I - 2(I . N)N``.

Metal scattering is deterministic given the perturbation, so it returns a
specular ray rather than a PDF.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from lumen.core.ray import Ray, random_in_unit_sphere, reflect
from lumen.core.vec3 import BLACK, Color
from lumen.materials.scatter import Scatter

if TYPE_CHECKING:
    from lumen.geometry.hit import Hit


@dataclass(frozen=True, eq=False)
class Metal:
    """Reflective material.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        roughness: Fuzziness in [0, 1]; 0 is a perfect mirror.
    """

    albedo: Color
    roughness: float = 0.0

    def __post_init__(self) -> None:
        for i, component in enumerate(self.albedo):
            if component < 0.0 or component > 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        if self.roughness < 0.0 or self.roughness > 1.0:
            raise ValueError(
                f"Roughness = {self.roughness} is outside [0, 1]. "
                "Roughness must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )

    def scatter(self, ray: Ray, hit: Hit, rng: np.random.Generator) -> Scatter:
        reflected = reflect(ray.direction.normalized(), hit.normal)
        if self.roughness > 0.0:
            reflected = reflected + random_in_unit_sphere(rng) * self.roughness
        return Scatter(attenuation=self.albedo, specular=Ray(hit.point, reflected))

    def emitted(self, hit: Hit) -> Color:
        return BLACK
