"""Phong material: a stochastic mix of a diffuse and a glossy lobe.

With probability ``kd`` the surface scatters like a Lambertian using the
diffuse texture; otherwise it scatters into a Phong lobe ``cos^n`` around
the mirror direction, tinted by the specular texture.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from lumen.core.pdf import CosinePDF, PhongPDF
from lumen.core.ray import Ray, reflect
from lumen.core.vec3 import BLACK, Color
from lumen.materials.scatter import Scatter
from lumen.materials.texture import Texture

if TYPE_CHECKING:
    from lumen.geometry.hit import Hit


@dataclass(frozen=True, eq=False)
class Phong:
    """Diffuse plus glossy material.

    Attributes:
        kd: Probability of choosing the diffuse lobe, in [0, 1].
        diffuse: Texture of the diffuse lobe.
        specular: Texture of the glossy lobe.
        shininess: Phong exponent of the glossy lobe.
    """

    kd: float
    diffuse: Texture
    specular: Texture
    shininess: float

    def __post_init__(self) -> None:
        if self.kd < 0.0 or self.kd > 1.0:
            raise ValueError(f"Diffuse weight kd = {self.kd} is outside [0, 1]")
        if self.shininess < 0.0:
            raise ValueError(f"Shininess = {self.shininess} must not be negative")

    def scatter(self, ray: Ray, hit: Hit, rng: np.random.Generator) -> Scatter:
        if rng.random() < self.kd:
            return Scatter(
                attenuation=self.diffuse.value(hit.u, hit.v, hit.point),
                pdf=CosinePDF.around(hit.normal),
            )
        reflected = reflect(ray.direction.normalized(), hit.normal)
        return Scatter(
            attenuation=self.specular.value(hit.u, hit.v, hit.point),
            pdf=PhongPDF.around(reflected, self.shininess),
        )

    def emitted(self, hit: Hit) -> Color:
        return BLACK
