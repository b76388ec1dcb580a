"""Emissive material for area and sphere lights.

An emitter never scatters; its radiance is read by the integrator through
``emitted``. Primitives with this material are collected into the scene's
light list and targeted by light importance sampling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from lumen.core.ray import Ray
from lumen.core.vec3 import Color
from lumen.materials.texture import SolidTexture, Texture

if TYPE_CHECKING:
    from lumen.geometry.hit import Hit
    from lumen.materials.scatter import Scatter


@dataclass(frozen=True, eq=False)
class Emission:
    """Light-emitting material whose radiance comes from a texture."""

    texture: Texture

    @classmethod
    def solid(cls, radiance: Color) -> Emission:
        for i, component in enumerate(radiance):
            if component < 0.0:
                raise ValueError(f"Emitted radiance component {i} = {component} is negative")
        return cls(SolidTexture(radiance))

    def scatter(self, ray: Ray, hit: Hit, rng: np.random.Generator) -> Scatter | None:
        return None

    def emitted(self, hit: Hit) -> Color:
        return self.texture.value(hit.u, hit.v, hit.point)
