"""Samplable direction distributions for importance sampling.

Each PDF answers two questions about directions leaving a shading point:
``value(direction)`` is the solid angle density of that direction, and
``generate(rng)`` draws a direction from the distribution. Materials hand
the integrator a PDF; the integrator mixes it with a PDF aimed at the
lights and uses the ratio of the two densities as the MIS weight.

Components:
    CosinePDF: Cosine-weighted hemisphere around a normal (Lambertian).
    PhongPDF: Phong lobe ``cos^n`` around the mirror direction.
    HittablePDF: Directions toward a primitive, delegating to its
        ``pdf``/``random`` queries (light sampling).
    MixPDF: Convex combination of two PDFs.

Example:
    >>> import numpy as np
    >>> from lumen.core.ray import ONB
    >>> from lumen.core.vec3 import Vec3
    >>> rng = np.random.default_rng(1)
    >>> cosine = CosinePDF(ONB.from_w(Vec3(0.0, 1.0, 0.0)))
    >>> d = cosine.generate(rng)
    >>> density = cosine.value(d)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import numpy as np

from lumen.core.ray import ONB, TWO_PI, Ray, random_cosine_direction
from lumen.core.vec3 import Vec3

if TYPE_CHECKING:
    from lumen.geometry import Primitive


@dataclass(frozen=True)
class CosinePDF:
    """Density ``max(0, cos theta) / pi`` around ``onb.w``."""

    onb: ONB

    @classmethod
    def around(cls, normal: Vec3) -> CosinePDF:
        return cls(ONB.from_w(normal))

    def value(self, direction: Vec3) -> float:
        cosine = direction.normalized().dot(self.onb.w)
        return max(0.0, cosine / math.pi)

    def generate(self, rng: np.random.Generator) -> Vec3:
        return self.onb.local(random_cosine_direction(rng))


@dataclass(frozen=True)
class PhongPDF:
    """Normalized Phong lobe around the reflected axis ``onb.w``.

    Attributes:
        onb: Basis whose z-axis is the mirror reflection direction.
        exponent: Phong shininess ``n``; larger is tighter.
    """

    onb: ONB
    exponent: float

    @classmethod
    def around(cls, reflected: Vec3, exponent: float) -> PhongPDF:
        return cls(ONB.from_w(reflected), exponent)

    def value(self, direction: Vec3) -> float:
        cosine = direction.normalized().dot(self.onb.w)
        if cosine <= 0.0:
            return 0.0
        n = self.exponent
        return (n + 1.0) / TWO_PI * cosine**n

    def generate(self, rng: np.random.Generator) -> Vec3:
        r1 = rng.random()
        r2 = rng.random()
        cos_alpha = r2 ** (1.0 / (self.exponent + 1.0))
        sin_alpha = math.sqrt(max(0.0, 1.0 - cos_alpha * cos_alpha))
        phi = TWO_PI * r1
        return self.onb.local(Vec3(math.cos(phi) * sin_alpha, math.sin(phi) * sin_alpha, cos_alpha))


@dataclass(frozen=True)
class HittablePDF:
    """Directions from ``origin`` toward the surface of ``target``."""

    origin: Vec3
    target: Primitive

    def value(self, direction: Vec3) -> float:
        return self.target.pdf(Ray(self.origin, direction))

    def generate(self, rng: np.random.Generator) -> Vec3:
        return self.target.random(self.origin, rng)


@dataclass(frozen=True)
class MixPDF:
    """Convex combination ``bias * first + (1 - bias) * second``."""

    bias: float
    first: PDF
    second: PDF

    def __post_init__(self) -> None:
        if not 0.0 <= self.bias <= 1.0:
            raise ValueError(f"Mix bias {self.bias} is outside [0, 1]")

    def value(self, direction: Vec3) -> float:
        return self.bias * self.first.value(direction) + (1.0 - self.bias) * self.second.value(
            direction
        )

    def generate(self, rng: np.random.Generator) -> Vec3:
        if rng.random() < self.bias:
            return self.first.generate(rng)
        return self.second.generate(rng)


PDF = Union[CosinePDF, PhongPDF, HittablePDF, MixPDF]
