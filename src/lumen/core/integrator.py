"""Path tracing integrator for Monte Carlo light transport.

The path tracer solves the rendering equation by following a camera ray
through the scene, bouncing off surfaces according to their materials and
accumulating radiance along the path.

Each bounce:
    1. Intersect the scene. A miss adds the background and ends the path.
    2. Add the surface's emitted radiance, weighted by the throughput.
    3. Ask the material to scatter. Emitters do not scatter; the path ends.
    4. Specular scatter: multiply the throughput by the attenuation and
       follow the returned ray.
    5. PDF scatter: draw a direction from a mix of the material PDF and a
       PDF aimed at the scene's lights, then weight the throughput by
       ``attenuation * material_pdf(d) / mix_pdf(d)``.

Key features:
    - Iterative loop bounded by MAX_DEPTH
    - One-sample MIS between BSDF sampling and light sampling
    - Optional Russian roulette termination after a minimum number of bounces

Example:
    >>> import numpy as np
    >>> tracer = PathTracer(scene)
    >>> rng = np.random.default_rng(42)
    >>> color = tracer.sample(camera.get_ray(0.5, 0.5, rng), rng)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

import numpy as np

from lumen.core.pdf import PDF, HittablePDF, MixPDF
from lumen.core.ray import T_MIN, Ray
from lumen.core.vec3 import Color, Vec3

if TYPE_CHECKING:
    from lumen.scene.scene import Scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 25

# Probability of drawing from the material PDF rather than the lights
LIGHT_BIAS = 0.75

# Minimum bounces before Russian roulette can terminate paths
MIN_BOUNCES_BEFORE_RR = 3

# Russian roulette survival probability cap
MAX_RR_PROBABILITY = 0.95


class Tracer(Protocol):
    """Anything that estimates the radiance arriving along a camera ray."""

    def sample(self, ray: Ray, rng: np.random.Generator) -> Color: ...


class PathTracer:
    """Unidirectional path tracer with light importance sampling.

    Attributes:
        scene: The scene to trace.
        max_depth: Maximum number of bounces per path.
        light_bias: Weight of the material PDF in the MIS mixture.
        russian_roulette: Whether to terminate dim paths stochastically.
    """

    def __init__(
        self,
        scene: Scene,
        *,
        max_depth: int = MAX_DEPTH,
        light_bias: float = LIGHT_BIAS,
        russian_roulette: bool = False,
    ) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth = {max_depth} must be at least 1")
        if not 0.0 <= light_bias <= 1.0:
            raise ValueError(f"light_bias = {light_bias} is outside [0, 1]")
        self.scene = scene
        self.max_depth = max_depth
        self.light_bias = light_bias
        self.russian_roulette = russian_roulette

    def __repr__(self) -> str:
        return (
            f"PathTracer(max_depth={self.max_depth}, light_bias={self.light_bias}, "
            f"lights={len(self.scene.lights)})"
        )

    def _sampling_pdf(self, material_pdf: PDF, point: Vec3) -> PDF:
        if len(self.scene.lights) == 0:
            return material_pdf
        return MixPDF(self.light_bias, material_pdf, HittablePDF(point, self.scene.lights))

    def sample(self, ray: Ray, rng: np.random.Generator) -> Color:
        """Estimate the radiance arriving along ``ray``.

        Args:
            ray: The camera ray.
            rng: Generator owned by the calling worker.

        Returns:
            One Monte Carlo estimate of the radiance (RGB).
        """
        scene = self.scene
        radiance = Vec3(0.0, 0.0, 0.0)
        throughput = Vec3(1.0, 1.0, 1.0)

        for depth in range(self.max_depth):
            hit = scene.hit(ray, T_MIN, math.inf)
            if hit is None:
                radiance = radiance + throughput * scene.background_color(ray)
                break

            material = hit.material
            radiance = radiance + throughput * material.emitted(hit)

            scatter = material.scatter(ray, hit, rng)
            if scatter is None:
                break

            if scatter.specular is not None:
                throughput = throughput * scatter.attenuation
                ray = scatter.specular
            else:
                sampling = self._sampling_pdf(scatter.pdf, hit.point)
                direction = sampling.generate(rng)
                density = sampling.value(direction)
                if not density > 0.0:
                    # Vanishing density, the path carries nothing further
                    break
                weight = scatter.pdf.value(direction) / density
                if weight == 0.0:
                    break
                throughput = throughput * scatter.attenuation * weight
                ray = Ray(hit.point, direction)

            if self.russian_roulette and depth >= MIN_BOUNCES_BEFORE_RR:
                luminance = 0.2126 * throughput.x + 0.7152 * throughput.y + 0.0722 * throughput.z
                survival = min(luminance, MAX_RR_PROBABILITY)
                if survival <= 0.0 or rng.random() > survival:
                    break
                throughput = throughput / survival

        return radiance
