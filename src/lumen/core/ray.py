"""Ray data structure, vector helpers and random sampling utilities.

This module provides the Ray value type together with the reflection,
refraction and Monte Carlo sampling helpers shared by materials, PDFs
and the camera. Every sampling function takes the caller's
``numpy.random.Generator`` explicitly so that each render worker owns
its random stream.

Example:
    >>> import numpy as np
    >>> rng = np.random.default_rng(7)
    >>> ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, -1.0))
    >>> ray.at(5.0)
    Vec3(0.0, 0.0, -5.0)
    >>> d = random_cosine_direction(rng)  # z-up local frame
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from lumen.core.vec3 import Vec3

# Ray parameter below which hits are ignored, avoids self-intersection acne
T_MIN = 1e-4

TWO_PI = 2.0 * math.pi


class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. Not normalized by
            contract; callers normalize where they need to.
    """

    __slots__ = ("origin", "direction")

    def __init__(self, origin: Vec3, direction: Vec3) -> None:
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Vec3:
        """Compute the point origin + t * direction."""
        d = self.direction
        o = self.origin
        return Vec3(o.x + t * d.x, o.y + t * d.y, o.z + t * d.z)

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin!r}, direction={self.direction!r})"


# =============================================================================
# Vector Utility Functions
# =============================================================================


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a unit normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - normal * (2.0 * incident.dot(normal))


def refract(incident: Vec3, normal: Vec3, eta: float) -> Vec3:
    """Refract a unit incident vector through a surface.

    Args:
        incident: The incoming direction (normalized).
        normal: The front-facing surface normal (normalized).
        eta: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction. Callers check for total internal
        reflection before refracting.
    """
    cos_theta = min(-incident.dot(normal), 1.0)
    perpendicular = (incident + normal * cos_theta) * eta
    parallel = normal * -math.sqrt(abs(1.0 - perpendicular.length_squared()))
    return perpendicular + parallel


def schlick_fresnel(cosine: float, ref_idx: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Index of refraction (or the ratio of indices; r0 is the
            same for a ratio and its reciprocal).

    Returns:
        The approximate reflectance in [0, 1].
    """
    r0 = ((1.0 - ref_idx) / (1.0 + ref_idx)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


@dataclass(frozen=True)
class ONB:
    """Orthonormal basis with ``w`` as the local z-axis.

    Attributes:
        u: Local x-axis in world coordinates.
        v: Local y-axis in world coordinates.
        w: Local z-axis in world coordinates.
    """

    u: Vec3
    v: Vec3
    w: Vec3

    @classmethod
    def from_w(cls, n: Vec3) -> ONB:
        """Build a basis whose z-axis is the normalized ``n``."""
        w = n.normalized()
        # Choose a helper axis that is not parallel to w
        a = Vec3(0.0, 1.0, 0.0) if abs(w.x) > 0.9 else Vec3(1.0, 0.0, 0.0)
        v = w.cross(a).normalized()
        u = w.cross(v)
        return cls(u, v, w)

    def local(self, a: Vec3) -> Vec3:
        """Transform local coordinates (x, y, z) to world space."""
        u, v, w = self.u, self.v, self.w
        return Vec3(
            a.x * u.x + a.y * v.x + a.z * w.x,
            a.x * u.y + a.y * v.y + a.z * w.y,
            a.x * u.z + a.y * v.z + a.z * w.z,
        )


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Generate a uniformly distributed point inside the unit sphere.

    Uses rejection sampling.
    """
    while True:
        p = Vec3(
            rng.random() * 2.0 - 1.0,
            rng.random() * 2.0 - 1.0,
            rng.random() * 2.0 - 1.0,
        )
        if p.length_squared() < 1.0:
            return p


def random_unit_vector(rng: np.random.Generator) -> Vec3:
    """Generate a unit vector uniformly distributed on the sphere.

    Samples the height z uniformly, which by Archimedes' hat-box theorem
    gives a uniform distribution over the surface.
    """
    a = rng.random() * TWO_PI
    z = rng.random() * 2.0 - 1.0
    r = math.sqrt(max(0.0, 1.0 - z * z))
    return Vec3(r * math.cos(a), r * math.sin(a), z)


def random_in_unit_disk(rng: np.random.Generator) -> Vec3:
    """Generate a random point (x, y, 0) inside the unit disk.

    Used by the thin lens camera for depth of field.
    """
    while True:
        p = Vec3(rng.random() * 2.0 - 1.0, rng.random() * 2.0 - 1.0, 0.0)
        if p.x * p.x + p.y * p.y < 1.0:
            return p


def random_cosine_direction(rng: np.random.Generator) -> Vec3:
    """Generate a direction in the z-up local frame with density cos(theta) / pi."""
    r1 = rng.random()
    r2 = rng.random()
    phi = TWO_PI * r1
    sqrt_r2 = math.sqrt(r2)
    return Vec3(math.cos(phi) * sqrt_r2, math.sin(phi) * sqrt_r2, math.sqrt(1.0 - r2))


def random_to_sphere(radius: float, distance_squared: float, rng: np.random.Generator) -> Vec3:
    """Sample a direction uniformly inside the cone subtended by a sphere.

    The cone axis is the local z-axis. ``distance_squared`` is the squared
    distance from the viewpoint to the sphere center and must exceed
    ``radius ** 2``.
    """
    r1 = rng.random()
    r2 = rng.random()
    cos_theta_max = math.sqrt(1.0 - radius * radius / distance_squared)
    z = 1.0 + r2 * (cos_theta_max - 1.0)
    phi = TWO_PI * r1
    sin_theta = math.sqrt(max(0.0, 1.0 - z * z))
    return Vec3(math.cos(phi) * sin_theta, math.sin(phi) * sin_theta, z)
