"""Sphere primitive.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic ``a*t^2 + 2*h*t + c = 0`` with:
    a = dot(direction, direction)
    h = dot(direction, oc)  (half of the traditional b)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Light sampling draws directions uniformly inside the cone the sphere
subtends from the shading point, so ``pdf`` is the reciprocal of that
cone's solid angle.

Example:
    >>> from lumen.core.ray import Ray
    >>> from lumen.core.vec3 import Vec3
    >>> from lumen.materials import Lambertian
    >>> sphere = Sphere(Vec3(0, 0, -1), 0.5, Lambertian.solid(Vec3(0.5, 0.5, 0.5)))
    >>> hit = sphere.hit(Ray(Vec3(0, 0, 0), Vec3(0, 0, -1)), 1e-4, float("inf"))
    >>> hit.t
    0.5
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from lumen.core.ray import ONB, T_MIN, TWO_PI, Ray, random_to_sphere, random_unit_vector
from lumen.core.vec3 import Color, Vec3
from lumen.geometry.aabb import AABB
from lumen.geometry.hit import Hit
from lumen.materials import Emission, Material


def sphere_uv(normal: Vec3) -> tuple[float, float]:
    """Texture coordinates of a point on the unit sphere.

    ``u`` wraps around the y-axis starting from -x, ``v`` runs from the
    south pole (0) to the north pole (1).
    """
    phi = math.atan2(normal.z, normal.x)
    theta = math.asin(max(-1.0, min(1.0, normal.y)))
    u = 1.0 - (phi + math.pi) / TWO_PI
    v = (theta + math.pi / 2.0) / math.pi
    return u, v


@dataclass(frozen=True, eq=False)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        material: Material of the whole surface.
    """

    center: Vec3
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius = {self.radius} must be positive")

    def bounding_box(self) -> AABB:
        r = Vec3(self.radius, self.radius, self.radius)
        return AABB(self.center - r, self.center + r)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        oc = ray.origin - self.center
        direction = ray.direction
        a = direction.length_squared()
        if a == 0.0:
            return None
        h = oc.dot(direction)
        c = oc.length_squared() - self.radius * self.radius
        discriminant = h * h - a * c
        if discriminant < 0.0:
            return None

        sqrt_d = math.sqrt(discriminant)
        # Smaller root first, then the far one
        t = (-h - sqrt_d) / a
        if not t_min <= t < t_max:
            t = (-h + sqrt_d) / a
            if not t_min <= t < t_max:
                return None

        point = ray.at(t)
        outward_normal = (point - self.center) / self.radius
        u, v = sphere_uv(outward_normal)
        return Hit.from_ray(ray, t, outward_normal, self.material, u, v)

    def is_light(self) -> bool:
        return isinstance(self.material, Emission)

    def pdf(self, ray: Ray) -> float:
        """Solid angle density of sampling ``ray.direction`` via ``random``."""
        if self.hit(ray, T_MIN, math.inf) is None:
            return 0.0
        distance_squared = (self.center - ray.origin).length_squared()
        radius_squared = self.radius * self.radius
        if distance_squared <= radius_squared:
            # Origin inside the sphere, every direction hits it
            return 1.0 / (2.0 * TWO_PI)
        cos_theta_max = math.sqrt(1.0 - radius_squared / distance_squared)
        solid_angle = TWO_PI * (1.0 - cos_theta_max)
        return 1.0 / solid_angle

    def random(self, origin: Vec3, rng: np.random.Generator) -> Vec3:
        """Direction from ``origin`` toward a uniformly chosen point of the visible cone."""
        direction = self.center - origin
        distance_squared = direction.length_squared()
        if distance_squared <= self.radius * self.radius:
            return random_unit_vector(rng)
        onb = ONB.from_w(direction)
        return onb.local(random_to_sphere(self.radius, distance_squared, rng))

    def emit(self, rng: np.random.Generator) -> tuple[Ray, Vec3, Color]:
        """Ray leaving a random surface point along the outward normal."""
        normal = random_unit_vector(rng)
        point = self.center + normal * self.radius
        u, v = sphere_uv(normal)
        hit = Hit(point, normal, 0.0, True, self.material, u, v)
        return Ray(point, normal), normal, self.material.emitted(hit)
