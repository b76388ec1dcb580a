"""Thin lens camera model with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward look_from (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The image plane sits at ``focus_distance`` in front of the lens. Rays
start at a random point of the lens disk (radius ``aperture / 2``) and pass
through the image plane point, so only geometry at the focus distance is
sharp. An aperture of 0 gives a pinhole camera.

Example:
    >>> import numpy as np
    >>> camera = ThinLensCamera(
    ...     look_from=(13.0, 2.0, 3.0),
    ...     look_at=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=16.0 / 9.0,
    ...     aperture=0.1,
    ...     focus_distance=10.0,
    ... )
    >>> ray = camera.get_ray(0.5, 0.5, np.random.default_rng(0))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from lumen.core.ray import Ray, random_in_unit_disk
from lumen.core.vec3 import Vec3


def _vec(values: np.ndarray) -> Vec3:
    return Vec3(float(values[0]), float(values[1]), float(values[2]))


@dataclass(frozen=True)
class ThinLensCamera:
    """Look-at camera with a circular lens.

    Attributes:
        look_from: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter; 0 for a pinhole.
        focus_distance: Distance from the lens to the plane in focus.
    """

    look_from: tuple[float, float, float]
    look_at: tuple[float, float, float]
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 40.0
    aspect_ratio: float = 16.0 / 9.0
    aperture: float = 0.0
    focus_distance: float = 1.0

    origin: Vec3 = field(init=False, repr=False)
    u: Vec3 = field(init=False, repr=False)
    v: Vec3 = field(init=False, repr=False)
    w: Vec3 = field(init=False, repr=False)
    horizontal: Vec3 = field(init=False, repr=False)
    vertical: Vec3 = field(init=False, repr=False)
    lower_left: Vec3 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov = {self.vfov} must be within (0, 180) degrees")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio = {self.aspect_ratio} must be positive")
        if self.aperture < 0.0:
            raise ValueError(f"aperture = {self.aperture} must not be negative")
        if self.focus_distance <= 0.0:
            raise ValueError(f"focus_distance = {self.focus_distance} must be positive")

        # Viewport dimensions at unit distance
        h = math.tan(math.radians(self.vfov) / 2.0)
        viewport_height = 2.0 * h
        viewport_width = self.aspect_ratio * viewport_height

        look_from = np.array(self.look_from, dtype=np.float64)
        look_at = np.array(self.look_at, dtype=np.float64)
        vup = np.array(self.vup, dtype=np.float64)

        w = look_from - look_at
        if not np.linalg.norm(w) > 0.0:
            raise ValueError("look_from and look_at must be different points")
        w = w / np.linalg.norm(w)
        u = np.cross(vup, w)
        if not np.linalg.norm(u) > 0.0:
            raise ValueError("vup must not be parallel to the viewing direction")
        u = u / np.linalg.norm(u)
        v = np.cross(w, u)

        horizontal = self.focus_distance * viewport_width * u
        vertical = self.focus_distance * viewport_height * v
        lower_left = look_from - horizontal / 2.0 - vertical / 2.0 - self.focus_distance * w

        for name, value in (
            ("origin", look_from),
            ("u", u),
            ("v", v),
            ("w", w),
            ("horizontal", horizontal),
            ("vertical", vertical),
            ("lower_left", lower_left),
        ):
            object.__setattr__(self, name, _vec(value))

    @property
    def lens_radius(self) -> float:
        return self.aperture / 2.0

    def with_aspect_ratio(self, aspect_ratio: float) -> ThinLensCamera:
        """Same camera for a different image shape."""
        return ThinLensCamera(
            self.look_from,
            self.look_at,
            self.vup,
            self.vfov,
            aspect_ratio,
            self.aperture,
            self.focus_distance,
        )

    def get_ray(self, s: float, t: float, rng: np.random.Generator) -> Ray:
        """Generate a ray through normalized image coordinates (s, t).

        Args:
            s: Horizontal coordinate in [0, 1] (left to right).
            t: Vertical coordinate in [0, 1] (bottom to top).
            rng: Generator for the lens sample.

        Returns:
            A ray from a point on the lens toward the image plane point.
        """
        origin = self.origin
        if self.aperture > 0.0:
            rd = random_in_unit_disk(rng) * self.lens_radius
            origin = origin + self.u * rd.x + self.v * rd.y
        target = self.lower_left + self.horizontal * s + self.vertical * t
        return Ray(origin, target - origin)
