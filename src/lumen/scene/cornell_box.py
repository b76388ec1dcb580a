"""Cornell box scene configuration.

This module provides a factory function to create the classic Cornell box scene,
a standard test scene used in computer graphics for evaluating global illumination
algorithms.

The Cornell box consists of:
- 5 walls forming an open box (left, right, back, floor, ceiling)
- Red and green side walls, white back wall, floor and ceiling
- Area light on the ceiling (emissive rect facing down)
- Either the classic two rotated blocks or three spheres (diffuse, metal, glass)

The box spans from 0 to 555 in each dimension, with the camera positioned
outside looking in through the open front.

Example:
    >>> scene, camera = create_cornell_box_scene()
    >>> len(scene.lights)
    1
    >>> scene, camera = create_cornell_box_scene(params=CornellBoxParams(contents="spheres"))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from lumen.camera.thin_lens import ThinLensCamera
from lumen.core.vec3 import BLACK, Vec3
from lumen.geometry import Block, Primitive, Rect, RectAxis, Rotate, Sphere, Translate
from lumen.materials import Dielectric, Emission, Lambertian, Metal
from lumen.scene.scene import Scene

# =============================================================================
# Cornell Box Parameters
# =============================================================================


@dataclass
class CornellBoxParams:
    """Parameters for configuring a Cornell box scene.

    All parameters have defaults matching the classic Cornell box configuration.

    Attributes:
        light_intensity: Scale of the ceiling light's radiance.
        light_color: RGB color of the light (each component in [0, 1]).
        left_wall_color: RGB albedo of the wall on the left of the image.
        right_wall_color: RGB albedo of the wall on the right of the image.
        back_wall_color: RGB albedo of the back wall, floor and ceiling.
        contents: "blocks" for the classic rotated boxes, "spheres" for a
            diffuse, a metal and a glass sphere.

    Example:
        >>> params = CornellBoxParams()
        >>> params.light_intensity
        15.0
        >>> warm = CornellBoxParams(light_color=(1.0, 0.9, 0.8), contents="spheres")
    """

    light_intensity: float = 15.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    left_wall_color: tuple[float, float, float] = (0.12, 0.45, 0.15)
    right_wall_color: tuple[float, float, float] = (0.65, 0.05, 0.05)
    back_wall_color: tuple[float, float, float] = (0.73, 0.73, 0.73)
    contents: Literal["blocks", "spheres"] = "blocks"

    def __post_init__(self) -> None:
        if self.light_intensity < 0.0:
            raise ValueError(f"light_intensity = {self.light_intensity} must not be negative")
        if self.contents not in ("blocks", "spheres"):
            raise ValueError(f"Unknown Cornell box contents: {self.contents}")


# =============================================================================
# Cornell Box Constants
# =============================================================================

# Classic Cornell box dimensions (approximately 555x555x555 units)
BOX_SIZE = 555.0

# Metal sphere parameters (silver/chrome appearance)
METAL_SPHERE_ALBEDO = (0.95, 0.93, 0.88)
METAL_SPHERE_ROUGHNESS = 0.3

GLASS_SPHERE_IOR = 1.5

# Classic Cornell box camera
CAMERA_DISTANCE = 800.0
CAMERA_VFOV = 40.0


def _contents(params: CornellBoxParams, white: Lambertian, box_size: float) -> list[Primitive]:
    scale = box_size / BOX_SIZE
    if params.contents == "blocks":
        tall = Block(Vec3(0.0, 0.0, 0.0), Vec3(165.0, 330.0, 165.0) * scale, white)
        short = Block(Vec3(0.0, 0.0, 0.0), Vec3(165.0, 165.0, 165.0) * scale, white)
        return [
            Translate(Rotate(tall, Vec3(0.0, 15.0, 0.0)), Vec3(265.0, 0.0, 295.0) * scale),
            Translate(Rotate(short, Vec3(0.0, -18.0, 0.0)), Vec3(130.0, 0.0, 65.0) * scale),
        ]

    radius = 80.0 * scale
    metal = Metal(Vec3(*METAL_SPHERE_ALBEDO), METAL_SPHERE_ROUGHNESS)
    glass = Dielectric(GLASS_SPHERE_IOR)
    return [
        Sphere(Vec3(box_size * 0.73, radius, box_size * 0.35), radius, white),
        Sphere(Vec3(box_size * 0.27, radius, box_size * 0.35), radius, metal),
        Sphere(Vec3(box_size * 0.5, radius, box_size * 0.65), radius, glass),
    ]


def create_cornell_box_scene(
    aspect_ratio: float = 1.0,
    box_size: float = BOX_SIZE,
    params: CornellBoxParams | None = None,
) -> tuple[Scene, ThinLensCamera]:
    """Create a Cornell box scene.

    The coordinate system places the box origin at (0, 0, 0) with:
    - X-axis: 0 is the right side of the image, box_size the left
    - Y-axis: floor to ceiling (0 to box_size)
    - Z-axis: front to back (0 to box_size), camera looks toward +Z

    Args:
        aspect_ratio: Image width over height for the camera.
        box_size: The size of the box in each dimension.
        params: Optional CornellBoxParams for customizing light, walls and
            contents. If None, uses default CornellBoxParams().

    Returns:
        A tuple of (Scene, ThinLensCamera).
    """
    if params is None:
        params = CornellBoxParams()

    red = Lambertian.solid(Vec3(*params.right_wall_color))
    green = Lambertian.solid(Vec3(*params.left_wall_color))
    white = Lambertian.solid(Vec3(*params.back_wall_color))
    light = Emission.solid(Vec3(*params.light_color) * params.light_intensity)

    s = box_size
    scale = s / BOX_SIZE
    primitives: list[Primitive] = [
        Rect.from_bounds(green, RectAxis.YZ, (0.0, 0.0), (s, s), s),
        Rect.from_bounds(red, RectAxis.YZ, (0.0, 0.0), (s, s), 0.0),
        Rect.from_bounds(white, RectAxis.XZ, (0.0, 0.0), (s, s), 0.0),
        Rect.from_bounds(white, RectAxis.XZ, (0.0, 0.0), (s, s), s),
        Rect.from_bounds(white, RectAxis.XY, (0.0, 0.0), (s, s), s),
        # Ceiling light, flipped to face the floor
        Rect.from_bounds(
            light,
            RectAxis.XZ,
            (213.0 * scale, 227.0 * scale),
            (343.0 * scale, 332.0 * scale),
            s - 1.0 * scale,
            flipped=True,
        ),
    ]
    primitives.extend(_contents(params, white, s))

    camera = ThinLensCamera(
        look_from=(s / 2.0, s / 2.0, -CAMERA_DISTANCE * scale),
        look_at=(s / 2.0, s / 2.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=CAMERA_VFOV,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_distance=CAMERA_DISTANCE * scale,
    )
    return Scene.from_primitives(BLACK, primitives), camera
