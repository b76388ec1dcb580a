"""Procedurally generated scenes.

Components:
    random_spheres: Field of small random spheres around three large ones
    ground: A single diffuse ground sphere under a sky gradient
    PRESETS: Name -> factory map used by the command line

Every factory takes the image aspect ratio and returns (Scene, ThinLensCamera).
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from lumen.camera.thin_lens import ThinLensCamera
from lumen.core.vec3 import Vec3
from lumen.geometry import Primitive, Sphere
from lumen.materials import CheckerTexture, Dielectric, Lambertian, Metal, SolidTexture
from lumen.scene.cornell_box import create_cornell_box_scene
from lumen.scene.scene import Scene, SkyGradient

logger = logging.getLogger(__name__)

SKY_BLUE = Vec3(0.5, 0.7, 1.0)

SceneFactory = Callable[[float], tuple[Scene, ThinLensCamera]]


def random_spheres(
    aspect_ratio: float = 16.0 / 9.0,
    grid: int = 11,
    seed: int | None = 0,
) -> tuple[Scene, ThinLensCamera]:
    """Checkered ground with a grid of random small spheres and three large ones.

    Small spheres are 80% Lambertian, 15% metal and 5% glass.

    Args:
        aspect_ratio: Image width over height for the camera.
        grid: Half extent of the grid; spheres sit at integer (a, b) with
            ``-grid <= a, b < grid``.
        seed: Seed of the layout; None for a different layout every call.
    """
    rng = np.random.default_rng(seed)
    checker = CheckerTexture(
        odd=SolidTexture(Vec3(0.2, 0.3, 0.1)),
        even=SolidTexture(Vec3(0.9, 0.9, 0.9)),
    )
    glass = Dielectric(1.5)
    primitives: list[Primitive] = [Sphere(Vec3(0.0, -1000.0, 0.0), 1000.0, Lambertian(checker))]

    clearing = Vec3(4.0, 0.2, 0.0)
    for a in range(-grid, grid):
        for b in range(-grid, grid):
            choose = rng.random()
            center = Vec3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())
            if (center - clearing).length() <= 0.9:
                continue
            if choose < 0.8:
                albedo = Vec3(*(rng.random(3) * rng.random(3)))
                material = Lambertian.solid(albedo)
            elif choose < 0.95:
                albedo = Vec3(*rng.uniform(0.5, 1.0, 3))
                material = Metal(albedo, float(rng.uniform(0.0, 0.5)))
            else:
                material = glass
            primitives.append(Sphere(center, 0.2, material))

    primitives.append(Sphere(Vec3(0.0, 1.0, 0.0), 1.0, glass))
    primitives.append(Sphere(Vec3(-4.0, 1.0, 0.0), 1.0, Lambertian.solid(Vec3(0.4, 0.2, 0.1))))
    primitives.append(Sphere(Vec3(4.0, 1.0, 0.0), 1.0, Metal(Vec3(0.7, 0.6, 0.5), 0.0)))
    logger.debug("Generated %d random spheres", len(primitives))

    camera = ThinLensCamera(
        look_from=(13.0, 2.0, 3.0),
        look_at=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_distance=10.0,
    )
    return Scene.from_primitives(SKY_BLUE, primitives), camera


def ground(aspect_ratio: float = 16.0 / 9.0) -> tuple[Scene, ThinLensCamera]:
    """A diffuse sphere of radius 100 resting below y = 0, lit by a white-to-blue sky."""
    floor = Sphere(Vec3(0.0, -100.0, 0.0), 100.0, Lambertian.solid(Vec3(0.5, 0.5, 0.5)))
    sky = SkyGradient(bottom=Vec3(1.0, 1.0, 1.0), top=SKY_BLUE)
    camera = ThinLensCamera(
        look_from=(0.0, 1.0, 3.0),
        look_at=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=60.0,
        aspect_ratio=aspect_ratio,
        focus_distance=1.0,
    )
    return Scene.from_primitives(sky, [floor]), camera


def _cornell(aspect_ratio: float) -> tuple[Scene, ThinLensCamera]:
    return create_cornell_box_scene(aspect_ratio)


PRESETS: dict[str, SceneFactory] = {
    "cornell": _cornell,
    "random": random_spheres,
    "ground": ground,
}
