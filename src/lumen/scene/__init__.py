"""Scene module: scene container, file loader and built-in scenes.

Components:
    scene: Immutable Scene (background, BVH root, light list) and SkyGradient
    loader: YAML scene description loader
    cornell_box: The classic Cornell box
    presets: Procedural scenes selectable from the command line

Every scene factory returns a ``(Scene, ThinLensCamera)`` pair; the loader
additionally returns the file's ``render`` section.
"""

from .cornell_box import BOX_SIZE, CornellBoxParams, create_cornell_box_scene
from .loader import SceneError, load_scene, parse_scene
from .presets import PRESETS, ground, random_spheres
from .scene import Background, Scene, SkyGradient

__all__ = [
    # Scene container
    "Scene",
    "SkyGradient",
    "Background",
    # Loader
    "SceneError",
    "load_scene",
    "parse_scene",
    # Built-in scenes
    "CornellBoxParams",
    "create_cornell_box_scene",
    "BOX_SIZE",
    "PRESETS",
    "random_spheres",
    "ground",
]
