"""Geometry module for shape primitives and spatial acceleration.

Components:
    aabb: Axis-aligned bounding boxes and the slab test
    hit: The Hit record returned by intersection queries
    sphere: Sphere primitive
    rect: Axis-aligned rectangle primitive
    block: Axis-aligned box built from six rects
    transform: Translate and Rotate instance wrappers
    group: Flat primitive list (used for the scene's lights)
    bvh: Bounding volume hierarchy over primitives

Every primitive answers the same queries:
    bounding_box() -> AABB
    hit(ray, t_min, t_max) -> Hit | None     (half-open range)
    is_light() -> bool
    pdf(ray) -> float                        (solid angle density)
    random(origin, rng) -> Vec3              (direction toward the primitive)
    emit(rng) -> (Ray, normal, radiance)
"""

from typing import Union

from .aabb import AABB
from .block import Block
from .bvh import BVHNode, build_bvh
from .group import PrimitiveList
from .hit import Hit
from .rect import Rect, RectAxis
from .sphere import Sphere
from .transform import Rotate, Translate

Primitive = Union[Sphere, Rect, Block, Translate, Rotate]

__all__ = [
    "AABB",
    "Hit",
    "Primitive",
    "Sphere",
    "Rect",
    "RectAxis",
    "Block",
    "Translate",
    "Rotate",
    "PrimitiveList",
    "BVHNode",
    "build_bvh",
]
