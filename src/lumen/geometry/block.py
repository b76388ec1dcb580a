"""Axis-aligned box made of six rects.

The faces share one material and are intersected through a small local
BVH. Faces on the minimum side are flipped so every outward normal points
away from the box interior, which keeps refraction through glass blocks
correct.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from lumen.core.ray import Ray
from lumen.core.vec3 import Color, Vec3
from lumen.geometry.aabb import AABB
from lumen.geometry.bvh import BVHNode, build_bvh
from lumen.geometry.group import PrimitiveList
from lumen.geometry.hit import Hit
from lumen.geometry.rect import Rect, RectAxis
from lumen.materials import Emission, Material


def box_faces(start: Vec3, end: Vec3, material: Material) -> list[Rect]:
    """The six faces of the box spanned by two opposite corners."""
    lo = start.min(end)
    hi = start.max(end)
    return [
        Rect.from_bounds(material, RectAxis.XY, (lo.x, lo.y), (hi.x, hi.y), hi.z),
        Rect.from_bounds(material, RectAxis.XY, (lo.x, lo.y), (hi.x, hi.y), lo.z, flipped=True),
        Rect.from_bounds(material, RectAxis.XZ, (lo.x, lo.z), (hi.x, hi.z), hi.y),
        Rect.from_bounds(material, RectAxis.XZ, (lo.x, lo.z), (hi.x, hi.z), lo.y, flipped=True),
        Rect.from_bounds(material, RectAxis.YZ, (lo.y, lo.z), (hi.y, hi.z), hi.x),
        Rect.from_bounds(material, RectAxis.YZ, (lo.y, lo.z), (hi.y, hi.z), lo.x, flipped=True),
    ]


@dataclass(frozen=True, eq=False)
class Block:
    """Box between corners ``start`` and ``end``.

    Attributes:
        start: One corner of the box.
        end: The opposite corner.
        material: Material of all six faces.
    """

    start: Vec3
    end: Vec3
    material: Material
    faces: PrimitiveList = field(init=False, repr=False)
    _index: BVHNode = field(init=False, repr=False)

    def __post_init__(self) -> None:
        faces = box_faces(self.start, self.end, self.material)
        object.__setattr__(self, "faces", PrimitiveList(faces))
        object.__setattr__(self, "_index", build_bvh(faces))

    def bounding_box(self) -> AABB:
        return self.faces.bounding_box()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        return self._index.hit(ray, t_min, t_max)

    def is_light(self) -> bool:
        return isinstance(self.material, Emission)

    def pdf(self, ray: Ray) -> float:
        return self.faces.pdf(ray)

    def random(self, origin: Vec3, rng: np.random.Generator) -> Vec3:
        return self.faces.random(origin, rng)

    def emit(self, rng: np.random.Generator) -> tuple[Ray, Vec3, Color]:
        return self.faces.emit(rng)
