"""Flat primitive aggregate.

``PrimitiveList`` is a linear list of primitives. The scene uses it for its
light list: intersecting it finds the closest light, and as a sampling
target it picks one member uniformly and averages the member densities,
which keeps ``pdf`` and ``random`` consistent with each other.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

import numpy as np

from lumen.core.ray import Ray
from lumen.core.vec3 import Color, Vec3
from lumen.geometry.aabb import AABB, EMPTY_AABB
from lumen.geometry.hit import Hit

if TYPE_CHECKING:
    from lumen.geometry import Primitive


class PrimitiveList:
    """Immutable list of primitives queried by linear scan."""

    __slots__ = ("_items", "_bbox")

    def __init__(self, primitives: Iterable[Primitive] = ()) -> None:
        self._items: tuple[Primitive, ...] = tuple(primitives)
        bbox = None
        for item in self._items:
            box = item.bounding_box()
            bbox = box if bbox is None else AABB.containing(bbox, box)
        self._bbox = EMPTY_AABB if bbox is None else bbox

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Primitive:
        return self._items[index]

    def __repr__(self) -> str:
        return f"PrimitiveList({len(self._items)} primitives)"

    def bounding_box(self) -> AABB:
        return self._bbox

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        closest = None
        for item in self._items:
            hit = item.hit(ray, t_min, t_max)
            if hit is not None:
                closest = hit
                t_max = hit.t
        return closest

    def is_light(self) -> bool:
        return False

    def pdf(self, ray: Ray) -> float:
        if not self._items:
            return 0.0
        return sum(item.pdf(ray) for item in self._items) / len(self._items)

    def random(self, origin: Vec3, rng: np.random.Generator) -> Vec3:
        return self._choose(rng).random(origin, rng)

    def emit(self, rng: np.random.Generator) -> tuple[Ray, Vec3, Color]:
        return self._choose(rng).emit(rng)

    def _choose(self, rng: np.random.Generator) -> Primitive:
        if not self._items:
            raise ValueError("Cannot sample an empty primitive list")
        return self._items[int(rng.integers(len(self._items)))]
