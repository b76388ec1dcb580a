"""Immutable scene: background, BVH root and light list.

The same primitive objects are shared by the BVH and by the light list;
lights are the primitives whose ``is_light()`` is true when the scene is
assembled.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from lumen.core.ray import Ray
from lumen.core.vec3 import Color
from lumen.geometry.bvh import BVHNode, build_bvh
from lumen.geometry.group import PrimitiveList
from lumen.geometry.hit import Hit

if TYPE_CHECKING:
    from lumen.geometry import Primitive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkyGradient:
    """Vertical gradient from ``bottom`` (looking down) to ``top`` (looking up)."""

    bottom: Color
    top: Color

    def value(self, ray: Ray) -> Color:
        t = 0.5 * (ray.direction.normalized().y + 1.0)
        return self.bottom * (1.0 - t) + self.top * t


Background = Union[Color, SkyGradient]


@dataclass(frozen=True)
class Scene:
    """Everything the integrator needs to trace paths.

    Attributes:
        background: Radiance of rays that escape the scene.
        root: BVH over all primitives.
        lights: Light-emitting primitives, the target of light sampling.
    """

    background: Background
    root: BVHNode
    lights: PrimitiveList

    @classmethod
    def from_primitives(cls, background: Background, primitives: Sequence[Primitive]) -> Scene:
        """Index ``primitives`` and collect the lights among them.

        Raises:
            ValueError: If ``primitives`` is empty.
        """
        root = build_bvh(primitives)
        lights = PrimitiveList(p for p in primitives if p.is_light())
        logger.info("Scene assembled: %d primitives, %d lights", len(primitives), len(lights))
        return cls(background, root, lights)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        return self.root.hit(ray, t_min, t_max)

    def background_color(self, ray: Ray) -> Color:
        if isinstance(self.background, SkyGradient):
            return self.background.value(ray)
        return self.background
