"""Textures: pure color lookups ``value(u, v, point) -> Color``.

Components:
    SolidTexture: A constant color.
    CheckerTexture: 3D checker pattern alternating between two textures.
    ImageTexture: Nearest-neighbour lookup into an RGB image.

Example:
    >>> from lumen.core.vec3 import Vec3
    >>> white = SolidTexture(Vec3(0.9, 0.9, 0.9))
    >>> green = SolidTexture(Vec3(0.2, 0.3, 0.1))
    >>> checker = CheckerTexture(odd=green, even=white)
    >>> color = checker.value(0.0, 0.0, Vec3(0.1, 0.2, 0.3))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from lumen.core.vec3 import Color, Vec3


@dataclass(frozen=True)
class SolidTexture:
    """A texture with the same color everywhere."""

    color: Color

    def value(self, u: float, v: float, point: Vec3) -> Color:
        return self.color


@dataclass(frozen=True)
class CheckerTexture:
    """Solid checker pattern defined in world space.

    Attributes:
        odd: Texture used where ``sin(sx) sin(sy) sin(sz)`` is negative.
        even: Texture used elsewhere.
        scale: Spatial frequency of the pattern.
    """

    odd: Texture
    even: Texture
    scale: float = 10.0

    def value(self, u: float, v: float, point: Vec3) -> Color:
        s = self.scale
        sines = math.sin(s * point.x) * math.sin(s * point.y) * math.sin(s * point.z)
        if sines < 0.0:
            return self.odd.value(u, v, point)
        return self.even.value(u, v, point)


@dataclass(frozen=True, eq=False)
class ImageTexture:
    """Texture sampled from an image.

    Attributes:
        pixels: Float array of shape (height, width, 3) with linear values
            in [0, 1]. Row 0 is the top of the image.
    """

    pixels: npt.NDArray[np.float64] = field(repr=False)

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(
                f"Image texture shape {self.pixels.shape} is not (height, width, 3)"
            )
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise ValueError("Image texture must not be empty")

    @classmethod
    def from_file(cls, path: str | Path) -> ImageTexture:
        """Load an image file with Pillow."""
        with PILImage.open(path) as image:
            data = np.asarray(image.convert("RGB"), dtype=np.float64) / 255.0
        return cls(data)

    def value(self, u: float, v: float, point: Vec3) -> Color:
        height, width = self.pixels.shape[:2]
        u = min(max(u, 0.0), 1.0)
        v = 1.0 - min(max(v, 0.0), 1.0)
        i = min(int(u * width), width - 1)
        j = min(int(v * height), height - 1)
        r, g, b = self.pixels[j, i]
        return Vec3(r, g, b)


Texture = Union[SolidTexture, CheckerTexture, ImageTexture]
