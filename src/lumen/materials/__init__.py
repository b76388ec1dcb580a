"""Materials module: textures and scattering models.

Components:
    texture: Solid, checker and image textures
    scatter: The Scatter result shared by all materials
    lambertian: Ideal diffuse reflection (cosine PDF)
    metal: Specular reflection with optional roughness
    dielectric: Glass-like refraction with Schlick Fresnel
    emission: Light emitters
    phong: Stochastic diffuse + glossy Phong lobe

Each material provides:
    - scatter(ray, hit, rng): a specular ray or a PDF with attenuation,
      or None for emitters
    - emitted(hit): self-emitted radiance (black except for Emission)
"""

from typing import Union

from .dielectric import Dielectric
from .emission import Emission
from .lambertian import Lambertian
from .metal import Metal
from .phong import Phong
from .scatter import Scatter
from .texture import CheckerTexture, ImageTexture, SolidTexture, Texture

Material = Union[Lambertian, Metal, Dielectric, Emission, Phong]

__all__ = [
    "Material",
    "Lambertian",
    "Metal",
    "Dielectric",
    "Emission",
    "Phong",
    "Scatter",
    "Texture",
    "SolidTexture",
    "CheckerTexture",
    "ImageTexture",
]
