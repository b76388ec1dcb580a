"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vec3: Vec3 vector/color type
    ray: Ray, reflection/refraction helpers, ONB and direction samplers
    pdf: Direction densities (cosine, Phong, toward a primitive, mixture)
    integrator: Monte Carlo path tracer with light sampling
    tonemap: HDR to packed 8-bit RGB conversion
    framebuffer: Packed RGB framebuffer behind a readers-writer lock
    renderer: Multi-threaded render driver

All randomness flows through an explicit ``numpy.random.Generator``.
"""

from .pdf import PDF, CosinePDF, HittablePDF, MixPDF, PhongPDF
from .ray import (
    ONB,
    T_MIN,
    Ray,
    random_cosine_direction,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_to_sphere,
    random_unit_vector,
    reflect,
    refract,
    schlick_fresnel,
)
from .vec3 import BLACK, WHITE, Color, Vec3

# Note: integrator, framebuffer and renderer are NOT imported here to avoid
# circular imports with lumen.config and lumen.scene. Import them directly:
#   from lumen.core.renderer import Renderer

__all__ = [
    "Vec3",
    "Color",
    "BLACK",
    "WHITE",
    "Ray",
    "T_MIN",
    "ONB",
    "reflect",
    "refract",
    "schlick_fresnel",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
    "random_cosine_direction",
    "random_to_sphere",
    "PDF",
    "CosinePDF",
    "PhongPDF",
    "HittablePDF",
    "MixPDF",
]
