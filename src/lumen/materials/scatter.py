"""Result type shared by every material's ``scatter``."""

from __future__ import annotations

from dataclasses import dataclass

from lumen.core.pdf import PDF
from lumen.core.ray import Ray
from lumen.core.vec3 import Color


@dataclass(frozen=True)
class Scatter:
    """Outcome of scattering a ray off a surface.

    Exactly one of ``specular`` and ``pdf`` is set. A specular scatter
    carries the follow-up ray directly; a PDF scatter leaves the choice of
    direction to the integrator so it can be mixed with light sampling.

    Attributes:
        attenuation: Color multiplied into the path throughput.
        specular: Deterministic follow-up ray (mirror and glass).
        pdf: Distribution of outgoing directions (diffuse and glossy).
    """

    attenuation: Color
    specular: Ray | None = None
    pdf: PDF | None = None

    def __post_init__(self) -> None:
        if (self.specular is None) == (self.pdf is None):
            raise ValueError("Scatter needs exactly one of a specular ray or a PDF")

    @property
    def is_specular(self) -> bool:
        return self.specular is not None
