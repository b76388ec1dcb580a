"""Render settings.

``RenderSettings`` gathers every knob of a render: image size, sample
count, worker threads, seeding, integrator limits and tone mapping. The
defaults match the command line defaults. Settings can come from the
``render`` section of a scene file and be overridden from the CLI.

Example:
    >>> settings = RenderSettings(width=320, height=180, samples=16)
    >>> settings.aspect_ratio
    1.7777777777777777
    >>> settings = settings.with_overrides(threads=8, seed=None)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from lumen.core.integrator import LIGHT_BIAS, MAX_DEPTH
from lumen.core.tonemap import DEFAULT_GAMMA, TONE_MAP_METHODS, ToneMapMethod


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per pixel.
        threads: Number of worker threads.
        seed: Seed of the random streams; None draws fresh OS entropy.
        max_depth: Maximum bounces per path.
        light_bias: Weight of the material PDF against light sampling.
        russian_roulette: Terminate dim paths stochastically.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value.
        exposure: Exposure value for exposure tone mapping.
    """

    width: int = 640
    height: int = 360
    samples: int = 50
    threads: int = 4
    seed: int | None = None
    max_depth: int = MAX_DEPTH
    light_bias: float = LIGHT_BIAS
    russian_roulette: bool = False
    tone_map: ToneMapMethod = "none"
    gamma: float = DEFAULT_GAMMA
    exposure: float = 1.0

    def __post_init__(self) -> None:
        for name in ("width", "height", "samples", "threads", "max_depth"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} = {value!r} must be a positive integer")
        if self.seed is not None and (not isinstance(self.seed, int) or self.seed < 0):
            raise ValueError(f"seed = {self.seed!r} must be a non-negative integer")
        if not 0.0 <= self.light_bias <= 1.0:
            raise ValueError(f"light_bias = {self.light_bias} is outside [0, 1]")
        if self.tone_map not in TONE_MAP_METHODS:
            raise ValueError(
                f"Unknown tone mapping method: {self.tone_map}. "
                f"Expected one of {', '.join(TONE_MAP_METHODS)}"
            )
        if self.gamma <= 0.0:
            raise ValueError(f"gamma = {self.gamma} must be positive")
        if self.exposure <= 0.0:
            raise ValueError(f"exposure = {self.exposure} must be positive")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> RenderSettings:
        """Build settings from a mapping such as a scene file's ``render`` section.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown render settings: {', '.join(unknown)}")
        return cls(**dict(values))

    def with_overrides(self, **overrides: Any) -> RenderSettings:
        """Copy with the given fields replaced.

        ``None`` values are skipped so that unset command line flags keep
        the values from the scene file.
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
