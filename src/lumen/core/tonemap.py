"""Tone mapping and packed-pixel encoding.

Rows of accumulated per-pixel radiance sums go through this pipeline
before they are published to the framebuffer:
    1. Average over the sample count
    2. Zero NaN channels
    3. Tone mapping (optional, for HDR content)
    4. Gamma correction
    5. Clamp to [0, 0.999] and quantize to 8 bits
    6. Pack as 0xRRGGBB

Example:
    >>> sums = np.array([[50.0, 25.0, 0.0]])
    >>> hex(int(encode_pixels(sums, samples=50)[0]))
    '0xffb500'
"""

from __future__ import annotations

from typing import Literal, get_args

import numpy as np
import numpy.typing as npt

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]

TONE_MAP_METHODS: tuple[str, ...] = get_args(ToneMapMethod)

DEFAULT_GAMMA = 2.0

# Largest channel value before quantization, keeps 1.0 inside 8 bits
MAX_CHANNEL = 0.999


def tone_map_reinhard(image: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Simple global tone mapping operator that compresses HDR values
    into the displayable [0, 1] range.
    """
    image = np.maximum(image, 0.0)
    return image / (1.0 + image)


def tone_map_exposure(
    image: npt.NDArray[np.float64],
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Apply exposure-based tone mapping: 1 - exp(-c * exposure).

    Args:
        image: Linear HDR values.
        exposure: Exposure value (default 1.0). Higher values brighten the image.
    """
    image = np.maximum(image, 0.0)
    return 1.0 - np.exp(-image * exposure)


def apply_gamma(
    image: npt.NDArray[np.float64],
    gamma: float = DEFAULT_GAMMA,
) -> npt.NDArray[np.float64]:
    """Encode linear values in [0, 1] with ``out = in^(1/gamma)``.

    Values are clamped to [0, 1] first to avoid NaN from negative values.
    """
    image = np.clip(image, 0.0, 1.0)
    if gamma == 1.0:
        return image
    return np.power(image, 1.0 / gamma)


def tone_map(
    image: npt.NDArray[np.float64],
    method: ToneMapMethod = "none",
    *,
    gamma: float = DEFAULT_GAMMA,
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Map linear radiance to display values in [0, MAX_CHANNEL].

    NaN channels become zero.

    Raises:
        ValueError: If ``method`` is not a known tone mapping method.
    """
    result = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0)
    if method == "reinhard":
        result = tone_map_reinhard(result)
    elif method == "exposure":
        result = tone_map_exposure(result, exposure)
    elif method != "none":
        raise ValueError(f"Unknown tone mapping method: {method}")
    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, MAX_CHANNEL)


def pack_rgb(rgb: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint32]:
    """Pack an (..., 3) uint8 array into 0xRRGGBB integers."""
    rgb = rgb.astype(np.uint32)
    return (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]


def unpack_rgb(packed: npt.NDArray[np.uint32]) -> npt.NDArray[np.uint8]:
    """Unpack 0xRRGGBB integers into an (..., 3) uint8 array."""
    packed = np.asarray(packed, dtype=np.uint32)
    channels = [(packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF]
    return np.stack(channels, axis=-1).astype(np.uint8)


def encode_pixels(
    sums: npt.NDArray[np.float64],
    samples: int,
    method: ToneMapMethod = "none",
    *,
    gamma: float = DEFAULT_GAMMA,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint32]:
    """Turn per-pixel radiance sums of shape (N, 3) into packed pixels.

    Args:
        sums: Sum of ``samples`` radiance estimates per pixel.
        samples: Number of samples in each sum.
        method: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.0).
        exposure: Exposure value for exposure tone mapping.

    Returns:
        Packed pixels of shape (N,) and dtype uint32.
    """
    if samples <= 0:
        raise ValueError(f"samples = {samples} must be positive")
    average = np.asarray(sums, dtype=np.float64) / samples
    mapped = tone_map(average, method, gamma=gamma, exposure=exposure)
    quantized = (mapped * 256.0).astype(np.uint8)
    return pack_rgb(quantized)
