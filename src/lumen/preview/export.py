"""Image export utilities for rendered images.

Framebuffer pixels are already tone mapped and gamma corrected, so export
only unpacks them into an 8-bit RGB array and hands it to Pillow.

Supported formats:
    - PNG (8-bit sRGB via Pillow), or any other format Pillow infers
      from the file extension

Example:
    >>> framebuffer = renderer.render()
    >>> save_png(framebuffer, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from lumen.core.framebuffer import Framebuffer

logger = logging.getLogger(__name__)


def image_to_uint8(image: npt.NDArray[np.floating[npt.NBitBase]]) -> npt.NDArray[np.uint8]:
    """Convert a display-ready float image in [0, 1] to uint8.

    NaN values become 0; values outside [0, 1] are clamped.
    """
    image = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0)
    return (np.clip(image, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def save_png(framebuffer: Framebuffer, filepath: str | Path) -> Path:
    """Save the framebuffer contents as a PNG file.

    Takes a blocking snapshot, so rows still being rendered appear black.

    Args:
        framebuffer: The framebuffer to save.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.
    """
    path = Path(filepath)
    PILImage.fromarray(framebuffer.to_rgb()).save(path)
    logger.info("Saved %dx%d image to %s", framebuffer.width, framebuffer.height, path)
    return path


def save_png_from_array(
    image: npt.NDArray[np.generic],
    filepath: str | Path,
) -> Path:
    """Save an (H, W, 3) array as a PNG file.

    Args:
        image: uint8 array, or float array with display values in [0, 1].
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the image is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image shape {image.shape} is not (height, width, 3)")
    if image.dtype != np.uint8:
        image = image_to_uint8(image)
    path = Path(filepath)
    PILImage.fromarray(image).save(path)
    return path


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
