"""Matplotlib-based preview display for rendered images.

Matplotlib is imported lazily so that headless renders never load it.

Example:
    >>> framebuffer = renderer.render()
    >>> show_preview(framebuffer, title="Cornell box - 100 SPP")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from lumen.preview.export import compute_rmse

if TYPE_CHECKING:
    from lumen.core.framebuffer import Framebuffer


def show_preview(
    framebuffer: Framebuffer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the framebuffer as a Matplotlib figure.

    Args:
        framebuffer: The framebuffer to display.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(framebuffer.to_rgb())
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {framebuffer.width}x{framebuffer.height}"
    ax.set_title(title)

    fig.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Show two renders next to each other and their amplified difference.

    Typical use is a low and a high sample count render of the same scene,
    or the same seed rendered with different thread counts.

    Returns:
        RMSE between the two images in [0, 1] display units.
    """
    import matplotlib.pyplot as plt

    a = image_a.astype(np.float64) / 255.0
    b = image_b.astype(np.float64) / 255.0
    rmse = compute_rmse(a, b)
    difference = np.clip(np.abs(a - b) * diff_scale, 0.0, 1.0)

    panels = (
        (a, labels[0]),
        (b, labels[1]),
        (difference, f"|{labels[0]} - {labels[1]}| x{diff_scale:g}, RMSE {rmse:.6f}"),
    )
    fig, axes = plt.subplots(1, len(panels), figsize=figsize)
    for ax, (image, caption) in zip(axes, panels):
        ax.imshow(image)
        ax.set_title(caption)
        ax.axis("off")

    fig.tight_layout()
    plt.show(block=block)
    return rmse
