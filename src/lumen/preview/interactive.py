"""Interactive preview window using Taichi GGUI.

The render runs on a background thread while the window polls the
framebuffer with non-blocking snapshots; a frame whose snapshot would
have to wait for a writer simply shows the previous image. Once the
render is done the final image stays on screen until the window is
closed.

Example:
    >>> initialize_taichi()
    >>> preview = InteractivePreview(640, 360)
    >>> framebuffer = preview.run(renderer)
"""

from __future__ import annotations

import logging
import os
import platform
import threading
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from lumen.core.framebuffer import Framebuffer
from lumen.core.tonemap import unpack_rgb
from lumen.preview.export import save_png

if TYPE_CHECKING:
    import numpy.typing as npt

    from lumen.core.renderer import Renderer

logger = logging.getLogger(__name__)


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    if platform.system() == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            logger.debug("Metal backend unavailable", exc_info=True)

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        logger.debug("GPU backend unavailable", exc_info=True)

    ti.init(arch=ti.cpu)
    return "CPU"


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field storing the display image (RGB float).
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "lumen - Interactive Preview",
    ) -> None:
        """Create the display field; the window itself opens on first use.

        Taichi must already be initialized.
        """
        self.width = width
        self.height = height
        self._title = title
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._framebuffer: Framebuffer | None = None
        self._rows_done = 0

        # Taichi fields are indexed (x, y), i.e. (width, height)
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _open(self) -> ti.ui.Window:
        if self._window is None:
            self._window = ti.ui.Window(name=self._title, res=(self.width, self.height), vsync=True)
            self._canvas = self._window.get_canvas()
        return self._window

    @property
    def window(self) -> ti.ui.Window:
        """The GGUI window, opened on first access."""
        return self._open()

    @property
    def canvas(self) -> ti.ui.Canvas:
        self._open()
        assert self._canvas is not None
        return self._canvas


    @property
    def rows_done(self) -> int:
        return self._rows_done

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Update the display image from a numpy array.

        Args:
            image: NumPy array of shape (height, width, 3) with display
                values in [0, 1], row 0 at the top.

        Raises:
            ValueError: If image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(
                f"Image shape {image.shape} doesn't match expected {expected_shape}"
            )

        # NumPy images are (height, width, channels) with row 0 at the top;
        # the field is (x, y) with the origin at the bottom-left
        image_transposed = np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)), dtype=np.float32
        )
        self.display_image.from_numpy(image_transposed)

    def update_from_framebuffer(self, framebuffer: Framebuffer, *, blocking: bool = False) -> bool:
        """Copy the framebuffer into the display image.

        Returns:
            False if the framebuffer was busy and the display was left as is.
        """
        packed = framebuffer.snapshot(blocking=blocking)
        if packed is None:
            return False
        self.update_image(unpack_rgb(packed).astype(np.float32) / 255.0)
        return True

    def is_running(self) -> bool:
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def close(self) -> None:
        """Close the preview window.

        After calling this, the window cannot be reopened.
        """
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if platform.system() == "Darwin":
            # SSH sessions without X forwarding have no display
            return not (os.environ.get("SSH_CONNECTION") and not display)

        if display or wayland:
            return True

        return os.name == "nt"

    def _on_progress(self, done: int, total: int) -> None:
        self._rows_done = done

    def _draw_gui_panel(self, finished: bool) -> None:
        with self.window.GUI.sub_window("Render", 0.02, 0.02, 0.3, 0.14) as gui:
            if finished:
                gui.text(f"Done: {self.height} rows")
            else:
                gui.text(f"Rows: {self._rows_done}/{self.height}")
            if gui.button("Export PNG"):
                self._export_png()

    def _export_png(self) -> None:
        """Save the current framebuffer to a timestamped PNG file."""
        if self._framebuffer is None:
            logger.error("No framebuffer available for export")
            return
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        save_png(self._framebuffer, f"lumen_{timestamp}.png")

    def run(self, renderer: Renderer, framebuffer: Framebuffer | None = None) -> Framebuffer:
        """Render in the background and show progress until the window is closed.

        Args:
            renderer: The renderer to run; its size must match the window.
            framebuffer: Target buffer; a new one is created if omitted.

        Returns:
            The framebuffer, complete if the render finished before the
            window was closed.
        """
        if framebuffer is None:
            framebuffer = Framebuffer(renderer.width, renderer.height)
        self._framebuffer = framebuffer
        self._rows_done = 0
        self._open()

        thread: threading.Thread = renderer.start(framebuffer, self._on_progress)
        finished = False
        while self.is_running():
            if not finished:
                if thread.is_alive():
                    self.update_from_framebuffer(framebuffer)
                else:
                    self.update_from_framebuffer(framebuffer, blocking=True)
                    finished = True
                    logger.info("Render complete; close the window to exit")
            self._draw_gui_panel(finished)
            self.show_frame()

        if not finished:
            logger.warning("Preview closed before the render finished")
        return framebuffer
