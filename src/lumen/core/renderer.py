"""Parallel render driver.

The image rows are split into contiguous, disjoint ranges, one per worker
thread. A worker renders each of its rows into a private buffer of
per-pixel radiance sums, tone-maps the row into packed pixels and queues
it. After every row the worker tries to take the framebuffer's write lock
without blocking and, if it gets it, flushes its whole queue; once its
range is done it waits for the lock and flushes whatever is left. The
scene is read-only and shared by all workers.

Every row draws its random numbers from its own generator, seeded from a
single ``numpy.random.SeedSequence`` with the row index as spawn key. A
render with a fixed seed therefore produces the same image whatever the
number of threads.

Example:
    >>> renderer = Renderer(scene, camera, RenderSettings(width=320, height=180))
    >>> framebuffer = renderer.render()
    >>> save_png(framebuffer, "out.png")
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from lumen.config import RenderSettings
from lumen.core.framebuffer import Framebuffer, Row
from lumen.core.integrator import PathTracer, Tracer
from lumen.core.tonemap import encode_pixels

if TYPE_CHECKING:
    from lumen.camera.thin_lens import ThinLensCamera
    from lumen.scene.scene import Scene

logger = logging.getLogger(__name__)

# Callback receives (rows_completed, total_rows)
ProgressCallback = Callable[[int, int], None]


def partition_rows(height: int, threads: int) -> list[range]:
    """Split ``height`` rows into at most ``threads`` contiguous ranges.

    Each range holds ``height // threads + 1`` rows except the last, which
    takes the remainder. Empty ranges are dropped.
    """
    if threads < 1:
        raise ValueError(f"threads = {threads} must be at least 1")
    rows_per = height // threads + 1
    ranges = [range(i * rows_per, min(height, (i + 1) * rows_per)) for i in range(threads)]
    return [r for r in ranges if len(r) > 0]


class Renderer:
    """Renders a scene through a camera into a framebuffer.

    Attributes:
        scene: The scene to render.
        camera: The camera generating primary rays.
        settings: Image size, sample count, threads and tone mapping.
        tracer: The radiance estimator, a PathTracer unless given.
    """

    def __init__(
        self,
        scene: Scene,
        camera: ThinLensCamera,
        settings: RenderSettings,
        *,
        tracer: Tracer | None = None,
    ) -> None:
        self.scene = scene
        self.camera = camera
        self.settings = settings
        self.tracer = tracer or PathTracer(
            scene,
            max_depth=settings.max_depth,
            light_bias=settings.light_bias,
            russian_roulette=settings.russian_roulette,
        )
        self._seed = np.random.SeedSequence(settings.seed)
        self._progress_lock = threading.Lock()
        self._rows_done = 0

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    @property
    def entropy(self) -> int:
        """Root entropy of the random streams; pass as ``seed`` to reproduce a render."""
        return int(self._seed.entropy)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.settings.samples}, threads={self.settings.threads})"
        )

    def row_rng(self, row: int) -> np.random.Generator:
        """Independent generator for one image row."""
        return np.random.default_rng(
            np.random.SeedSequence(self._seed.entropy, spawn_key=(row,))
        )

    def render_row(self, row: int, rng: np.random.Generator) -> npt.NDArray[np.float64]:
        """Sum ``samples`` radiance estimates for every pixel of a row.

        Args:
            row: Row index, 0 at the top of the image.
            rng: Generator for this row.

        Returns:
            Array of shape (width, 3) with the per-pixel sums.
        """
        width, height = self.width, self.height
        samples = self.settings.samples
        camera = self.camera
        tracer = self.tracer
        sums = np.zeros((width, 3), dtype=np.float64)
        y = height - 1 - row

        for col in range(width):
            r = g = b = 0.0
            for _ in range(samples):
                u = (col + rng.random()) / width
                v = (y + rng.random()) / height
                color = tracer.sample(camera.get_ray(u, v, rng), rng)
                # NaN != NaN, such channels are dropped from the sum
                if color.x == color.x:
                    r += color.x
                if color.y == color.y:
                    g += color.y
                if color.z == color.z:
                    b += color.z
            sums[col] = (r, g, b)
        return sums

    def _encode(self, sums: npt.NDArray[np.float64]) -> npt.NDArray[np.uint32]:
        s = self.settings
        return encode_pixels(sums, s.samples, s.tone_map, gamma=s.gamma, exposure=s.exposure)

    def _report(self, callback: ProgressCallback | None) -> None:
        with self._progress_lock:
            self._rows_done += 1
            done = self._rows_done
        if callback is not None:
            callback(done, self.height)

    def render_rows(
        self,
        rows: range,
        framebuffer: Framebuffer,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Worker body: render ``rows`` and publish them into ``framebuffer``."""
        backlog: list[Row] = []
        for row in rows:
            sums = self.render_row(row, self.row_rng(row))
            backlog.append((row, self._encode(sums)))
            if framebuffer.write_rows(backlog, blocking=False):
                backlog = []
            self._report(callback)
        if backlog:
            framebuffer.write_rows(backlog)
        logger.debug("Rows %d-%d done", rows.start, rows.stop - 1)

    def render(
        self,
        framebuffer: Framebuffer | None = None,
        callback: ProgressCallback | None = None,
    ) -> Framebuffer:
        """Render the whole image on the worker pool.

        Args:
            framebuffer: Target buffer; a new one is created if omitted.
            callback: Called after every finished row with
                (rows_completed, total_rows), from worker threads.

        Returns:
            The framebuffer holding the finished image.

        Raises:
            ValueError: If the framebuffer size doesn't match the settings.
        """
        if framebuffer is None:
            framebuffer = Framebuffer(self.width, self.height)
        elif (framebuffer.width, framebuffer.height) != (self.width, self.height):
            raise ValueError(
                f"Framebuffer {framebuffer.width}x{framebuffer.height} doesn't match "
                f"render size {self.width}x{self.height}"
            )

        ranges = partition_rows(self.height, self.settings.threads)
        self._rows_done = 0
        logger.info(
            "Rendering %dx%d at %d spp on %d threads (entropy %d)",
            self.width,
            self.height,
            self.settings.samples,
            len(ranges),
            self.entropy,
        )
        started = time.perf_counter()
        with ThreadPoolExecutor(max_workers=len(ranges), thread_name_prefix="lumen") as pool:
            futures = [pool.submit(self.render_rows, rows, framebuffer, callback) for rows in ranges]
            for future in futures:
                future.result()
        logger.info("Render finished in %.2fs", time.perf_counter() - started)
        return framebuffer

    def start(
        self,
        framebuffer: Framebuffer,
        callback: ProgressCallback | None = None,
    ) -> threading.Thread:
        """Run ``render`` on a background thread and return that thread."""
        thread = threading.Thread(
            target=self.render, args=(framebuffer, callback), name="lumen-render", daemon=True
        )
        thread.start()
        return thread
