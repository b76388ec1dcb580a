"""lumen command line entry point.

Usage:
    lumen SCENE.yaml [options]
    lumen --preset {cornell,random,ground} [options]

Options:
    --output OUTPUT       Output PNG path (default: out.png)
    --width WIDTH         Image width in pixels
    --height HEIGHT       Image height in pixels
    --samples SAMPLES     Samples per pixel
    --threads THREADS     Worker threads
    --seed SEED           Seed for a reproducible render
    --tone-map METHOD     none, reinhard or exposure
    --gamma GAMMA         Gamma correction value
    --exposure EXPOSURE   Exposure for exposure tone mapping
    --preview             Follow the render in a Taichi window
    --show                Show the finished image with Matplotlib
    --log-level LEVEL     Logging verbosity (default: INFO)

Render settings come from the defaults, then the scene file's ``render``
section, then the command line.

Example:
    lumen --preset cornell --width 300 --height 300 --samples 100 --output cornell.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from lumen.camera.thin_lens import ThinLensCamera
from lumen.config import RenderSettings
from lumen.core.framebuffer import Framebuffer
from lumen.core.renderer import Renderer
from lumen.core.tonemap import TONE_MAP_METHODS
from lumen.preview.export import save_png
from lumen.scene.loader import SceneError, load_scene
from lumen.scene.presets import PRESETS
from lumen.scene.scene import Scene

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the command line."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="lumen",
        description="Render a scene with the lumen path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  lumen scenes/cornell.yaml --samples 200\n"
            "  lumen --preset random --width 400 --height 225 --threads 8\n"
            "  lumen --preset ground --seed 7 --preview\n"
        ),
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "scene",
        nargs="?",
        type=Path,
        help="Path to a YAML scene file",
    )
    source.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Render a built-in scene instead of a file",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("out.png"),
        help="Output file path (default: out.png)",
    )
    parser.add_argument("--width", type=int, help="Image width in pixels (default: 640)")
    parser.add_argument("--height", type=int, help="Image height in pixels (default: 360)")
    parser.add_argument("--samples", type=int, help="Samples per pixel (default: 50)")
    parser.add_argument("--threads", type=int, help="Worker threads (default: 4)")
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed of the random streams; the image is then identical for any thread count",
    )
    parser.add_argument(
        "--tone-map",
        choices=TONE_MAP_METHODS,
        help="Tone mapping method (default: none)",
    )
    parser.add_argument("--gamma", type=float, help="Gamma correction value (default: 2.0)")
    parser.add_argument(
        "--exposure",
        type=float,
        help="Exposure value for exposure tone mapping (default: 1.0)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the render in progress in an interactive window",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the finished image in a Matplotlib window",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    return {
        "width": args.width,
        "height": args.height,
        "samples": args.samples,
        "threads": args.threads,
        "seed": args.seed,
        "tone_map": args.tone_map,
        "gamma": args.gamma,
        "exposure": args.exposure,
    }


def build(args: argparse.Namespace) -> tuple[Scene, ThinLensCamera, RenderSettings]:
    """Resolve the scene, camera and final render settings.

    Raises:
        SceneError: If the scene file is malformed.
        FileNotFoundError: If the scene file does not exist.
        ValueError: If a render setting is invalid.
    """
    if args.preset is not None:
        settings = RenderSettings().with_overrides(**_overrides(args))
        scene, camera = PRESETS[args.preset](settings.aspect_ratio)
        logger.info("Using preset scene '%s'", args.preset)
        return scene, camera, settings

    scene, camera, render = load_scene(args.scene)
    try:
        settings = RenderSettings.from_mapping(render).with_overrides(**_overrides(args))
    except ValueError as exc:
        raise SceneError(f"render: {exc}") from exc
    return scene, camera.with_aspect_ratio(settings.aspect_ratio), settings


def _log_progress(done: int, total: int) -> None:
    step = max(1, total // 10)
    if done % step == 0 or done == total:
        logger.info("Progress: %d/%d rows (%.0f%%)", done, total, 100.0 * done / total)


def render_interactive(renderer: Renderer) -> Framebuffer:
    """Render while following progress in a Taichi window."""
    from lumen.preview.interactive import InteractivePreview, initialize_taichi

    backend = initialize_taichi()
    logger.info("Taichi backend: %s", backend)
    preview = InteractivePreview(renderer.width, renderer.height)
    return preview.run(renderer)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        scene, camera, settings = build(args)
    except (OSError, ValueError) as exc:
        logger.error("Cannot load scene: %s", exc)
        return 1

    renderer = Renderer(scene, camera, settings)
    logger.debug("%r with %r", renderer, settings)

    if args.preview:
        try:
            from lumen.preview.interactive import InteractivePreview
        except ImportError:
            logger.error("--preview needs Taichi: pip install 'lumen[preview]'")
            return 1
        if not InteractivePreview.is_display_available():
            logger.error("No display available. Cannot run interactive preview.")
            return 1
        framebuffer = render_interactive(renderer)
    else:
        framebuffer = renderer.render(callback=_log_progress)

    try:
        save_png(framebuffer, args.output)
    except (OSError, ValueError) as exc:
        logger.error("Cannot write %s: %s", args.output, exc)
        return 1

    if args.show:
        from lumen.preview.display import show_preview

        show_preview(framebuffer, title=str(args.output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
