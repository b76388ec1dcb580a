"""Preview module for output and visualization.

Components:
    export: PNG export and image comparison utilities (Pillow)
    display: Matplotlib-based static preview
    interactive: Taichi GGUI window that follows a render in progress

Only the export utilities are imported here. Matplotlib and Taichi are
optional dependencies (the ``preview`` extra), so import the other two
modules directly when needed:

    >>> from lumen.preview.display import show_preview
    >>> from lumen.preview.interactive import InteractivePreview, initialize_taichi
"""

from .export import compute_rmse, image_to_uint8, save_png, save_png_from_array

__all__ = [
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
