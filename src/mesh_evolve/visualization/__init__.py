"""Raster and vector output for grid images."""

from mesh_evolve.visualization.renderer import (
    plot_history,
    render_comparison,
    render_image,
    render_target,
    render_to_figure,
    save_rgb_image,
    save_vector_image,
)

__all__ = [
    "plot_history",
    "render_comparison",
    "render_image",
    "render_target",
    "render_to_figure",
    "save_rgb_image",
    "save_vector_image",
]
