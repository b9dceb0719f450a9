"""Rendering utilities for grid images and their targets."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Tuple

import numpy as np

from mesh_evolve.core.point import CANVAS_SIZE, COORD_MAX
from mesh_evolve.mesh.grid import GridImage
from mesh_evolve.mesh.rasters import ResolutionLike, as_resolution

if TYPE_CHECKING:
    import matplotlib.figure

    from mesh_evolve.evolution.member import TargetPixel


def render_image(
    image: GridImage,
    resolution: ResolutionLike,
    method: str = "scanline",
    offset: Tuple[int, int] = (0, 0),
    background: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Rasterize a grid image into an RGB array.

    Args:
        image: Mesh to draw.
        resolution: Output resolution, or a (shift_x, shift_y) pair.
        method: "scanline" (fast) or "box" (reference).
        offset: Sampling phase in canvas units.
        background: Colour of pixels no triangle covers.

    Returns:
        uint8 array of shape (rows, columns, 3).
    """
    resolution = as_resolution(resolution)
    count_x, count_y = resolution.pixel_count

    if method == "scanline":
        pixels = image.rasterize_scanline(resolution, offset)
    elif method == "box":
        pixels = image.rasterize_box(resolution, offset)
    else:
        raise ValueError(f"Unknown raster method: {method}")

    rgb = np.empty((count_y, count_x, 3), dtype=np.uint8)
    rgb[:] = background

    xs: List[int] = []
    ys: List[int] = []
    colours: List[Tuple[int, int, int]] = []
    for point, colour in pixels:
        if 0 <= point.x < count_x and 0 <= point.y < count_y:
            xs.append(point.x)
            ys.append(point.y)
            colours.append(colour)

    if colours:
        rgb[np.array(ys), np.array(xs)] = np.array(colours, dtype=np.uint8)
    return rgb


def render_target(
    target: "TargetPixel",
    resolution: ResolutionLike,
    offset: Tuple[int, int] = (0, 0),
) -> np.ndarray:
    """Sample a target-pixel oracle on the same grid fitness evaluation uses."""
    from mesh_evolve.evolution.target import TargetImage

    resolution = as_resolution(resolution)
    if isinstance(target, TargetImage):
        return target.sample_grid(resolution, offset)

    (size_x, size_y), (count_x, count_y) = resolution.pixel_size, resolution.pixel_count
    rgb = np.empty((count_y, count_x, 3), dtype=np.uint8)
    for row in range(count_y):
        y = min(row * size_y + offset[1], COORD_MAX)
        for column in range(count_x):
            rgb[row, column] = target(min(column * size_x + offset[0], COORD_MAX), y)
    return rgb


def render_comparison(
    image: GridImage,
    target: "TargetPixel",
    resolution: ResolutionLike,
) -> np.ndarray:
    """Side-by-side strip of |image - target|, the target, and the image."""
    rendered = render_image(image, resolution)
    sampled = render_target(target, resolution)
    difference = np.abs(rendered.astype(np.int16) - sampled.astype(np.int16)).astype(np.uint8)
    return np.concatenate([difference, sampled, rendered], axis=1)


def save_rgb_image(data: np.ndarray, path: str | Path) -> None:
    """Save an RGB array as an image without matplotlib.

    Args:
        data: uint8 array of shape (rows, columns, 3).
        path: Output file path; the format follows the suffix.
    """
    from PIL import Image

    if data.ndim != 3 or data.shape[2] != 3:
        raise ValueError(f"Expected an RGB array of shape (H, W, 3), got {data.shape}")

    Image.fromarray(data.astype(np.uint8)).save(path)


def render_to_figure(
    image: GridImage,
    figsize: Tuple[float, float] = (8, 8),
    show_wireframe: bool = False,
    title: str | None = None,
) -> "matplotlib.figure.Figure":
    """Draw the mesh triangles as filled matplotlib polygons.

    Args:
        image: Mesh to draw.
        figsize: Figure size in inches (width, height).
        show_wireframe: Outline every triangle.
        title: Optional title for the figure.

    Returns:
        Matplotlib Figure object.
    """
    import matplotlib.pyplot as plt
    from matplotlib.collections import PolyCollection

    polygons = []
    facecolors = []
    for first, second, third, colour in image.triangles():
        polygons.append([first, second, third])
        facecolors.append(tuple(channel / 255 for channel in colour))

    fig, ax = plt.subplots(figsize=figsize)
    collection = PolyCollection(
        polygons,
        facecolors=facecolors,
        edgecolors="black" if show_wireframe else "face",
        linewidths=0.5 if show_wireframe else 0.0,
        antialiased=False,
    )
    ax.add_collection(collection)

    # Canvas y grows downward
    ax.set_xlim(0, CANVAS_SIZE)
    ax.set_ylim(CANVAS_SIZE, 0)
    ax.set_aspect("equal")
    ax.axis("off")

    if title:
        ax.set_title(title)

    fig.tight_layout()
    return fig


def save_vector_image(
    image: GridImage,
    path: str | Path,
    dpi: int = 100,
    **kwargs,
) -> None:
    """Save the mesh as SVG, PDF or any other matplotlib format.

    Args:
        image: Mesh to draw.
        path: Output file path.
        dpi: Resolution in dots per inch for raster formats.
        **kwargs: Additional arguments passed to render_to_figure.
    """
    import matplotlib.pyplot as plt

    fig = render_to_figure(image, **kwargs)
    fig.savefig(path, dpi=dpi, bbox_inches="tight", pad_inches=0)
    plt.close(fig)


def plot_history(
    history: Dict[str, List[float]],
    path: str | Path,
    dpi: int = 100,
) -> None:
    """Plot the best, mean and worst fitness of every generation."""
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(10, 5))
    for key in ("best_fitness", "mean_fitness", "worst_fitness"):
        values = history.get(key)
        if values:
            ax.plot(range(1, len(values) + 1), values, label=key.replace("_", " "))

    ax.set_xlabel("Generation")
    ax.set_ylabel("Fitness")
    ax.legend()
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
