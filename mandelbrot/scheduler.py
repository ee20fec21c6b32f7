"""Split an image into row bands and render them concurrently."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

import numpy as np

from .renderer import pixel_to_point, render_band, render_band_array

BandFunction = Callable[[np.ndarray, tuple[int, int], complex, complex], None]

BACKENDS = ("python", "numpy", "tensorflow")


@dataclass(frozen=True)
class Band:
    """A horizontal strip of the image and the part of the plane it covers."""

    index: int
    top: int
    height: int
    upper_left: complex
    lower_right: complex

    @property
    def rows(self) -> slice:
        return slice(self.top, self.top + self.height)


def plan_bands(bounds: tuple[int, int], upper_left: complex, lower_right: complex, workers: int) -> list[Band]:
    """Partition the rows of ``bounds`` into at most ``workers`` consecutive bands.

    Every band has ``height // workers + 1`` rows except possibly the last one.
    Band corners are mapped against the full image so that neighbouring bands
    share their boundary line.
    """

    width, height = bounds
    rows_per_band = height // max(1, workers) + 1
    bands = []
    for index, top in enumerate(range(0, height, rows_per_band)):
        band_height = min(rows_per_band, height - top)
        bands.append(
            Band(
                index=index,
                top=top,
                height=band_height,
                upper_left=pixel_to_point(bounds, (0, top), upper_left, lower_right),
                lower_right=pixel_to_point(bounds, (width, top + band_height), upper_left, lower_right),
            )
        )
    return bands


def band_renderer(backend: str, device: Optional[str] = None) -> BandFunction:
    """Resolve a backend name to a band rendering function."""

    if backend == "python":
        return render_band
    if backend == "numpy":
        return render_band_array
    if backend == "tensorflow":
        from . import tf_kernel

        return partial(tf_kernel.render_band, device=device)
    raise ValueError(f"Unknown backend '{backend}'. Valid choices: {', '.join(BACKENDS)}.")


def _check_bounds(bounds: tuple[int, int]) -> None:
    width, height = bounds
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}.")


def render_image(
    pixels: np.ndarray,
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    workers: int,
    *,
    backend: str = "numpy",
    device: Optional[str] = None,
) -> list[Band]:
    """Render the full image into ``pixels``, one thread per band.

    ``pixels`` must be a C-contiguous ``uint8`` array with ``width * height``
    elements; it is filled in place. Each band task writes only through its
    own row view. An exception raised by any band is re-raised here once all
    tasks have finished. Returns the bands that were rendered.
    """

    _check_bounds(bounds)
    width, height = bounds
    if pixels.dtype != np.uint8 or pixels.size != width * height:
        raise ValueError(f"Pixel buffer must hold {width * height} uint8 values, got {pixels.size} {pixels.dtype}.")
    if not pixels.flags.c_contiguous:
        raise ValueError("Pixel buffer must be C-contiguous.")

    draw = band_renderer(backend, device)
    grid = pixels.reshape(height, width)
    bands = plan_bands(bounds, upper_left, lower_right, workers)

    with ThreadPoolExecutor(max_workers=len(bands)) as pool:
        futures = [
            pool.submit(draw, grid[band.rows], (width, band.height), band.upper_left, band.lower_right)
            for band in bands
        ]
    for future in futures:
        future.result()
    return bands


def render(
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    workers: int = 1,
    *,
    backend: str = "numpy",
    device: Optional[str] = None,
) -> np.ndarray:
    """Allocate a ``(height, width)`` buffer and render into it."""

    _check_bounds(bounds)
    width, height = bounds
    pixels = np.zeros((height, width), dtype=np.uint8)
    render_image(pixels, bounds, upper_left, lower_right, workers, backend=backend, device=device)
    return pixels
