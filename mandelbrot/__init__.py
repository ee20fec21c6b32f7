"""Public API for banded grayscale Mandelbrot rendering."""

from .renderer import (
    ITERATION_LIMIT,
    escape_counts,
    escape_time,
    pixel_to_point,
    render_band,
    render_band_array,
)
from .scheduler import BACKENDS, Band, band_renderer, plan_bands, render, render_image
from .config import (
    RenderConfig,
    default_threads,
    parse_bounds,
    parse_complex,
    parse_pair,
    parse_threads,
)
from .output import write_image

__all__ = [
    "BACKENDS",
    "Band",
    "ITERATION_LIMIT",
    "RenderConfig",
    "band_renderer",
    "default_threads",
    "escape_counts",
    "escape_time",
    "parse_bounds",
    "parse_complex",
    "parse_pair",
    "parse_threads",
    "pixel_to_point",
    "plan_bands",
    "render",
    "render_band",
    "render_band_array",
    "render_image",
    "write_image",
]
