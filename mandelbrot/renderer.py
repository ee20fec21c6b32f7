"""Rendering primitives for grayscale Mandelbrot bands."""

from __future__ import annotations

from typing import Optional

import numpy as np

HORIZON = 4.0
ITERATION_LIMIT = 255


def pixel_to_point(
    bounds: tuple[int, int],
    pixel: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Map ``pixel`` (column, row) of a ``bounds`` grid onto the complex plane.

    Each axis is interpolated from its nearer edge, so pixel ``(0, 0)`` lands
    exactly on ``upper_left`` and pixel ``(width, height)`` exactly on
    ``lower_right``. Coordinates outside the grid are extrapolated.
    """

    width, height = bounds
    col, row = pixel
    re_span = lower_right.real - upper_left.real
    im_span = upper_left.imag - lower_right.imag

    if 2 * col <= width:
        re = upper_left.real + col * re_span / width
    else:
        re = lower_right.real - (width - col) * re_span / width

    if 2 * row <= height:
        im = upper_left.imag - row * im_span / height
    else:
        im = lower_right.imag + (height - row) * im_span / height

    return complex(re, im)


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Return the iteration at which ``z = z*z + c`` leaves the radius-2 disk.

    ``None`` means the orbit stayed bounded for ``limit`` iterations.
    """

    cr = c.real
    ci = c.imag
    zr = 0.0
    zi = 0.0
    for i in range(limit):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > HORIZON:
            return i
    return None


def render_band(pixels: np.ndarray, bounds: tuple[int, int], upper_left: complex, lower_right: complex) -> None:
    """Fill a ``(height, width)`` band pixel by pixel."""

    width, height = bounds
    for row in range(height):
        for col in range(width):
            point = pixel_to_point(bounds, (col, row), upper_left, lower_right)
            count = escape_time(point, ITERATION_LIMIT)
            pixels[row, col] = 0 if count is None else ITERATION_LIMIT - count


def _axis(size: int, start: float, end: float, descending: bool) -> np.ndarray:
    # Vector form of one pixel_to_point axis; the operation order must match.
    steps = np.arange(size, dtype=np.float64)
    span = np.float64(start - end) if descending else np.float64(end - start)
    near = steps * span / size
    far = (size - steps) * span / size
    if descending:
        return np.where(2 * steps <= size, start - near, end + far)
    return np.where(2 * steps <= size, start + near, end - far)


def sample_grid(bounds: tuple[int, int], upper_left: complex, lower_right: complex) -> tuple[np.ndarray, np.ndarray]:
    """Return the real and imaginary parts of every pixel as ``(height, width)`` arrays."""

    width, height = bounds
    re = _axis(width, upper_left.real, lower_right.real, descending=False)
    im = _axis(height, upper_left.imag, lower_right.imag, descending=True)
    return np.broadcast_to(re, (height, width)), np.broadcast_to(im[:, None], (height, width))


def escape_counts(cr: np.ndarray, ci: np.ndarray, limit: int) -> np.ndarray:
    """Vectorized :func:`escape_time`; ``-1`` marks points that never escaped."""

    shape = np.shape(cr)
    cr = np.ravel(cr).astype(np.float64)
    ci = np.ravel(ci).astype(np.float64)
    counts = np.full(cr.size, -1, dtype=np.int32)
    index = np.arange(cr.size)
    zr = np.zeros_like(cr)
    zi = np.zeros_like(ci)

    for i in range(limit):
        if not index.size:
            break
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        with np.errstate(over="ignore", invalid="ignore"):
            escaped = zr * zr + zi * zi > HORIZON
        counts[index[escaped]] = i
        active = ~escaped
        index = index[active]
        zr, zi = zr[active], zi[active]
        cr, ci = cr[active], ci[active]

    return counts.reshape(shape)


def counts_to_pixels(counts: np.ndarray) -> np.ndarray:
    """Turn escape counts into brightness: fast escapes are bright, the set is black."""

    return np.where(counts < 0, 0, ITERATION_LIMIT - counts).astype(np.uint8)


def render_band_array(pixels: np.ndarray, bounds: tuple[int, int], upper_left: complex, lower_right: complex) -> None:
    """NumPy rendition of :func:`render_band`, byte-identical to it."""

    cr, ci = sample_grid(bounds, upper_left, lower_right)
    pixels[...] = counts_to_pixels(escape_counts(cr, ci, ITERATION_LIMIT))
