"""TensorFlow band kernel for the grayscale Mandelbrot renderer."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .renderer import HORIZON, ITERATION_LIMIT, counts_to_pixels, sample_grid

_POINTS = tf.TensorSpec(shape=[None], dtype=tf.float64)


@tf.function
def _escape_step(
    i: tf.Tensor,
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has not escaped yet by one iteration."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = 2.0 * zr * zi + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    horizon = tf.constant(HORIZON, dtype=zr.dtype)
    escaped = tf.logical_and(active, zr * zr + zi * zi > horizon)
    counts = tf.where(escaped, tf.fill(tf.shape(counts), i), counts)
    return zr, zi, counts, tf.logical_and(active, tf.logical_not(escaped))


@tf.function(input_signature=[_POINTS, _POINTS, tf.TensorSpec(shape=[], dtype=tf.int32)])
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, limit: tf.Tensor) -> tf.Tensor:
    """Iterate until every point escaped or ``limit`` is reached; ``-1`` marks the set."""

    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    counts = tf.fill(tf.shape(cr), tf.constant(-1, dtype=tf.int32))
    active = tf.ones_like(cr, tf.bool)

    def cond(i, zr, zi, counts, active):
        return tf.logical_and(tf.less(i, limit), tf.reduce_any(active))

    def body(i, zr, zi, counts, active):
        zr, zi, counts, active = _escape_step(i, zr, zi, cr, ci, counts, active)
        return i + 1, zr, zi, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, zr, zi, counts, active))
    return counts


def escape_counts(cr: np.ndarray, ci: np.ndarray, limit: int, *, device: Optional[str] = None) -> np.ndarray:
    """TensorFlow counterpart of :func:`mandelbrot.renderer.escape_counts`."""

    shape = np.shape(cr)
    with tf.device(device if device is not None else "/CPU:0"):
        counts = _escape_run(
            tf.convert_to_tensor(np.ravel(cr), dtype=tf.float64),
            tf.convert_to_tensor(np.ravel(ci), dtype=tf.float64),
            tf.constant(limit, dtype=tf.int32),
        )
    return counts.numpy().reshape(shape)


def render_band(
    pixels: np.ndarray,
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    *,
    device: Optional[str] = None,
) -> None:
    """Fill a ``(height, width)`` band on ``device`` (CPU unless given)."""

    cr, ci = sample_grid(bounds, upper_left, lower_right)
    pixels[...] = counts_to_pixels(escape_counts(cr, ci, ITERATION_LIMIT, device=device))
