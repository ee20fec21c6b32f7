import numpy as np
import pytest

tf = pytest.importorskip("tensorflow")

from mandelbrot import render
from mandelbrot.renderer import escape_counts
from mandelbrot.scheduler import band_renderer
from mandelbrot import tf_kernel


def test_tensorflow_counts_match_numpy():
    cr = np.array([0.0, 4.0, -1.0, 1.0, -2.0, 0.0, -0.75, 0.25])
    ci = np.array([0.0, 4.0, 1.0, 0.0, 0.0, 2.0, 0.0, 0.0])
    np.testing.assert_array_equal(tf_kernel.escape_counts(cr, ci, 255), escape_counts(cr, ci, 255))


def test_tensorflow_backend_renders_square():
    pixels = render((4, 4), complex(-2, 2), complex(2, -2), 2, backend="tensorflow")
    assert pixels.tolist() == [
        [255, 255, 254, 255],
        [255, 253, 0, 254],
        [0, 0, 0, 253],
        [255, 253, 0, 254],
    ]


def test_tensorflow_backend_matches_numpy_on_dyadic_grid():
    bounds = (24, 16)
    upper_left, lower_right = complex(-2.0, 1.0), complex(1.0, -1.0)
    expected = render(bounds, upper_left, lower_right, 1)
    actual = render(bounds, upper_left, lower_right, 7, backend="tensorflow", device="/CPU:0")
    np.testing.assert_array_equal(actual, expected)


def test_band_renderer_binds_device():
    draw = band_renderer("tensorflow", device="/CPU:0")
    pixels = np.zeros((2, 3), dtype=np.uint8)
    draw(pixels, (3, 2), complex(-2, 2), complex(2, -2))
    assert pixels.dtype == np.uint8
    assert pixels[0].tolist() == [255, 255, 255]
