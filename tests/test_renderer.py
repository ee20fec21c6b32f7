import numpy as np
import pytest

from mandelbrot.renderer import (
    ITERATION_LIMIT,
    escape_counts,
    escape_time,
    pixel_to_point,
    render_band,
    render_band_array,
    sample_grid,
)

# Hand-computed: 4x4 grid over [-2, 2] x [-2, 2], 255 - escape iteration, 0 for bounded orbits.
SQUARE_BOUNDS = (4, 4)
SQUARE_UPPER_LEFT = complex(-2.0, 2.0)
SQUARE_LOWER_RIGHT = complex(2.0, -2.0)
SQUARE_PIXELS = np.array(
    [
        [255, 255, 254, 255],
        [255, 253, 0, 254],
        [0, 0, 0, 253],
        [255, 253, 0, 254],
    ],
    dtype=np.uint8,
)

CORNERS = [
    ((1000, 750), complex(-1.2, 0.35), complex(-1.0, 0.20)),
    ((5, 5), complex(-2.0, 1.0), complex(1.0, -1.0)),
    ((7, 3), complex(0.1, 0.7), complex(0.3, 0.1)),
    ((1, 1), complex(-0.7436, 0.1318), complex(-0.7435, 0.1317)),
    ((640, 480), complex(-2.5, 1.25), complex(1.0, -1.25)),
]


@pytest.mark.parametrize("bounds, upper_left, lower_right", CORNERS)
def test_pixel_to_point_hits_corners_exactly(bounds, upper_left, lower_right):
    assert pixel_to_point(bounds, (0, 0), upper_left, lower_right) == upper_left
    assert pixel_to_point(bounds, bounds, upper_left, lower_right) == lower_right


def test_pixel_to_point_interpolates_and_extrapolates():
    assert pixel_to_point(SQUARE_BOUNDS, (2, 2), SQUARE_UPPER_LEFT, SQUARE_LOWER_RIGHT) == 0j
    assert pixel_to_point(SQUARE_BOUNDS, (1, 3), SQUARE_UPPER_LEFT, SQUARE_LOWER_RIGHT) == complex(-1.0, -1.0)
    assert pixel_to_point(SQUARE_BOUNDS, (8, 8), SQUARE_UPPER_LEFT, SQUARE_LOWER_RIGHT) == complex(6.0, -6.0)
    assert pixel_to_point(SQUARE_BOUNDS, (-4, -4), SQUARE_UPPER_LEFT, SQUARE_LOWER_RIGHT) == complex(-6.0, 6.0)


def test_pixel_to_point_rows_descend():
    bounds = (10, 10)
    points = [pixel_to_point(bounds, (3, row), complex(-1.2, 0.35), complex(-1.0, 0.20)) for row in range(11)]
    imags = [p.imag for p in points]
    assert imags == sorted(imags, reverse=True)
    assert len({p.real for p in points}) == 1


@pytest.mark.parametrize("limit", [1, 10, ITERATION_LIMIT, 1000])
def test_origin_never_escapes(limit):
    assert escape_time(0j, limit) is None


@pytest.mark.parametrize("c", [complex(4.0, 4.0), complex(-3.0, 0.0), complex(0.0, 2.5), complex(1.5, 1.5)])
def test_far_points_escape_immediately(c):
    assert escape_time(c, ITERATION_LIMIT) == 0


@pytest.mark.parametrize(
    "c, expected",
    [
        (complex(0.0, 2.0), 1),
        (complex(-1.0, 1.0), 2),
        (complex(1.0, 0.0), 2),
        (complex(1.0, 1.0), 1),
        (complex(-2.0, 0.0), None),
        (complex(-1.0, 0.0), None),
        (complex(0.0, 1.0), None),
        (complex(0.0, -1.0), None),
    ],
)
def test_escape_time_small_orbits(c, expected):
    assert escape_time(c, ITERATION_LIMIT) == expected


def test_escape_time_respects_limit():
    assert escape_time(complex(1.0, 0.0), 2) is None
    assert escape_time(complex(1.0, 0.0), 3) == 2
    assert escape_time(complex(4.0, 4.0), 0) is None


def test_escape_time_is_deterministic():
    c = complex(-0.7453, 0.1127)
    first = escape_time(c, 5000)
    assert all(escape_time(c, 5000) == first for _ in range(5))


@pytest.mark.parametrize("draw", [render_band, render_band_array])
def test_band_renderers_match_hand_computed_square(draw):
    pixels = np.full((4, 4), 7, dtype=np.uint8)
    draw(pixels, SQUARE_BOUNDS, SQUARE_UPPER_LEFT, SQUARE_LOWER_RIGHT)
    np.testing.assert_array_equal(pixels, SQUARE_PIXELS)


def test_band_renderers_agree_on_general_viewport():
    bounds = (23, 17)
    upper_left = complex(-2.1, 1.13)
    lower_right = complex(0.61, -1.07)
    expected = np.zeros((17, 23), dtype=np.uint8)
    actual = np.zeros((17, 23), dtype=np.uint8)
    render_band(expected, bounds, upper_left, lower_right)
    render_band_array(actual, bounds, upper_left, lower_right)
    np.testing.assert_array_equal(actual, expected)
    assert expected.min() == 0
    assert expected.max() == 255


def test_sample_grid_matches_pixel_to_point():
    bounds = (9, 6)
    upper_left = complex(-1.2, 0.35)
    lower_right = complex(-1.0, 0.20)
    re, im = sample_grid(bounds, upper_left, lower_right)
    assert re.shape == im.shape == (6, 9)
    for row in range(6):
        for col in range(9):
            point = pixel_to_point(bounds, (col, row), upper_left, lower_right)
            assert re[row, col] == point.real
            assert im[row, col] == point.imag


def test_escape_counts_matches_escape_time():
    points = [0j, complex(4, 4), complex(-1, 1), complex(-0.75, 0.1), complex(0.3, 0.5), complex(-1.25, 0.02)]
    cr = np.array([p.real for p in points])
    ci = np.array([p.imag for p in points])
    counts = escape_counts(cr, ci, 500)
    expected = [-1 if escape_time(p, 500) is None else escape_time(p, 500) for p in points]
    assert counts.tolist() == expected
