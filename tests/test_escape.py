import math

import numpy as np
import pytest

from mandelrender import Viewport, colorize, colorize_row, iterate, iterate_row_tensor, map_pixel


def test_map_pixel_is_linear_in_each_axis():
    viewport = Viewport(-2.0, 2.0, -2.0, 2.0)
    assert map_pixel(0, 0, 4, 4, viewport) == complex(-2.0, -2.0)
    assert map_pixel(2, 2, 4, 4, viewport) == 0j
    assert map_pixel(3, 1, 4, 4, viewport) == complex(1.0, -1.0)


def test_map_pixel_uses_width_and_height_independently():
    viewport = Viewport(-2.2, 1.0, -1.6, 1.6)
    c = map_pixel(800, 300, 1600, 1200, viewport)
    assert c.real == pytest.approx(-0.6)
    assert c.imag == pytest.approx(-0.8)


@pytest.mark.parametrize("max_iterations", [1, 2, 50, 1000])
def test_origin_never_escapes(max_iterations):
    n, z = iterate(0j, max_iterations)
    assert n == max_iterations
    assert z == 0j


def test_far_point_escapes_on_the_first_step():
    assert iterate(3 + 0j, 10) == (0, 3 + 0j)
    assert iterate(3 + 0j, 1) == (0, 3 + 0j)


def test_escape_step_and_last_iterate():
    # 0 -> 1 -> 2 -> 5; |2|^2 == 4 is not an escape.
    assert iterate(1 + 0j, 100) == (2, 5 + 0j)


def test_period_two_cycle_is_bounded():
    # -1 -> 0 -> -1 -> ...; an even number of steps ends on 0.
    assert iterate(-1 + 0j, 200) == (200, 0j)


def test_bounded_points_map_to_the_start_of_the_gradient():
    assert colorize(100, 0.3 + 0.1j, 100, smooth=True) == 0.0
    assert colorize(100, 0.3 + 0.1j, 100, smooth=False) == 0.0


@pytest.mark.parametrize("n", [0, 1, 7, 49])
def test_discrete_coloring_is_iteration_fraction(n):
    assert colorize(n, 3 + 4j, 50, smooth=False) == n / 50


def test_smooth_coloring_formula():
    z = 5 + 0j
    expected = (2 + 1 - math.log(math.log(5.0)) / math.log(2)) / 100
    assert colorize(2, z, 100, smooth=True) == pytest.approx(expected)


def test_smooth_coloring_zero_magnitude_falls_back_to_iteration_count():
    assert colorize(3, 0j, 10, smooth=True) == pytest.approx(0.3)


def test_smooth_coloring_negative_estimate_falls_back_to_iteration_count():
    # log(log(1e6)) / log 2 is about 3.7, so the estimate for n=0 is negative.
    assert colorize(0, 1e6 + 0j, 10, smooth=True) == 0.0
    assert colorize(1, 1e9 + 0j, 10, smooth=True) == pytest.approx(0.1)


def test_tensor_kernel_matches_scalar_iteration_counts():
    cs = np.array([0, 3, 1, -1, 0.5, 1j, -2], dtype=np.complex128)
    ns, zs = iterate_row_tensor(cs, 100)
    expected = [iterate(complex(c), 100) for c in cs]
    assert ns.tolist() == [n for n, _ in expected]
    np.testing.assert_allclose(zs, [z for _, z in expected])


def test_tensor_kernel_freezes_escaped_values():
    ns, zs = iterate_row_tensor(np.array([3 + 0j, 1 + 0j]), 20)
    assert ns.tolist() == [0, 2]
    assert zs.tolist() == [3 + 0j, 5 + 0j]


@pytest.mark.parametrize("smooth", [False, True])
def test_vectorized_coloring_matches_scalar(smooth):
    ns = np.array([0, 2, 10, 5, 0])
    zs = np.array([3 + 0j, 5 + 0j, 0.1j, 0j, 1e6 + 0j])
    expected = [colorize(int(n), complex(z), 10, smooth) for n, z in zip(ns, zs)]
    np.testing.assert_allclose(colorize_row(ns, zs, 10, smooth), expected)


def test_viewport_extent_drives_the_mapping():
    viewport = Viewport(-1.5, 0.5, -0.25, 0.75)
    assert (viewport.width, viewport.height) == (2.0, 1.0)
    c = map_pixel(10, 5, 20, 10, viewport)
    assert c == complex(-1.5 + 0.5 * viewport.width, -0.25 + 0.5 * viewport.height)
