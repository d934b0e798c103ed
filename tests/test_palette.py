import pytest

from mandelrender import ColorStop, ConfigurationError, Gradient, interpolate, normalize, parse_color

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 128)


def _positions(gradient):
    return [stop.position for stop in gradient.stops]


def test_unspecified_positions_are_spread_evenly():
    gradient = normalize(Gradient.from_pairs("even", [(0, BLACK), (0, RED), (0, WHITE)]))
    assert _positions(gradient) == [0.0, 0.5, 1.0]
    assert [stop.color for stop in gradient.stops] == [BLACK, RED, WHITE]


def test_anchors_pin_endpoints_and_fill_spans_by_index():
    gradient = normalize(Gradient.from_pairs("anchored", [(0, BLACK), (0.5, RED), (0, BLUE), (0, WHITE)]))
    assert _positions(gradient) == pytest.approx([0.0, 0.5, 0.75, 1.0])


def test_fully_specified_positions_are_sorted_and_clamped_without_forcing_endpoints():
    gradient = normalize(Gradient.from_pairs("explicit", [(0.9, RED), (0.2, BLACK), (1.5, WHITE)]))
    assert _positions(gradient) == [0.2, 0.9, 1.0]
    assert gradient.stops[0].color == BLACK


def test_out_of_order_anchors_end_up_sorted():
    gradient = normalize(Gradient.from_pairs("shuffled", [(0, BLACK), (0.8, RED), (0.3, BLUE), (0, WHITE)]))
    positions = _positions(gradient)
    assert positions == sorted(positions)
    assert positions[0] == 0.0 and positions[-1] == 1.0
    assert all(0.0 <= p <= 1.0 for p in positions)


def test_single_stop_collapses_to_zero():
    gradient = normalize(Gradient.from_pairs("one", [(0.7, RED)]))
    assert gradient.stops == (ColorStop(0.0, RED),)
    assert interpolate(gradient, -3.0) == RED
    assert interpolate(gradient, 0.5) == RED
    assert interpolate(gradient, 4.0) == RED


def test_normalize_returns_a_new_value_and_is_idempotent():
    original = Gradient.from_pairs("template", [(0, BLACK), (0.3, RED), (0, WHITE)])
    once = normalize(original)
    assert once is not original
    assert _positions(original) == [0.0, 0.3, 0.0]
    assert normalize(once) == once


def test_empty_gradient_defaults_to_opaque_black():
    assert interpolate(Gradient("empty"), 0.5) == (0, 0, 0, 255)
    assert normalize(Gradient("empty")).stops == ()


def test_endpoints_return_stop_colors():
    gradient = normalize(Gradient.from_pairs("bw", [(0, BLACK), (1, WHITE)]))
    assert interpolate(gradient, 0.0) == gradient.stops[0].color
    assert interpolate(gradient, 1.0) == gradient.stops[-1].color
    assert interpolate(gradient, -0.5) == BLACK
    assert interpolate(gradient, 7.0) == WHITE


def test_channels_including_alpha_are_interpolated_linearly():
    gradient = normalize(Gradient.from_pairs("alpha", [(0, (0, 0, 0, 0)), (1, (200, 100, 40, 255))]))
    assert interpolate(gradient, 0.25) == (50, 25, 10, 64)


def test_interpolation_picks_the_bracketing_segment():
    gradient = normalize(Gradient.from_pairs("three", [(0, BLACK), (0.5, RED), (1, WHITE)]))
    assert interpolate(gradient, 0.5) == RED
    assert interpolate(gradient, 0.75) == (255, 128, 128, 255)


def test_interpolation_is_continuous():
    gradient = normalize(Gradient.from_pairs("cont", [(0, BLACK), (0.3, RED), (0.6, BLUE), (1, WHITE)]))
    delta = 1e-3
    steps = int(1 / delta)
    previous = interpolate(gradient, 0.0)
    for i in range(1, steps + 1):
        current = interpolate(gradient, i * delta)
        for a, b in zip(previous, current):
            # Largest slope is 255 per 0.3 of position, plus one unit of rounding.
            assert abs(a - b) <= 255 / 0.3 * delta + 1
        previous = current


def test_coincident_stops_do_not_divide_by_zero():
    gradient = Gradient("step", (ColorStop(0.0, BLACK), ColorStop(0.5, RED), ColorStop(0.5, WHITE), ColorStop(1.0, BLUE)))
    assert interpolate(gradient, 0.5) in (RED, WHITE)


def test_gradient_methods_delegate():
    gradient = Gradient.from_pairs("bw", [(0, BLACK), (0, WHITE)]).normalized()
    assert gradient.positions == (0.0, 1.0)
    assert gradient.interpolate(1.0) == WHITE


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#ff8000", (255, 128, 0, 255)),
        ("00ff0080", (0, 255, 0, 128)),
        ((1, 2, 3), (1, 2, 3, 255)),
        ([4, 5, 6, 7], (4, 5, 6, 7)),
    ],
)
def test_parse_color(value, expected):
    assert parse_color(value) == expected


@pytest.mark.parametrize("value", ["#fff", "#gg0000", (1, 2), (0, 0, 300)])
def test_parse_color_rejects_malformed_values(value):
    with pytest.raises(ConfigurationError):
        parse_color(value)
