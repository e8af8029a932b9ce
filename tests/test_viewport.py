import itertools

import pytest

from hp_fractal.core.exceptions import ConfigurationError
from hp_fractal.core.precision import PrecisionConfig, Vector2
from hp_fractal.core.viewport import Viewport, ViewportMapper, viewport_from_center

SEAHORSE_X = "-0.743643887037158704752191506114774"
SEAHORSE_Y = "0.131825904205311970493132056385139"


class TestViewportFromCenter:

    def test_reference_view(self, precision):
        viewport = viewport_from_center(precision, "-0.75", "0.0", "3.5")
        assert viewport.upper == Vector2(precision.number("-2.5"), precision.number("1.0"))
        assert viewport.lower == Vector2(precision.number("1.0"), precision.number("-1.0"))

    def test_upper_corner_has_smaller_x_and_larger_y(self, precision):
        viewport = viewport_from_center(precision, "0.1", "-0.2", "0.01")
        assert viewport.upper.x < viewport.lower.x
        assert viewport.upper.y > viewport.lower.y

    @pytest.mark.parametrize("zoom", ["0", "-1"])
    def test_non_positive_zoom(self, precision, zoom):
        with pytest.raises(ConfigurationError):
            viewport_from_center(precision, "0", "0", zoom)

    def test_double_collapses_at_deep_zoom(self):
        with pytest.raises(ConfigurationError):
            viewport_from_center(PrecisionConfig('double'), SEAHORSE_X, SEAHORSE_Y, "1e-60")


class TestViewportMapper:

    def test_example_pixels(self, example_mapper, precision):
        assert example_mapper.pixel_to_plane(0, 0) == Vector2(precision.number("-2.5"),
                                                               precision.number("1.0"))
        assert example_mapper.pixel_to_plane(1, 0).x == precision.number("-1.625")
        assert example_mapper.pixel_to_plane(0, 1).y == precision.number(0)

    def test_example_round_trip(self, example_mapper):
        for col, row in itertools.product(range(4), range(2)):
            assert example_mapper.plane_to_pixel(example_mapper.pixel_to_plane(col, row)) == (col, row)

    @pytest.mark.parametrize("width, height", [(1, 1), (7, 3), (64, 36), (13, 29)])
    def test_round_trip_is_exact(self, precision, width, height):
        viewport = viewport_from_center(precision, "-0.75", "0.0", "3.5")
        mapper = ViewportMapper(viewport, width, height, precision)
        for col, row in itertools.product(range(width), range(height)):
            assert mapper.plane_to_pixel(mapper.pixel_to_plane(col, row)) == (col, row)

    def test_round_trip_at_deep_zoom(self, precision):
        viewport = viewport_from_center(precision, SEAHORSE_X, SEAHORSE_Y, "1e-60")
        mapper = ViewportMapper(viewport, 32, 18, precision)
        seen = set()
        for col, row in itertools.product(range(32), range(18)):
            point = mapper.pixel_to_plane(col, row)
            seen.add((point.x, point.y))
            assert mapper.plane_to_pixel(point) == (col, row)
        assert len(seen) == 32 * 18

    def test_insufficient_precision_rejected(self):
        low = PrecisionConfig(20)
        viewport = viewport_from_center(low, SEAHORSE_X, SEAHORSE_Y, "1e-21")
        with pytest.raises(ConfigurationError, match="cannot resolve"):
            ViewportMapper(viewport, 8, 4, low)

    def test_double_rejected_past_its_resolution(self):
        double = PrecisionConfig('double')
        viewport = viewport_from_center(double, SEAHORSE_X, SEAHORSE_Y, "1e-14")
        with pytest.raises(ConfigurationError):
            ViewportMapper(viewport, 640, 360, double)

    def test_round_trip_in_double(self):
        double = PrecisionConfig('double')
        viewport = viewport_from_center(double, "-0.75", "0.0", "3.5")
        mapper = ViewportMapper(viewport, 97, 31, double)
        for col, row in itertools.product(range(97), range(31)):
            assert mapper.plane_to_pixel(mapper.pixel_to_plane(col, row)) == (col, row)

    def test_lower_corner_is_past_the_grid(self, example_mapper, example_viewport):
        assert example_mapper.plane_to_pixel(example_viewport.lower) == (4, 2)

    def test_degenerate_viewport(self, precision):
        same = Vector2(precision.number(1), precision.number(1))
        with pytest.raises(ConfigurationError):
            ViewportMapper(Viewport(same, Vector2(precision.number(1), precision.number(0))),
                           4, 2, precision)
        with pytest.raises(ConfigurationError):
            ViewportMapper(Viewport(same, Vector2(precision.number(0), precision.number(1))),
                           4, 2, precision)

    @pytest.mark.parametrize("width, height", [(0, 2), (4, 0), (-1, 2), (2.0, 2)])
    def test_invalid_frame_size(self, example_viewport, precision, width, height):
        with pytest.raises(ConfigurationError):
            ViewportMapper(example_viewport, width, height, precision)
