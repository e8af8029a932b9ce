import math

import pytest

from hp_fractal.core.exceptions import ConfigurationError
from hp_fractal.core.math_functions import BOUNDED, EscapeResult, PointClassifier
from hp_fractal.core.precision import HighPrecisionComplex, PrecisionConfig
from hp_fractal.rendering.coloring import Colorizer


def cardioid_point(precision, r, t):
    """Image of r*e^(it) under mu/2 - mu^2/4; inside the main cardioid for r < 1."""
    x = r * math.cos(t) / 2 - r * r * math.cos(2 * t) / 4
    y = r * math.sin(t) / 2 - r * r * math.sin(2 * t) / 4
    return HighPrecisionComplex(precision.number(repr(x)), precision.number(repr(y)))


def bulb_point(precision, r, t):
    return HighPrecisionComplex(precision.number(repr(-1 + r * math.cos(t))),
                                precision.number(repr(r * math.sin(t))))


class TestKnownPoints:

    def test_origin_is_bounded(self, classifier, point):
        c = point(0, 0)
        assert classifier.in_main_cardioid(c)
        result = classifier.classify(c)
        assert result == BOUNDED
        assert result.bounded
        assert Colorizer().colorize(result).to_tuple() == (0, 0, 0)

    def test_minus_one_in_period2_bulb(self, classifier, point):
        c = point(-1, 0)
        assert classifier.in_period2_bulb(c)
        assert not classifier.in_main_cardioid(c)
        assert classifier.classify(c) == BOUNDED

    def test_two_plus_two_i_escapes_at_second_step(self, classifier, point):
        # z1 = 2+2i sits on the boundary; z2 = 2+10i is past it.
        result = classifier.classify(point(2, 2))
        assert result.escaped
        assert result == EscapeResult.escaped_at(1)
        assert Colorizer().colorize(result).to_tuple() == (0, 0, 3)

    def test_viewport_corner_escapes_immediately(self, classifier, point):
        result = classifier.classify(point("-2.5", "1.0"))
        assert result == EscapeResult(0)
        # Escaping at step 0 is as black as a bounded point; only the result tells them apart.
        assert Colorizer().colorize(result).to_tuple() == (0, 0, 0)

    def test_iterate_applies_shortcut_on_request(self, classifier, point, monkeypatch):
        c = point("-0.1", "0.1")
        assert classifier.iterate(c) == BOUNDED

        def no_orbit(*args):
            raise AssertionError("orbit should not run for a shortcut point")

        monkeypatch.setattr(classifier, "orbit", no_orbit)
        assert classifier.iterate(c, use_shortcut=True) == BOUNDED
        assert classifier.classify(c) == BOUNDED

    def test_components_tested_not_modulus(self, classifier, point):
        # |1.5 + 1.5i| > 2, but neither component is, so step 0 does not escape.
        assert classifier.classify(point("1.5", "1.5")) == EscapeResult(1)

    def test_period4_bulb_needs_full_iteration(self, classifier, point):
        c = point("-1.3", 0)
        assert not classifier.in_main_cardioid(c)
        assert not classifier.in_period2_bulb(c)
        assert classifier.classify(c) == BOUNDED

    def test_slow_escape_near_cusp_is_blue(self, classifier, point):
        result = classifier.classify(point("0.3", 0))
        assert result.escaped
        assert 0 < result.iteration < classifier.max_iter
        color = Colorizer().colorize(result)
        assert color.r == 0 and color.g == 0
        assert color.b == Colorizer.blue_level(result.iteration) > 0

    def test_str(self):
        assert str(BOUNDED) == "bounded"
        assert str(EscapeResult(3)) == "escaped at iteration 3"


class TestClassifierProperties:

    def test_deterministic(self, classifier, point):
        for x, y in [("-0.75", "0.1"), ("0.3", "0.5"), ("-1.8", "0.01"), ("0.26", "0")]:
            c = point(x, y)
            assert classifier.classify(c) == classifier.classify(c)

    @pytest.mark.parametrize("step", range(12))
    def test_cardioid_shortcut_matches_iteration(self, fast_precision, step):
        classifier = PointClassifier(fast_precision, max_iter=100)
        c = cardioid_point(fast_precision, 0.95, step * math.pi / 6 + 0.1)
        assert classifier.in_main_cardioid(c)
        assert classifier.classify(c) == BOUNDED
        assert classifier.iterate(c) == BOUNDED

    @pytest.mark.parametrize("step", range(8))
    def test_bulb_shortcut_matches_iteration(self, fast_precision, step):
        classifier = PointClassifier(fast_precision, max_iter=100)
        c = bulb_point(fast_precision, 0.24, step * math.pi / 4)
        assert classifier.in_period2_bulb(c)
        assert classifier.classify(c) == BOUNDED
        assert classifier.iterate(c) == BOUNDED

    @pytest.mark.parametrize("x, y", [
        ("0.3", "0"), ("-2.1", "0"), ("0.5", "0.5"), ("-0.75", "0.2"), ("-1.5", "0.5"), ("1", "0.1"),
    ])
    def test_escape_monotonicity(self, classifier, point, x, y):
        c = point(x, y)
        result = classifier.classify(c)
        assert result.escaped
        assert 0 <= result.iteration < classifier.max_iter

        orbit = list(classifier.orbit(c, result.iteration + 1))
        for z in orbit[:-1]:
            assert not z.exceeds(classifier.escape_boundary)
        assert orbit[-1].exceeds(classifier.escape_boundary)

    def test_double_backend_agrees_on_simple_points(self, classifier, point):
        double = PrecisionConfig('double')
        fast = PointClassifier(double, max_iter=100)
        for x, y in [("0", "0"), ("2", "2"), ("-1.3", "0"), ("1.5", "1.5"), ("-2.5", "1")]:
            c = HighPrecisionComplex(double.number(x), double.number(y))
            assert fast.classify(c) == classifier.classify(point(x, y))


class TestClassifierConfiguration:

    @pytest.mark.parametrize("max_iter", [0, -1, 2.5, True])
    def test_invalid_iteration_bound(self, precision, max_iter):
        with pytest.raises(ConfigurationError):
            PointClassifier(precision, max_iter=max_iter)

    @pytest.mark.parametrize("boundary", ["0", "-2"])
    def test_invalid_boundary(self, precision, boundary):
        with pytest.raises(ConfigurationError):
            PointClassifier(precision, escape_boundary=boundary)

    def test_iteration_cap(self, precision, point):
        # 0.3 escapes, but not within a single step.
        short = PointClassifier(precision, max_iter=1)
        assert short.classify(point("0.3", 0)) == BOUNDED

    def test_larger_boundary_delays_escape(self, precision, point):
        c = point("1.5", "1.5")
        wide = PointClassifier(precision, escape_boundary="1000")
        assert wide.classify(c).iteration > 1
