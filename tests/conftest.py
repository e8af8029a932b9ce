import pytest

from hp_fractal.core.math_functions import PointClassifier
from hp_fractal.core.precision import HighPrecisionComplex, PrecisionConfig, Vector2
from hp_fractal.core.viewport import Viewport, ViewportMapper


@pytest.fixture
def precision():
    return PrecisionConfig(100)


@pytest.fixture
def fast_precision():
    return PrecisionConfig(30)


@pytest.fixture
def classifier(precision):
    return PointClassifier(precision, max_iter=100, escape_boundary="2.0")


@pytest.fixture
def point(precision):
    def make(x, y):
        return HighPrecisionComplex(precision.number(x), precision.number(y))
    return make


@pytest.fixture
def example_viewport(precision):
    """upper=(-2.5, 1.0), lower=(1.0, -1.0)"""
    return Viewport(Vector2(precision.number("-2.5"), precision.number("1.0")),
                    Vector2(precision.number("1.0"), precision.number("-1.0")))


@pytest.fixture
def example_mapper(example_viewport, precision):
    return ViewportMapper(example_viewport, 4, 2, precision)
