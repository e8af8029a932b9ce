"""
Arbitrary-precision Mandelbrot set rendering.

This library renders the Mandelbrot set with a configurable number of
significant digits, so deep zooms keep adjacent pixels distinct long after
double precision has run out.

Key Features:
- Arbitrary precision arithmetic through mpmath (or numpy float64 previews)
- Closed-form cardioid and period-2 bulb shortcut
- Optional multi-process sampling over disjoint row ranges
- PNG/TIFF/JPEG/PPM export with embedded render metadata

Example usage:
    >>> from hp_fractal import FractalRenderer, RenderConfig
    >>> renderer = FractalRenderer(RenderConfig(width=320, height=180, precision=50))
    >>> renderer.render_to_file("out.png")
"""

__version__ = "1.0.0"
__author__ = "hp-fractal developers"

from hp_fractal.core.exceptions import ConfigurationError, EncodingError, PixelIndexError
from hp_fractal.core.precision import PrecisionConfig, HighPrecisionComplex, Vector2
from hp_fractal.core.math_functions import BOUNDED, EscapeResult, PointClassifier
from hp_fractal.core.viewport import Viewport, ViewportMapper, viewport_from_center
from hp_fractal.core.sampling import FrameSampler, SamplePoint
from hp_fractal.rendering.coloring import ColorRGB, Colorizer
from hp_fractal.rendering.assembly import ImageAssembler, PixelBuffer
from hp_fractal.rendering.image_output import ImageExporter, RenderMetadata

# Main API classes
from hp_fractal.api import FractalRenderer, RenderConfig

__all__ = [
    "FractalRenderer",
    "RenderConfig",
    "PrecisionConfig",
    "HighPrecisionComplex",
    "Vector2",
    "EscapeResult",
    "BOUNDED",
    "PointClassifier",
    "Viewport",
    "ViewportMapper",
    "viewport_from_center",
    "FrameSampler",
    "SamplePoint",
    "ColorRGB",
    "Colorizer",
    "ImageAssembler",
    "PixelBuffer",
    "ImageExporter",
    "RenderMetadata",
    "ConfigurationError",
    "PixelIndexError",
    "EncodingError",
]
