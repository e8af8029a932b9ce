"""
Escape-time coloring for fractal rendering.

Bounded points are black; escaped points get a blue ramp proportional to
their escape iteration, saturating after ``Colorizer.RAMP_ITERATIONS``.
"""

from dataclasses import dataclass
from typing import Tuple
import logging

from ..core.math_functions import EscapeResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorRGB:
    """8-bit RGB color representation."""
    r: int
    g: int
    b: int

    def __post_init__(self):
        """Validate RGB values."""
        for component in (self.r, self.g, self.b):
            if not 0 <= component <= 255:
                raise ValueError("RGB components must be between 0 and 255")

    def to_tuple(self) -> Tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)


BLACK = ColorRGB(0, 0, 0)


class Colorizer:
    """Map an escape result to a color."""

    RAMP_ITERATIONS = 64
    CHANNEL_MAX = 255

    def __init__(self, inside_color: ColorRGB = BLACK):
        self.inside_color = inside_color

    def colorize(self, result: EscapeResult) -> ColorRGB:
        """
        Apply escape-time coloring.

        Args:
            result: Classification of one point

        Returns:
            ``inside_color`` for bounded points, otherwise a shade of blue
        """
        if result.bounded:
            return self.inside_color
        return ColorRGB(0, 0, self.blue_level(result.iteration))

    @classmethod
    def blue_level(cls, iteration: int) -> int:
        """floor(clamp(iteration, 0, 64) / 64 * 255), in exact integer arithmetic."""
        clamped = min(max(iteration, 0), cls.RAMP_ITERATIONS)
        return (clamped * cls.CHANNEL_MAX) // cls.RAMP_ITERATIONS

    __call__ = colorize
