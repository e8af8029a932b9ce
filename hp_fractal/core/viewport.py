"""
Mapping between a rectangle of the complex plane and a pixel grid.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union
import logging

from .exceptions import ConfigurationError
from .precision import PrecisionConfig, Vector2

logger = logging.getLogger(__name__)

# Frame width over frame height of the default 640x360 render.
DEFAULT_ASPECT = "1.75"


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the plane; ``upper`` maps to pixel (0, 0)."""

    upper: Vector2
    lower: Vector2

    def validate(self) -> None:
        if self.upper.x == self.lower.x:
            raise ConfigurationError("Degenerate viewport: corners share the same x")
        if self.upper.y == self.lower.y:
            raise ConfigurationError("Degenerate viewport: corners share the same y")


def viewport_from_center(precision: PrecisionConfig,
                         center_x: Union[str, Any], center_y: Union[str, Any],
                         zoom: Union[str, Any],
                         aspect: Union[str, Any] = DEFAULT_ASPECT) -> Viewport:
    """
    Build the viewport for a centre point and a zoom level.

    ``zoom`` is the width of the rendered slice of the real axis; the height
    is ``zoom / aspect``. The upper corner carries the smaller x and the
    larger y.
    """
    cx = precision.number(center_x)
    cy = precision.number(center_y)
    zoom = precision.number(zoom)
    aspect = precision.number(aspect)

    if zoom <= 0:
        raise ConfigurationError("zoom must be positive")
    if aspect <= 0:
        raise ConfigurationError("aspect must be positive")

    height = zoom / aspect

    top_y = height / 2 + cy
    bottom_y = -(height / 2) + cy
    left_x = -(zoom / 2) + cx
    right_x = zoom / 2 + cx

    viewport = Viewport(Vector2(left_x, top_y), Vector2(right_x, bottom_y))
    viewport.validate()
    return viewport


class ViewportMapper:
    """Pixel <-> plane conversions for a fixed viewport and frame size."""

    def __init__(self, viewport: Viewport, width: int, height: int,
                 precision: PrecisionConfig):
        """
        Initialize viewport mapper.

        Args:
            viewport: Plane rectangle to sample
            width, height: Frame resolution in pixels
            precision: Numeric backend of the viewport coordinates
        """
        for name, value in (('width', width), ('height', height)):
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        viewport.validate()

        self.viewport = viewport
        self.width = width
        self.height = height
        self.precision = precision

        self.span_x = viewport.lower.x - viewport.upper.x
        self.span_y = viewport.lower.y - viewport.upper.y

        # Plane distance between neighbouring pixel samples
        self.x_scale = self.span_x / width
        self.y_scale = self.span_y / height

        self._half = precision.number(1) / 2

        self._check_resolution()

    def _check_resolution(self) -> None:
        """
        Reject frames whose precision cannot separate neighbouring pixels.

        The coordinates of largest magnitude sit at the frame edges, so the
        first two and last two columns and rows are the ones that collapse
        first.
        """
        cols = sorted({0, min(1, self.width - 1), max(self.width - 2, 0), self.width - 1})
        rows = sorted({0, min(1, self.height - 1), max(self.height - 2, 0), self.height - 1})

        for row in rows:
            for col in cols:
                mapped = self.plane_to_pixel(self.pixel_to_plane(col, row))
                if mapped != (col, row):
                    raise ConfigurationError(
                        f"Precision {self.precision.precision!r} cannot resolve a "
                        f"{self.width}x{self.height} frame at this zoom: pixel ({col}, {row}) "
                        f"maps back to {mapped}; increase precision"
                    )

    def pixel_to_plane(self, col: int, row: int) -> Vector2:
        """Plane coordinate sampled for the top-left of pixel cell (col, row)."""
        x = self.viewport.upper.x + self.x_scale * col
        y = self.viewport.upper.y + self.y_scale * row
        return Vector2(x, y)

    def plane_to_pixel(self, point: Vector2) -> Tuple[int, int]:
        """
        Pixel cell whose sample coordinate is ``point``.

        Rounds to the nearest cell, so coordinates produced by
        ``pixel_to_plane`` map back to exactly the same (col, row).
        """
        col = (point.x - self.viewport.upper.x) / self.span_x * self.width
        row = (point.y - self.viewport.upper.y) / self.span_y * self.height
        return (self.precision.floor(col + self._half),
                self.precision.floor(row + self._half))

    def __repr__(self) -> str:
        fmt = self.precision.format_number
        upper, lower = self.viewport.upper, self.viewport.lower
        return (f"ViewportMapper(({fmt(upper.x)}, {fmt(upper.y)}) -> "
                f"({fmt(lower.x)}, {fmt(lower.y)}), {self.width}x{self.height})")
