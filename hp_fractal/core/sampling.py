"""
Frame sampling: classify and color one plane coordinate per pixel cell.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional
import logging

from .math_functions import PointClassifier
from .precision import Vector2
from .viewport import ViewportMapper
from ..rendering.coloring import ColorRGB, Colorizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplePoint:
    """Result of classifying one plane coordinate."""

    plane: Vector2
    color: ColorRGB


class FrameSampler:
    """Drive the classifier and colorizer over every cell of the pixel grid."""

    def __init__(self, mapper: ViewportMapper, classifier: PointClassifier,
                 colorizer: Optional[Colorizer] = None, log_every: int = 100):
        """
        Initialize frame sampler.

        Args:
            mapper: Pixel <-> plane conversions for the frame
            classifier: Escape-time classifier
            colorizer: Color mapping (defaults to the blue ramp)
            log_every: Log progress every this many rows
        """
        self.mapper = mapper
        self.classifier = classifier
        self.colorizer = colorizer or Colorizer()
        self.log_every = max(1, log_every)

    @property
    def width(self) -> int:
        return self.mapper.width

    @property
    def height(self) -> int:
        return self.mapper.height

    def sample_pixel(self, col: int, row: int) -> SamplePoint:
        point = self.mapper.pixel_to_plane(col, row)
        result = self.classifier.classify(point.to_complex())
        return SamplePoint(point, self.colorizer.colorize(result))

    def iter_rows(self, row_start: int = 0, row_end: Optional[int] = None) -> Iterator[SamplePoint]:
        """Yield samples for rows ``[row_start, row_end)``, left to right."""
        if row_end is None:
            row_end = self.height
        if not 0 <= row_start <= row_end <= self.height:
            raise ValueError(f"Invalid row range [{row_start}, {row_end}) "
                             f"for height {self.height}")

        for row in range(row_start, row_end):
            for col in range(self.width):
                yield self.sample_pixel(col, row)

    def sample(self, progress_callback: Optional[Callable[[int, int], None]] = None) -> List[SamplePoint]:
        """
        Sample the whole frame in row-major order.

        Args:
            progress_callback: Called as ``callback(rows_done, rows_total)``

        Returns:
            Exactly ``width * height`` samples, one per pixel cell
        """
        logger.info(f"Sampling {self.width}x{self.height} frame "
                    f"({self.classifier.max_iter} max iterations)")

        samples = []
        for row in range(self.height):
            samples.extend(self.iter_rows(row, row + 1))

            if (row + 1) % self.log_every == 0:
                logger.info(f"Processing row {row + 1}/{self.height}")
            if progress_callback:
                progress_callback(row + 1, self.height)

        logger.info("Sampling complete")
        return samples
